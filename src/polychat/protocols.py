"""Interfaces the core expects from its callers.

The core never renders UI. Interactive choices go through a ``Selector``
supplied by whoever drives the conversation (a CLI, a TUI, a test).
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class Selector(Protocol):
    """Pick entries out of a list of display strings.

    Implementations return indices of the chosen items so callers never
    re-parse rendered text.
    """

    def select(self, items: Sequence[str], prompt: str, *, exact: bool = False) -> int | None:
        """Single choice; None when the user dismissed it.

        ``exact`` asks for substring rather than fuzzy filtering.
        """
        ...

    def multiselect(self, items: Sequence[str], prompt: str) -> list[int]:
        """Any number of choices in list order; empty when dismissed."""
        ...
