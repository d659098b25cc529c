"""Numbered-list selector for the terminal.

A minimal stand-in for a fuzzy finder: the user types a filter, sees the
matching entries numbered, and picks one by number.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt

DEFAULT_PAGE_SIZE = 30


def is_subsequence(query: str, text: str) -> bool:
    """True if the characters of ``query`` appear in ``text`` in order."""
    remaining = iter(text)
    return all(char in remaining for char in query)


def filter_items(items: Sequence[str], query: str, exact: bool = False) -> list[int]:
    """Indices of ``items`` matching ``query``, case-insensitively.

    Exact mode matches substrings; otherwise characters only need to appear
    in order, the way fuzzy finders match.
    """
    needle = query.strip().lower()
    if not needle:
        return list(range(len(items)))
    if exact:
        return [i for i, item in enumerate(items) if needle in item.lower()]
    needle = needle.replace(" ", "")
    return [i for i, item in enumerate(items) if is_subsequence(needle, item.lower())]


class ConsoleSelector:
    """Selector that prompts on a rich console."""

    def __init__(self, console: Console, page_size: int = DEFAULT_PAGE_SIZE):
        self._console = console
        self._page_size = page_size

    def select(self, items: Sequence[str], prompt: str, *, exact: bool = False) -> int | None:
        if not items:
            return None
        try:
            query = ""
            if len(items) > 1:
                query = self._console.input(f"[cyan]{prompt}[/cyan][dim](filter, enter for all)[/dim] ")
            matches = filter_items(items, query, exact)
            if not matches:
                self._console.print("[yellow]no matches[/yellow]")
                return None
            if len(matches) == 1:
                return matches[0]

            shown = matches[: self._page_size]
            for number, index in enumerate(shown, 1):
                self._console.print(f"[dim]{number:>3}[/dim] {escape(items[index])}", highlight=False)
            if len(matches) > len(shown):
                self._console.print(f"[dim]... {len(matches) - len(shown)} more, refine the filter[/dim]")

            number = IntPrompt.ask(
                f"[cyan]{prompt}[/cyan]",
                console=self._console,
                choices=[str(n) for n in range(1, len(shown) + 1)],
                show_choices=False,
                default=1,
            )
            return shown[number - 1]
        except (EOFError, KeyboardInterrupt):
            self._console.print()
            return None

    def multiselect(self, items: Sequence[str], prompt: str) -> list[int]:
        """Pick several items by number; an empty answer picks all of them."""
        if not items:
            return []
        for number, item in enumerate(items, 1):
            self._console.print(f"[dim]{number:>3}[/dim] {escape(item)}", highlight=False)
        try:
            answer = self._console.input(f"[cyan]{prompt}[/cyan][dim](numbers, enter for all)[/dim] ")
        except (EOFError, KeyboardInterrupt):
            self._console.print()
            return []
        return parse_numbers(answer, len(items))


def parse_numbers(answer: str, count: int) -> list[int]:
    """Turn ``"1, 3 4"`` into sorted 0-based indices; blank means everything.

    Numbers outside ``1..count`` and non-numeric words are ignored.
    """
    words = answer.replace(",", " ").split()
    if not words:
        return list(range(count))
    chosen = {int(word) - 1 for word in words if word.isdigit()}
    return sorted(index for index in chosen if 0 <= index < count)
