"""Shared in-flight request state.

The dispatcher is the only writer. A process-level interrupt handler reads
it to decide between cancelling the active request and exiting.
"""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RequestState:
    """Whether a chat request is running and how to cancel it."""

    def __init__(self) -> None:
        self.is_in_flight: bool = False
        self.cancel_handle: Callable[[], None] | None = None

    def mark_in_flight(self, cancel_handle: Callable[[], None]) -> None:
        self.is_in_flight = True
        self.cancel_handle = cancel_handle

    def mark_idle(self) -> None:
        self.is_in_flight = False
        self.cancel_handle = None

    def interrupt(self) -> bool:
        """Cancel the active request.

        Returns:
            True if a request was cancelled, False if nothing was in flight
        """
        handle = self.cancel_handle
        if not self.is_in_flight or handle is None:
            return False
        logger.debug("Cancelling in-flight request")
        handle()
        return True
