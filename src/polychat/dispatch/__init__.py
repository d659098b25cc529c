"""Chat request dispatch with cooperative cancellation."""

from .dispatcher import RequestDispatcher
from .output import BufferSink, ConsoleSink, TokenSink
from .state import RequestState

__all__ = [
    "BufferSink",
    "ConsoleSink",
    "RequestDispatcher",
    "RequestState",
    "TokenSink",
]
