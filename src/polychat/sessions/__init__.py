"""Session persistence for polychat.

Saves conversation snapshots so a later invocation can continue them.
"""

from .base import SessionStore, restore_session, session_label
from .factory import create_session_store
from .models import Session, SessionTarget

__all__ = [
    "Session",
    "SessionStore",
    "SessionTarget",
    "create_session_store",
    "restore_session",
    "session_label",
]
