"""Abstract base class for session storage.

This module defines the interface for saving and finding session snapshots.
The abstraction hides:
- Storage format and location
- How snapshots are named and ordered
"""

from abc import ABC, abstractmethod
from datetime import datetime

from ..conversation.manager import ConversationManager
from ..errors import SessionNotFoundError
from ..protocols import Selector
from .models import Session, SessionTarget


class SessionStore(ABC):
    """Abstract session snapshot store."""

    @abstractmethod
    def save(self, session: Session, snapshot_id: str | None = None) -> str:
        """Persist ``session``.

        Args:
            session: Snapshot to write
            snapshot_id: Overwrite this snapshot instead of creating a new one

        Returns:
            Id of the written snapshot
        """

    @abstractmethod
    def load(self, snapshot_id: str) -> Session:
        """Read one snapshot by id."""

    @abstractmethod
    def list_sessions(self) -> list[Session]:
        """All snapshots, newest first."""

    @abstractmethod
    def clear(self) -> int:
        """Delete every snapshot and return how many were removed."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    def load_latest(self) -> Session:
        """Most recent snapshot.

        Raises:
            SessionNotFoundError: If nothing has been saved
        """
        sessions = self.list_sessions()
        if not sessions:
            raise SessionNotFoundError("no saved sessions found")
        return sessions[0]

    def search(self, selector: Selector, exact: bool = False) -> Session | None:
        """Let the user pick a snapshot by the text of its user turns.

        Args:
            selector: External chooser; it does the exact or fuzzy matching
            exact: Ask the chooser for substring matching

        Returns:
            The chosen session, or None if the choice was dismissed

        Raises:
            SessionNotFoundError: If nothing has been saved
        """
        sessions = self.list_sessions()
        if not sessions:
            raise SessionNotFoundError("no saved sessions found")
        items = [session_label(session) for session in sessions]
        index = selector.select(items, "session: ", exact=exact)
        if index is None or not 0 <= index < len(sessions):
            return None
        return sessions[index]


def session_label(session: Session) -> str:
    stamp = datetime.fromtimestamp(session.timestamp).strftime("%Y-%m-%d %H:%M:%S")
    return f"{stamp} [{session.provider}/{session.model}] {session.user_text()}"


def restore_session(session: Session, conversation: ConversationManager) -> SessionTarget:
    """Replace the conversation with ``session`` and report where it ran.

    The caller reconnects to the returned provider and model.
    """
    conversation.load(session.messages, session.history)
    conversation.platform = session.provider
    conversation.model = session.model
    return SessionTarget(
        provider=session.provider,
        model=session.model,
        base_url=session.base_url,
    )
