"""In-memory session store.

Simple dict-based storage for session-only use.
Data is lost when the application exits.
"""

import uuid

from ..errors import SessionNotFoundError
from .base import SessionStore
from .models import Session


class InMemorySessionStore(SessionStore):
    """In-memory session snapshots (process lifetime only).

    Suitable for tests or for running with persistence turned off.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def save(self, session: Session, snapshot_id: str | None = None) -> str:
        sid = snapshot_id or f"{session.timestamp}-{uuid.uuid4().hex[:8]}"
        self._sessions[sid] = session.model_copy(update={"id": sid})
        return sid

    def load(self, snapshot_id: str) -> Session:
        try:
            return self._sessions[snapshot_id]
        except KeyError:
            raise SessionNotFoundError(f"session {snapshot_id} not found") from None

    def list_sessions(self) -> list[Session]:
        return sorted(
            self._sessions.values(),
            key=lambda s: (s.timestamp, s.id or ""),
            reverse=True,
        )

    def clear(self) -> int:
        removed = len(self._sessions)
        self._sessions.clear()
        return removed

    @property
    def backend_type(self) -> str:
        return "memory"
