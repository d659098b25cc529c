"""JSON file session store.

One file per snapshot under a per-user directory. File names start with the
snapshot's unix timestamp so a directory listing is already roughly ordered.
"""

import logging
import os
import uuid
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from ..errors import SessionNotFoundError
from .base import SessionStore
from .models import Session

logger = logging.getLogger(__name__)

SUFFIX = ".json"


class JsonSessionStore(SessionStore):
    """Session snapshots stored as ``<timestamp>-<id>.json`` files."""

    def __init__(self, directory: str | Path):
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, snapshot_id: str) -> Path:
        return self._directory / f"{snapshot_id}{SUFFIX}"

    def save(self, session: Session, snapshot_id: str | None = None) -> str:
        """Write the snapshot atomically."""
        self._directory.mkdir(parents=True, exist_ok=True)
        sid = snapshot_id or f"{session.timestamp}-{uuid.uuid4().hex[:8]}"
        path = self._path(sid)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(session.model_dump_json(indent=2))
        os.replace(tmp, path)
        logger.debug("Saved session %s to %s", sid, path)
        return sid

    def load(self, snapshot_id: str) -> Session:
        path = self._path(snapshot_id)
        if not path.is_file():
            raise SessionNotFoundError(f"session {snapshot_id} not found")
        return self._read(path)

    def _read(self, path: Path) -> Session:
        session = Session.model_validate_json(path.read_text())
        return session.model_copy(update={"id": path.stem})

    def list_sessions(self) -> list[Session]:
        if not self._directory.is_dir():
            return []

        sessions = []
        for path in self._directory.glob(f"*{SUFFIX}"):
            try:
                sessions.append(self._read(path))
            except (OSError, ValueError, PydanticValidationError) as e:
                logger.warning("Skipping unreadable session file %s: %s", path, e)
        sessions.sort(key=lambda s: (s.timestamp, s.id or ""), reverse=True)
        return sessions

    def clear(self) -> int:
        if not self._directory.is_dir():
            return 0
        removed = 0
        for path in self._directory.glob(f"*{SUFFIX}"):
            path.unlink()
            removed += 1
        logger.info("Removed %d session files from %s", removed, self._directory)
        return removed

    @property
    def backend_type(self) -> str:
        return "json"
