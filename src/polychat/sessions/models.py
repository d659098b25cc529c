"""Data models for saved sessions.

A session is a point-in-time snapshot of the transcript, the history and
the connection it was made on. Snapshots are written whole and never edited.
"""

import time

from pydantic import BaseModel, ConfigDict, Field

from ..conversation.manager import ConversationManager
from ..conversation.models import HistoryEntry
from ..llm.models import ChatMessage


class Session(BaseModel):
    """Durable snapshot of one conversation."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(default_factory=lambda: int(time.time()), description="Unix seconds")
    provider: str
    model: str
    base_url: str = ""
    messages: list[ChatMessage]
    history: list[HistoryEntry]
    id: str | None = Field(default=None, exclude=True, description="Snapshot id, set by the store")

    @classmethod
    def from_conversation(cls, conversation: ConversationManager, base_url: str = "") -> "Session":
        return cls(
            provider=conversation.platform,
            model=conversation.model,
            base_url=base_url,
            messages=conversation.messages,
            history=conversation.history,
        )

    def user_text(self) -> str:
        """All user messages flattened onto one line."""
        return " | ".join(
            " ".join(msg.content.split())
            for msg in self.messages
            if msg.role == "user"
        )


class SessionTarget(BaseModel):
    """Connection a restored session was recorded on."""

    model_config = ConfigDict(frozen=True)

    provider: str
    model: str
    base_url: str = ""
