"""Data models for the conversation history log.

The history is the display-oriented record of turns. It is independent of
the transcript sent to providers, but the transcript can always be rebuilt
from it.
"""

import time

from pydantic import BaseModel, ConfigDict, Field


def _now() -> int:
    return int(time.time())


class HistoryEntry(BaseModel):
    """One logical turn: what the user asked and what came back.

    Index 0 of a history is a sentinel whose ``user`` field carries the
    system prompt and whose ``bot`` field is empty.
    """

    model_config = ConfigDict(frozen=True)

    time: int = Field(default_factory=_now, description="Unix seconds when the turn was recorded")
    user: str = Field(description="The user's prompt")
    bot: str = Field(default="", description="The assistant's reply")
    platform: str = Field(default="", description="Provider that answered")
    model: str = Field(default="", description="Model that answered")

    def preview(self, limit: int = 80) -> str:
        """First line of the user text, truncated to ``limit`` characters."""
        first_line = self.user.split("\n", 1)[0]
        if len(first_line) > limit:
            return first_line[:limit] + "..."
        return first_line


class ExportEntry(BaseModel):
    """One exported turn."""

    platform: str
    model_name: str
    user_prompt: str
    bot_response: str
    timestamp: int


class StateSummary(BaseModel):
    """Snapshot of what the conversation is currently pointed at."""

    date: str
    platform: str
    model: str
    chats: int
