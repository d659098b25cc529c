"""Conversation manager: the transcript and its history log.

The transcript is what gets sent to a provider every turn. The history is a
parallel, display-oriented log with timestamps and provider/model tags.
Rewinding truncates the history and regenerates the transcript from it, so
after a rewind the transcript is a pure function of the retained history.
"""

import json
import logging
import time
import uuid
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from ..errors import InvalidRewindIndexError, RewindError, ValidationError
from ..llm.models import ChatMessage
from .models import ExportEntry, HistoryEntry, StateSummary

logger = logging.getLogger(__name__)


class ConversationManager:
    """Owns the canonical message list and the turn history."""

    def __init__(self, system_prompt: str, platform: str = "", model: str = ""):
        self._system_prompt = system_prompt
        self.platform = platform
        self.model = model
        self._messages: list[ChatMessage] = []
        self._history: list[HistoryEntry] = []
        self.clear()

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def messages(self) -> list[ChatMessage]:
        """A copy of the transcript."""
        return list(self._messages)

    @property
    def history(self) -> list[HistoryEntry]:
        """A copy of the history, sentinel included."""
        return list(self._history)

    @property
    def turn_count(self) -> int:
        return len(self._history) - 1

    def append_user(self, text: str) -> None:
        self._messages.append(ChatMessage(role="user", content=text))

    def append_assistant(self, text: str) -> None:
        self._messages.append(ChatMessage(role="assistant", content=text))

    def remove_last_user(self) -> None:
        """Roll back a user turn whose request was interrupted before any reply."""
        if len(self._messages) > 1 and self._messages[-1].role == "user":
            self._messages.pop()

    def record_history(self, user_text: str, bot_text: str) -> HistoryEntry:
        """Log a finished turn tagged with the current platform and model."""
        entry = HistoryEntry(
            user=user_text,
            bot=bot_text,
            platform=self.platform,
            model=self.model,
        )
        self._history.append(entry)
        return entry

    def clear(self) -> None:
        """Reset to just the system prompt and the history sentinel."""
        self._messages = [ChatMessage(role="system", content=self._system_prompt)]
        self._history = [
            HistoryEntry(user=self._system_prompt, platform=self.platform, model=self.model)
        ]

    def load(self, messages: Sequence[ChatMessage], history: Sequence[HistoryEntry]) -> None:
        """Replace transcript and history wholesale, e.g. from a saved session."""
        if not messages or messages[0].role != "system":
            raise ValidationError("transcript must start with a system message")
        if not history:
            raise ValidationError("history must contain the system sentinel")
        self._messages = list(messages)
        self._history = list(history)
        self._system_prompt = messages[0].content

    def rewind_choices(self) -> list[tuple[int, str]]:
        """Rewind targets as (history index, label), most recent first."""
        choices = []
        for index, entry in enumerate(self._history[1:], start=1):
            stamp = datetime.fromtimestamp(entry.time).strftime("%Y-%m-%d %H:%M:%S")
            choices.append((index, f"{index}: {stamp} - {entry.preview()}"))
        choices.reverse()
        return choices

    def rewind_to(self, index: int) -> int:
        """Keep history entries up to and including ``index``.

        Args:
            index: 1-based history index, ``1 <= index < len(history)``

        Returns:
            Number of history entries removed

        Raises:
            RewindError: If only the sentinel is present
            InvalidRewindIndexError: If ``index`` is out of range
        """
        if len(self._history) <= 1:
            raise RewindError("no history to backtrack")
        if not 1 <= index < len(self._history):
            raise InvalidRewindIndexError(index, len(self._history))

        removed = len(self._history) - (index + 1)
        self._history = self._history[: index + 1]
        self._messages = transcript_from_history(self._history)
        logger.debug("Rewound %d turns to history index %d", removed, index)
        return removed

    def last_reply(self) -> str | None:
        if len(self._history) <= 1 or not self._history[-1].bot:
            return None
        return self._history[-1].bot

    def export_history(
        self,
        directory: str | Path = ".",
        indices: Sequence[int] | None = None,
    ) -> Path:
        """Write recorded turns to a JSON file in ``directory``.

        Args:
            directory: Where the export goes
            indices: History indices to include (default: every turn)

        Returns:
            Path of the written file

        Raises:
            ValidationError: If there is nothing to export or an index is invalid
        """
        if len(self._history) <= 1:
            raise ValidationError("no chat history to export")
        if indices is None:
            selected = self._history[1:]
        else:
            if any(not 1 <= i < len(self._history) for i in indices):
                raise ValidationError("export index out of range")
            selected = [self._history[i] for i in sorted(set(indices))]

        entries = [
            ExportEntry(
                platform=entry.platform,
                model_name=entry.model,
                user_prompt=entry.user,
                bot_response=entry.bot,
                timestamp=entry.time,
            ).model_dump()
            for entry in selected
            if entry.user or entry.bot
        ]
        path = Path(directory) / f"ch_{uuid.uuid4()}.json"
        path.write_text(json.dumps(entries, indent=2))
        return path

    def export_last_response(self, directory: str | Path = ".") -> Path:
        """Save the last reply as plain text.

        Raises:
            ValidationError: If there is no reply to save
        """
        reply = self.last_reply()
        if reply is None:
            raise ValidationError("no response to save")
        path = Path(directory) / f"ch_response_{int(time.time())}.txt"
        path.write_text(reply)
        return path

    def state_summary(self) -> StateSummary:
        return StateSummary(
            date=datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S %Z"),
            platform=self.platform,
            model=self.model,
            chats=self.turn_count,
        )


def transcript_from_history(history: Sequence[HistoryEntry]) -> list[ChatMessage]:
    """Rebuild a transcript from a history log.

    The sentinel supplies the system prompt; every later entry contributes a
    user message and an assistant message, skipping whichever side is empty.
    """
    messages = [ChatMessage(role="system", content=history[0].user)]
    for entry in history[1:]:
        if entry.user:
            messages.append(ChatMessage(role="user", content=entry.user))
        if entry.bot:
            messages.append(ChatMessage(role="assistant", content=entry.bot))
    return messages
