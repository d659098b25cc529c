"""Conversation transcript and history management."""

from .manager import ConversationManager, transcript_from_history
from .models import ExportEntry, HistoryEntry, StateSummary

__all__ = [
    "ConversationManager",
    "ExportEntry",
    "HistoryEntry",
    "StateSummary",
    "transcript_from_history",
]
