"""
Polychat: one terminal chat client for many OpenAI-compatible LLM providers.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .conversation import ConversationManager, HistoryEntry
from .dispatch import RequestDispatcher, RequestState
from .errors import PolychatError
from .llm import ChatMessage, ModelClassifier
from .platforms import ProviderRegistry, ProviderSpec, select_platform
from .sessions import Session, SessionStore, create_session_store

__all__ = [
    "ChatMessage",
    "ConversationManager",
    "HistoryEntry",
    "ModelClassifier",
    "PolychatError",
    "ProviderRegistry",
    "ProviderSpec",
    "RequestDispatcher",
    "RequestState",
    "Session",
    "SessionStore",
    "create_session_store",
    "select_platform",
]
