from .base import LLMProvider
from .classifier import DEFAULT_RULES, ClassificationRule, ModelClassifier, ResponseMode
from .factory import create_llm_provider
from .models import ChatMessage, LLMResponse, StreamingResponse
from .providers import OpenAICompatibleProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "StreamingResponse",
    "ClassificationRule",
    "DEFAULT_RULES",
    "ModelClassifier",
    "ResponseMode",
    "OpenAICompatibleProvider",
]
