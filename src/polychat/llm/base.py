from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse, StreamingResponse


class LLMProvider(ABC):
    """Abstract base class for chat completion backends.

    This module hides the design decision of how a provider is reached.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Closing open streams and connections

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            response = await provider.chat_completion(messages, "gpt-4o")
        # Automatically cleaned up
    """

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a complete chat reply in one response.

        Args:
            messages: Full transcript, system prompt first
            model: Model identifier understood by the provider
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing generated content and metadata

        Raises:
            NoContentError: If the provider returned no choices
        """
        pass

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat reply.

        Args:
            messages: Full transcript, system prompt first
            model: Model identifier understood by the provider
            **kwargs: Provider-specific parameters

        Returns:
            StreamingResponse that yields text deltas. Callers must
            ``aclose()`` it when they stop iterating early.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
