from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ...errors import NoContentError
from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse, StreamingResponse


class OpenAICompatibleProvider(LLMProvider):
    """Chat provider for any endpoint speaking the OpenAI chat completions API.

    Hidden design decisions:
    - API client initialization (via the OpenAI SDK with a custom base URL)
    - Message format conversion
    - Closing the HTTP stream when iteration stops early
    - Authentication mechanism (credential-free endpoints get a placeholder key)
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        default_headers: dict[str, str] | None = None,
        **client_kwargs: Any
    ):
        """Initialize the provider.

        Args:
            api_key: Provider API key, or None for local servers such as Ollama
            base_url: OpenAI-compatible API root (None means api.openai.com)
            default_headers: Extra headers sent with every request
            **client_kwargs: Additional kwargs for AsyncOpenAI client. Retries
                and timeouts are off unless given here; errors surface as-is and
                only the operator cancels a slow request.
        """
        self._base_url = base_url
        client_kwargs.setdefault("max_retries", 0)
        client_kwargs.setdefault("timeout", None)
        self._client = AsyncOpenAI(
            # The SDK refuses to start without a key; local servers ignore it.
            api_key=api_key or "not-needed",
            base_url=base_url,
            default_headers=default_headers,
            **client_kwargs
        )

    @property
    def base_url(self) -> str | None:
        return self._base_url

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion in a single response.

        Args:
            messages: Conversation transcript
            model: Model to use
            **kwargs: Additional request parameters

        Returns:
            LLMResponse with generated content

        Raises:
            NoContentError: If the response carried an empty choices array
        """
        completion = await self._client.chat.completions.create(
            model=model,
            messages=_to_wire(messages),
            stream=False,
            **kwargs
        )

        if not completion.choices:
            raise NoContentError()

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model or model,
            usage=usage
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion.

        Args:
            messages: Conversation transcript
            model: Model to use
            **kwargs: Additional request parameters

        Returns:
            StreamingResponse that yields text deltas and captures usage info
        """
        response = StreamingResponse(self._stream_generator(model, _to_wire(messages), **kwargs))
        # Store reference so generator can set usage
        self._current_stream_response = response
        return response

    async def _stream_generator(
        self,
        model: str,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Internal generator that yields deltas and always closes the stream."""
        stream = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            stream=True,
            **kwargs,
        )

        try:
            async for chunk in stream:
                if getattr(chunk, "usage", None) is not None:
                    self._current_stream_response.set_usage({
                        "prompt_tokens": chunk.usage.prompt_tokens,
                        "completion_tokens": chunk.usage.completion_tokens,
                        "total_tokens": chunk.usage.total_tokens,
                    })
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        finally:
            await stream.close()

    async def close(self) -> None:
        """Close the underlying OpenAI client.

        Note: Uses the OpenAI SDK's async close for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()


def _to_wire(messages: list[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": msg.role, "content": msg.content} for msg in messages]
