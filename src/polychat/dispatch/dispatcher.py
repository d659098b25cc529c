"""Request dispatcher: one interruptible call for streaming and blocking models.

This module hides:
- Which provider client is active and how it is replaced
- Whether a model streams deltas or answers in one block
- How a cancel request reaches the running HTTP call

Streaming and blocking react differently to cancellation. A cancelled stream
returns whatever text already arrived; a cancelled blocking call raises
RequestInterruptedError so the caller can drop the pending user turn.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from typing import Any

from rich.console import Console

from ..errors import RequestInterruptedError
from ..llm import ChatMessage, LLMProvider, ModelClassifier, create_llm_provider
from ..platforms.models import ResolvedConnection
from .output import ConsoleSink, TokenSink
from .state import RequestState

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., LLMProvider]


class RequestDispatcher:
    """Sends the transcript to the connected provider, one request at a time."""

    def __init__(
        self,
        state: RequestState,
        classifier: ModelClassifier | None = None,
        sink: TokenSink | None = None,
        console: Console | None = None,
        provider: LLMProvider | None = None,
        provider_factory: ProviderFactory = create_llm_provider,
        progress: Callable[[], AbstractContextManager[Any]] | None = None,
    ):
        """Initialize the dispatcher.

        Args:
            state: Shared in-flight state; written only by this dispatcher
            classifier: Streaming/blocking rules (defaults to the built-in table)
            sink: Receives streamed deltas (defaults to printing on ``console``)
            console: Rich console for output and the progress spinner
            provider: Already-connected provider, mainly for tests
            provider_factory: Builds a provider from a resolved connection
            progress: Context manager factory shown while a blocking call waits
        """
        self._state = state
        self._classifier = classifier or ModelClassifier()
        self._console = console or Console()
        self._sink = sink or ConsoleSink(self._console)
        self._provider = provider
        self._provider_factory = provider_factory
        self._progress = progress or (lambda: self._console.status("thinking", spinner="dots"))
        self._connection: ResolvedConnection | None = None

    @property
    def provider(self) -> LLMProvider | None:
        return self._provider

    @property
    def connection(self) -> ResolvedConnection | None:
        return self._connection

    @property
    def classifier(self) -> ModelClassifier:
        return self._classifier

    def is_blocking(self, model: str) -> bool:
        return self._classifier.is_blocking(model)

    async def connect(self, connection: ResolvedConnection) -> None:
        """Replace the active client with one bound to ``connection``."""
        provider = self._provider_factory(
            connection.api_key,
            base_url=connection.base_url,
            default_headers=connection.headers or None,
        )
        previous, self._provider = self._provider, provider
        self._connection = connection
        logger.info("Connected to %s at %s", connection.name, connection.base_url)
        if previous is not None:
            await previous.close()

    async def close(self) -> None:
        if self._provider is not None:
            await self._provider.close()
            self._provider = None

    async def send_chat_request(self, transcript: Sequence[ChatMessage], model: str) -> str:
        """Send ``transcript`` to ``model`` and return the reply text.

        Args:
            transcript: Full message list, system prompt first
            model: Model name; decides streaming vs blocking

        Returns:
            The reply; for a cancelled stream, the part received so far

        Raises:
            RequestInterruptedError: If a blocking request was cancelled
            NoContentError: If a blocking reply had no choices
            RuntimeError: If no provider is connected or a request is already running
        """
        if self._provider is None:
            raise RuntimeError("no provider connected")
        if self._state.is_in_flight:
            raise RuntimeError("a chat request is already in flight")

        messages = list(transcript)
        if self.is_blocking(model):
            return await self._send_blocking(messages, model)
        return await self._send_streaming(messages, model)

    def _begin(self, task: "asyncio.Future[Any]") -> None:
        loop = asyncio.get_running_loop()
        # call_soon_threadsafe makes the handle safe from signal handlers and threads.
        self._state.mark_in_flight(lambda: loop.call_soon_threadsafe(task.cancel))

    async def _send_streaming(self, messages: list[ChatMessage], model: str) -> str:
        parts: list[str] = []
        task = asyncio.ensure_future(self._stream_into(parts, messages, model))
        self._begin(task)
        try:
            await task
        except asyncio.CancelledError:
            if _caller_cancelled():
                raise
            logger.info("Stream from %s cancelled after %d chunks", model, len(parts))
        finally:
            self._state.mark_idle()
        self._sink.end()
        return "".join(parts)

    async def _stream_into(self, parts: list[str], messages: list[ChatMessage], model: str) -> None:
        stream = await self._provider.chat_completion_stream(messages, model)
        try:
            async for delta in stream:
                self._sink.write(delta)
                parts.append(delta)
        finally:
            await stream.aclose()

    async def _send_blocking(self, messages: list[ChatMessage], model: str) -> str:
        task = asyncio.ensure_future(self._provider.chat_completion(messages, model))
        self._begin(task)
        try:
            with self._progress():
                response = await task
        except asyncio.CancelledError:
            if _caller_cancelled():
                raise
            logger.info("Blocking request to %s interrupted", model)
            raise RequestInterruptedError() from None
        finally:
            self._state.mark_idle()
        return response.content


def _caller_cancelled() -> bool:
    """True when the awaiting task itself is being cancelled, not just the request."""
    current = asyncio.current_task()
    return current is not None and current.cancelling() > 0
