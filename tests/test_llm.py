"""Unit tests for the OpenAI-compatible provider."""
import contextlib
import io
import json

import httpx
import openai
import pytest
from rich.console import Console

from polychat.dispatch import BufferSink, RequestDispatcher, RequestState
from polychat.errors import NoContentError
from polychat.llm import (
    ChatMessage,
    LLMProvider,
    OpenAICompatibleProvider,
    StreamingResponse,
    create_llm_provider,
)
from polychat.platforms.models import ResolvedConnection

MESSAGES = [
    ChatMessage(role="system", content="be brief"),
    ChatMessage(role="user", content="hi"),
]


def completion_body(choices):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o",
        "choices": choices,
        "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
    }


def sse_body(deltas):
    lines = []
    for delta in deltas:
        chunk = {
            "id": "chatcmpl-1",
            "object": "chat.completion.chunk",
            "created": 1700000000,
            "model": "gpt-4o",
            "choices": [{"index": 0, "delta": {"content": delta}, "finish_reason": None}],
        }
        lines.append(f"data: {json.dumps(chunk)}\n\n")
    lines.append("data: [DONE]\n\n")
    return "".join(lines)


def make_provider(handler) -> OpenAICompatibleProvider:
    return OpenAICompatibleProvider(
        api_key="test-key",
        base_url="https://llm.test/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestOpenAICompatibleProvider:
    """Tests for OpenAICompatibleProvider."""

    def test_is_llm_provider(self):
        """Test the factory returns the shared interface."""
        provider = create_llm_provider("k", base_url="https://llm.test/v1")

        assert isinstance(provider, LLMProvider)
        assert provider.base_url == "https://llm.test/v1"

    def test_credential_free(self):
        """Test that local servers need no key."""
        provider = create_llm_provider(None, base_url="http://localhost:11434/v1")

        assert isinstance(provider, OpenAICompatibleProvider)

    @pytest.mark.asyncio
    async def test_chat_completion(self):
        """Test a blocking completion against a mocked endpoint."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=completion_body([
                {"index": 0, "message": {"role": "assistant", "content": "hello"}, "finish_reason": "stop"},
            ]))

        async with make_provider(handler) as provider:
            response = await provider.chat_completion(MESSAGES, "gpt-4o")

        assert response.content == "hello"
        assert response.usage["total_tokens"] == 7
        assert str(seen[0].url) == "https://llm.test/v1/chat/completions"
        assert seen[0].headers["Authorization"] == "Bearer test-key"
        sent = json.loads(seen[0].content)
        assert sent["messages"] == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]

    @pytest.mark.asyncio
    async def test_empty_choices(self):
        """Test that a reply without choices raises."""
        async with make_provider(lambda request: httpx.Response(200, json=completion_body([]))) as provider:
            with pytest.raises(NoContentError):
                await provider.chat_completion(MESSAGES, "gpt-4o")

    @pytest.mark.asyncio
    async def test_stream(self):
        """Test streaming deltas from server-sent events."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                text=sse_body(["Hel", "lo"]),
                headers={"content-type": "text/event-stream"},
            )

        async with make_provider(handler) as provider:
            stream = await provider.chat_completion_stream(MESSAGES, "gpt-4o")
            try:
                deltas = [delta async for delta in stream]
            finally:
                await stream.aclose()

        assert deltas == ["Hel", "lo"]
        assert stream.closed

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        """Test that transport errors are not wrapped."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "bad key"}})

        async with make_provider(handler) as provider:
            with pytest.raises(openai.AuthenticationError):
                await provider.chat_completion(MESSAGES, "gpt-4o")


class TestStreamingResponse:
    """Tests for StreamingResponse."""

    @pytest.mark.asyncio
    async def test_aclose_once(self):
        """Test that closing twice closes the generator once."""
        closes = []

        async def generate():
            try:
                yield "a"
                yield "b"
            finally:
                closes.append(True)

        stream = StreamingResponse(generate())
        assert await stream.__anext__() == "a"

        await stream.aclose()
        await stream.aclose()

        assert closes == [True]
        assert stream.closed

    def test_usage(self):
        """Test recording usage."""
        async def generate():
            yield "x"

        stream = StreamingResponse(generate())
        stream.set_usage({"total_tokens": 3})

        assert stream.usage == {"total_tokens": 3}


class TestClientDefaults:
    """Tests for the client's retry and timeout defaults."""

    def test_no_retries_no_timeout(self):
        """Test that the factory disables retries and the request timeout."""
        provider = create_llm_provider("k", base_url="https://llm.test/v1")

        assert provider._client.max_retries == 0
        assert provider._client.timeout is None

    def test_explicit_options_win(self):
        """Test that callers can still opt into retries and a timeout."""
        provider = create_llm_provider("k", base_url="https://llm.test/v1", max_retries=3, timeout=30.0)

        assert provider._client.max_retries == 3
        assert provider._client.timeout == 30.0

    @pytest.mark.asyncio
    async def test_server_error_sent_once(self):
        """Test that a 5xx reply reaches the caller after a single request."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(500, json={"error": {"message": "upstream failed"}})

        def factory(api_key, base_url=None, **config):
            client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            return create_llm_provider(api_key, base_url=base_url, http_client=client, **config)

        dispatcher = RequestDispatcher(
            RequestState(),
            sink=BufferSink(),
            console=Console(file=io.StringIO()),
            provider_factory=factory,
            progress=contextlib.nullcontext,
        )
        await dispatcher.connect(ResolvedConnection(
            name="alpha",
            base_url="https://llm.test/v1",
            credential_env="ALPHA_API_KEY",
            api_key="k",
        ))

        try:
            with pytest.raises(openai.InternalServerError):
                await dispatcher.send_chat_request(MESSAGES, "o3-mini")
        finally:
            await dispatcher.close()

        assert len(seen) == 1
