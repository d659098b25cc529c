"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import Any

import pytest

from polychat.llm import ChatMessage, LLMProvider, LLMResponse, StreamingResponse
from polychat.platforms import CatalogAuth, CatalogSpec, ProviderRegistry, ProviderSpec


class ScriptedSelector:
    """Selector that returns pre-set answers and records what it was shown."""

    def __init__(self, *answers: int | None, picks: list[int] | None = None):
        self.answers = list(answers)
        self.picks = picks
        self.calls: list[tuple[list[str], str, bool]] = []

    def select(self, items: Sequence[str], prompt: str, *, exact: bool = False) -> int | None:
        self.calls.append((list(items), prompt, exact))
        if not self.answers:
            return None
        return self.answers.pop(0)

    def multiselect(self, items: Sequence[str], prompt: str) -> list[int]:
        self.calls.append((list(items), prompt, False))
        if self.picks is None:
            return list(range(len(items)))
        return list(self.picks)


class FakeProvider(LLMProvider):
    """Provider that replays canned replies without any network."""

    def __init__(
        self,
        chunks: Sequence[str] = ("Hello", ", ", "world"),
        reply: str = "a complete answer",
        on_chunk=None,
        blocking_delay: float = 0.0,
    ):
        self.chunks = list(chunks)
        self.reply = reply
        self.on_chunk = on_chunk
        self.blocking_delay = blocking_delay
        self.requests: list[tuple[list[ChatMessage], str]] = []
        self.stream_closed = False
        self.closed = False

    async def chat_completion(self, messages: list[ChatMessage], model: str, **kwargs: Any) -> LLMResponse:
        self.requests.append((list(messages), model))
        if self.blocking_delay:
            await asyncio.sleep(self.blocking_delay)
        return LLMResponse(content=self.reply, model=model)

    async def chat_completion_stream(
        self, messages: list[ChatMessage], model: str, **kwargs: Any
    ) -> StreamingResponse:
        self.requests.append((list(messages), model))
        return StreamingResponse(self._generate())

    async def _generate(self) -> AsyncIterator[str]:
        try:
            for index, chunk in enumerate(self.chunks):
                yield chunk
                if self.on_chunk is not None:
                    await self.on_chunk(index)
        finally:
            self.stream_closed = True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def selector_factory():
    """Build a ScriptedSelector with the given answers."""
    return ScriptedSelector


@pytest.fixture
def provider_factory():
    """Build a FakeProvider with custom chunks or reply."""
    return FakeProvider


@pytest.fixture
def provider_specs():
    """A small provider table covering each catalog shape."""
    return {
        "alpha": ProviderSpec(
            name="alpha",
            base_urls=["https://alpha.test/v1"],
            credential_env="ALPHA_API_KEY",
            catalog=CatalogSpec(url="https://alpha.test/v1/models", json_path="data.id"),
        ),
        "beta": ProviderSpec(
            name="beta",
            base_urls=["https://beta.test/v1"],
            credential_env="BETA_API_KEY",
            catalog=CatalogSpec(
                url="https://beta.test/v1/models",
                json_path="models.name",
                auth=CatalogAuth.QUERY,
            ),
        ),
        "local": ProviderSpec(
            name="local",
            base_urls=["http://localhost:11434/v1"],
            credential_env="LOCAL_API_KEY",
            requires_credential=False,
            catalog=CatalogSpec(
                url="http://localhost:11434/api/tags",
                json_path="models.name",
                auth=CatalogAuth.NONE,
            ),
        ),
        "regional": ProviderSpec(
            name="regional",
            base_urls=[
                "https://us.regional.test/v1",
                "https://eu.regional.test/v1",
            ],
            credential_env="REGIONAL_API_KEY",
            catalog=CatalogSpec(
                url="https://regional.test/models",
                json_path="modelSummaries.modelId",
            ),
        ),
    }


@pytest.fixture
def env():
    """Credentials for alpha and regional; beta deliberately has none."""
    return {
        "ALPHA_API_KEY": "alpha-key",
        "REGIONAL_API_KEY": "regional-key",
    }


@pytest.fixture
def registry(provider_specs, env):
    return ProviderRegistry(
        providers=provider_specs,
        primary="alpha",
        default_model="alpha-small",
        env=env,
    )


@pytest.fixture
def openai_catalog():
    """Catalog body in the OpenAI ``{"data": [{"id": ...}]}`` shape."""
    return {
        "object": "list",
        "data": [
            {"id": "gpt-4o", "object": "model"},
            {"id": "gpt-4.1-mini", "object": "model"},
            {"object": "model"},
        ],
    }


@pytest.fixture
def session_dir(tmp_path):
    return tmp_path / "sessions"
