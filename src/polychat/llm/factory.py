from typing import Any

from .base import LLMProvider
from .providers import OpenAICompatibleProvider


def create_llm_provider(
    api_key: str | None,
    base_url: str | None = None,
    **config: Any
) -> LLMProvider:
    """Create a chat provider bound to one endpoint.

    Every backend is described by data (base URL, credential, headers) and
    spoken to through the same OpenAI-compatible client, so this factory
    hides only the construction details.

    Args:
        api_key: Credential for the endpoint, None for credential-free servers
        base_url: API root; None targets api.openai.com
        **config: Extra options forwarded to the client
            - default_headers: dict[str, str]
            - timeout, max_retries, http_client: passed to AsyncOpenAI
              (no timeout and no retries by default)

    Returns:
        Initialized LLM provider instance

    Examples:
        >>> provider = create_llm_provider(
        ...     "gsk-...",
        ...     base_url="https://api.groq.com/openai/v1",
        ... )

        >>> provider = create_llm_provider(None, base_url="http://localhost:11434/v1")
    """
    return OpenAICompatibleProvider(api_key=api_key, base_url=base_url, **config)
