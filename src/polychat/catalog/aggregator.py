"""Concurrent fan-out of catalog requests across every provider.

Each provider gets its own task with its own timeout. A provider that fails,
hangs or lacks a credential simply contributes nothing; the aggregate only
fails when no provider contributed at all.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ..errors import CatalogUnavailableError
from ..platforms.models import ProviderSpec
from ..platforms.registry import ProviderRegistry
from .fetcher import DEFAULT_CATALOG_TIMEOUT, fetch_catalog

logger = logging.getLogger(__name__)

CatalogFetch = Callable[..., Awaitable[list[str]]]

ENTRY_SEPARATOR = "|"


def format_catalog_entry(provider: str, model: str) -> str:
    return f"{provider.replace(' ', '-')}{ENTRY_SEPARATOR}{model}"


def parse_catalog_entry(entry: str) -> tuple[str, str]:
    """Split ``"provider|model"`` into its parts.

    Raises:
        ValueError: If either side is missing
    """
    provider, sep, model = entry.partition(ENTRY_SEPARATOR)
    provider, model = provider.strip(), model.strip()
    if not sep or not provider or not model:
        raise ValueError(f"invalid catalog entry {entry!r}: use provider|model")
    return provider, model


async def fetch_all_catalogs(
    registry: ProviderRegistry,
    timeout: float = DEFAULT_CATALOG_TIMEOUT,
    fetch: CatalogFetch = fetch_catalog,
) -> list[str]:
    """Query every configured provider's catalog concurrently.

    Args:
        registry: Provider table and credential source
        timeout: Upper bound for each provider's task, in seconds
        fetch: Single-provider fetcher, called as ``fetch(spec, api_key, timeout=...)``

    Returns:
        ``"provider|model"`` entries; no ordering across providers

    Raises:
        CatalogUnavailableError: If every provider was skipped or failed
    """
    targets: list[tuple[str, ProviderSpec]] = []
    for name in registry.names():
        spec = registry.get(name)
        if not registry.has_credential(spec):
            logger.debug("Skipping %s catalog: %s not set", name, spec.credential_env)
            continue
        targets.append((name, spec))

    async def _one(name: str, spec: ProviderSpec) -> list[str]:
        models = await asyncio.wait_for(
            fetch(spec, registry.api_key(spec), timeout=timeout),
            timeout=timeout,
        )
        return [format_catalog_entry(name, model) for model in models]

    results = await asyncio.gather(
        *(_one(name, spec) for name, spec in targets),
        return_exceptions=True,
    )

    merged: list[str] = []
    for (name, _), result in zip(targets, results):
        if isinstance(result, BaseException):
            logger.info("Dropping %s catalog: %r", name, result)
            continue
        merged.extend(result)

    if not merged:
        raise CatalogUnavailableError("no models found from any platform")
    return merged


def catalog_lister(
    registry: ProviderRegistry,
    timeout: float = DEFAULT_CATALOG_TIMEOUT,
    fetch: CatalogFetch = fetch_catalog,
) -> Callable[[ProviderSpec], Awaitable[list[str]]]:
    """Bind a single-provider fetcher to ``registry``'s credentials.

    Errors are not swallowed here: a single listing surfaces them.
    """
    async def _list(spec: ProviderSpec) -> list[str]:
        return await fetch(spec, registry.api_key(spec), timeout=timeout)

    return _list
