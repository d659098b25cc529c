"""Single-provider model catalog requests."""

import logging
from typing import Any

import httpx

from ..errors import CredentialMissingError
from ..platforms.models import CatalogAuth, ProviderSpec
from .jsonpath import extract_field

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_TIMEOUT = 10.0


def build_request(spec: ProviderSpec, api_key: str | None) -> tuple[str, dict[str, str], dict[str, str]]:
    """Compute URL, headers and query parameters for a catalog call."""
    catalog = spec.catalog
    headers = {"Content-Type": "application/json", **catalog.headers}
    params: dict[str, str] = {}

    if api_key:
        if catalog.auth is CatalogAuth.BEARER:
            headers["Authorization"] = f"Bearer {api_key}"
        elif catalog.auth is CatalogAuth.API_KEY_HEADER:
            headers["x-api-key"] = api_key
        elif catalog.auth is CatalogAuth.QUERY:
            params["key"] = api_key

    return catalog.url, headers, params


async def fetch_catalog(
    spec: ProviderSpec,
    api_key: str | None,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_CATALOG_TIMEOUT,
) -> list[str]:
    """List the models one provider advertises.

    Args:
        spec: Provider description
        api_key: Credential, None for credential-free providers
        client: Reuse an existing client (tests pass one with a mock transport)
        timeout: Per-request timeout in seconds

    Returns:
        Model names in catalog order

    Raises:
        CredentialMissingError: If a required credential is missing
        httpx.HTTPError: On network failure or a non-2xx status
        ValueError: If the body is not JSON
        JsonPathError: If the body does not have the configured shape
    """
    if not api_key and spec.requires_credential:
        raise CredentialMissingError(spec.name, spec.credential_env)

    url, headers, params = build_request(spec, api_key)

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            return await _fetch(own_client, spec, url, headers, params)
    return await _fetch(client, spec, url, headers, params)


async def _fetch(
    client: httpx.AsyncClient,
    spec: ProviderSpec,
    url: str,
    headers: dict[str, str],
    params: dict[str, str],
) -> list[str]:
    response = await client.get(url, headers=headers, params=params)
    response.raise_for_status()
    data: Any = response.json()
    models = extract_field(data, spec.catalog.json_path)
    logger.debug("Catalog %s returned %d models", spec.name, len(models))
    return models
