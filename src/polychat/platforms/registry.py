"""Provider registry and connection resolution.

This module hides where providers are defined and how a provider key turns
into a base URL plus credential. Multi-region providers pin the URL chosen
first so later reconnects in the same process reuse it.
"""

import logging
import os
from collections.abc import Iterator, Mapping

from ..errors import CredentialMissingError, ProviderNotFoundError
from .defaults import DEFAULT_PROVIDERS, PRIMARY_PROVIDER
from .models import ProviderSpec, ResolvedConnection

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Table of known providers keyed by name."""

    def __init__(
        self,
        providers: Mapping[str, ProviderSpec] | None = None,
        primary: str = PRIMARY_PROVIDER,
        default_model: str | None = None,
        env: Mapping[str, str] | None = None,
    ):
        """Initialize the registry.

        Args:
            providers: Provider table (defaults to the built-in one)
            primary: Provider that gets implicit model defaulting
            default_model: Model used for the primary provider when none is given
            env: Credential source (defaults to os.environ)
        """
        self._providers: dict[str, ProviderSpec] = dict(
            providers if providers is not None else DEFAULT_PROVIDERS
        )
        self._primary = primary
        self._default_model = default_model
        self._env = env if env is not None else os.environ
        self._pinned: dict[str, str] = {}

    @property
    def primary(self) -> str:
        return self._primary

    @property
    def env(self) -> Mapping[str, str]:
        return self._env

    def names(self) -> list[str]:
        """Provider keys, primary first, the rest in table order."""
        rest = [name for name in self._providers if name != self._primary]
        if self._primary in self._providers:
            return [self._primary, *rest]
        return rest

    def __contains__(self, key: object) -> bool:
        return key in self._providers

    def __iter__(self) -> Iterator[ProviderSpec]:
        for name in self.names():
            yield self._providers[name]

    def get(self, key: str) -> ProviderSpec:
        try:
            return self._providers[key]
        except KeyError:
            raise ProviderNotFoundError(key) from None

    def default_model(self, key: str) -> str | None:
        """Implicit model for ``key``; only the primary provider has one."""
        if key == self._primary:
            return self._default_model
        return None

    def candidates(self, key: str) -> list[str]:
        """Base URL candidates for interactive region choice."""
        return list(self.get(key).base_urls)

    def pinned_url(self, key: str) -> str | None:
        return self._pinned.get(key)

    def api_key(self, spec: ProviderSpec) -> str | None:
        """Read the credential for ``spec``, None if unset or not needed."""
        return self._env.get(spec.credential_env) or None

    def has_credential(self, spec: ProviderSpec) -> bool:
        return not spec.requires_credential or self.api_key(spec) is not None

    def resolve(self, key: str, pinned_url: str | None = None) -> ResolvedConnection:
        """Turn a provider key into a connection description.

        Args:
            key: Provider name
            pinned_url: Base URL chosen by the caller; sticks for this process

        Returns:
            ResolvedConnection with base URL and credential

        Raises:
            ProviderNotFoundError: If ``key`` is not registered
            CredentialMissingError: If the required credential is unset
        """
        spec = self.get(key)

        api_key = self.api_key(spec)
        if api_key is None and spec.requires_credential:
            raise CredentialMissingError(spec.name, spec.credential_env)

        base_url = pinned_url or self._pinned.get(key) or spec.base_urls[0]
        if spec.is_multi_region and self._pinned.get(key) != base_url:
            logger.debug("Pinned %s to %s", key, base_url)
        self._pinned[key] = base_url

        return ResolvedConnection(
            name=spec.name,
            base_url=base_url,
            credential_env=spec.credential_env,
            api_key=api_key if spec.requires_credential else None,
            headers=dict(spec.headers),
        )
