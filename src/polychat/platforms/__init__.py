"""Provider table, connection resolution and platform selection."""

from .defaults import DEFAULT_PROVIDERS, PRIMARY_PROVIDER
from .models import (
    CatalogAuth,
    CatalogSpec,
    PlatformSelection,
    ProviderSpec,
    ResolvedConnection,
)
from .registry import ProviderRegistry
from .selection import choose, select_platform

__all__ = [
    "CatalogAuth",
    "CatalogSpec",
    "DEFAULT_PROVIDERS",
    "PRIMARY_PROVIDER",
    "PlatformSelection",
    "ProviderRegistry",
    "ProviderSpec",
    "ResolvedConnection",
    "choose",
    "select_platform",
]
