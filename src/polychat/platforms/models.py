"""Data models describing providers and connections to them.

Providers are pure data: adding one means adding an entry to the table,
never a new class.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogAuth(str, Enum):
    """How a catalog request carries the provider credential."""
    BEARER = "bearer"
    API_KEY_HEADER = "x-api-key"
    QUERY = "query"
    NONE = "none"


class CatalogSpec(BaseModel):
    """Where a provider lists its models and how to read the answer."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Model catalog endpoint")
    json_path: str = Field(description="Dotted path ending in the name field, e.g. 'data.id'")
    auth: CatalogAuth = Field(default=CatalogAuth.BEARER)
    headers: dict[str, str] = Field(default_factory=dict)


class ProviderSpec(BaseModel):
    """Static description of an OpenAI-compatible provider."""

    model_config = ConfigDict(frozen=True)

    name: str
    base_urls: list[str] = Field(min_length=1, description="One URL, or one per region")
    credential_env: str = Field(description="Environment variable holding the API key")
    requires_credential: bool = Field(default=True)
    catalog: CatalogSpec
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("base_urls", mode="before")
    @classmethod
    def _accept_single_url(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def is_multi_region(self) -> bool:
        return len(self.base_urls) > 1


class ResolvedConnection(BaseModel):
    """Everything needed to open a client for one provider."""

    model_config = ConfigDict(frozen=True)

    name: str
    base_url: str
    credential_env: str
    api_key: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)


class PlatformSelection(BaseModel):
    """Outcome of choosing a platform and model."""

    model_config = ConfigDict(frozen=True)

    platform: str
    model: str
    base_url: str
    credential_env: str
    models: list[str] = Field(default_factory=list)
