"""Exception hierarchy for polychat.

Configuration and validation problems get their own types so callers can
decide between aborting and re-prompting. Transport failures are not wrapped:
openai and httpx exceptions reach the caller unchanged.
"""


class PolychatError(Exception):
    """Base class for all polychat errors."""


class ConfigurationError(PolychatError):
    """Invalid or incomplete configuration."""


class ProviderNotFoundError(ConfigurationError):
    """The requested provider key is not registered."""

    def __init__(self, key: str):
        super().__init__(f"platform {key} not found")
        self.key = key


class CredentialMissingError(ConfigurationError):
    """The provider's credential environment variable is unset."""

    def __init__(self, provider: str, env_name: str):
        super().__init__(f"{env_name} environment variable is required for {provider}")
        self.provider = provider
        self.env_name = env_name


class RequestInterruptedError(PolychatError):
    """A blocking chat request was cancelled before it completed."""

    def __init__(self) -> None:
        super().__init__("request was interrupted")


class NoContentError(PolychatError):
    """A non-streaming completion came back without any choices."""

    def __init__(self) -> None:
        super().__init__("no response content")


class JsonPathError(PolychatError):
    """A dotted JSON path could not be walked."""

    def __init__(self, message: str, segment: str, position: int):
        super().__init__(message)
        self.segment = segment
        self.position = position


class CatalogUnavailableError(PolychatError):
    """No provider returned any models."""


class ValidationError(PolychatError):
    """Input rejected before any state was mutated."""


class RewindError(ValidationError):
    """There is nothing to rewind."""


class InvalidRewindIndexError(ValidationError):
    """The rewind index is outside the retained history."""

    def __init__(self, index: int, history_length: int):
        super().__init__(
            f"invalid rewind index {index}: expected 1 <= index < {history_length}"
        )
        self.index = index
        self.history_length = history_length


class EmptyQueryError(ValidationError):
    """A query or prompt was empty after trimming."""


class SessionNotFoundError(PolychatError):
    """No saved session snapshot matched the request."""


class SelectionCancelledError(PolychatError):
    """The user dismissed an interactive choice."""
