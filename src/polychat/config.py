"""Application configuration.

Defaults are overridden by ``~/.polychat/config.json`` and then by
environment variables (a ``.env`` file in the working directory is loaded
first). Provider entries from the config file are merged by name, so a user
can add a provider or replace one without restating the whole table.

Environment variables:
    POLYCHAT_HOME: Directory for config and sessions (default: ~/.polychat)
    POLYCHAT_DEFAULT_PLATFORM: Provider used at startup (default: openai)
    POLYCHAT_DEFAULT_MODEL: Model used at startup (default: gpt-4.1-mini)
    POLYCHAT_SAVE_SESSIONS: "1"/"true" to autosave sessions (default: off)
"""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError
from .llm.classifier import ClassificationRule
from .platforms.defaults import DEFAULT_PROVIDERS, PRIMARY_PROVIDER
from .platforms.models import ProviderSpec

DEFAULT_HOME = "~/.polychat"
DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant who provides concise, clear, and accurate answers. "
    "Be brief, but ensure the response fully addresses the question without leaving "
    "out important details. Always return any code or file output in a Markdown code "
    "fence, with syntax ```<language or filetype>\n...``` so it can be parsed automatically."
)

_TRUTHY = {"1", "true", "yes", "on"}


class AppConfig(BaseModel):
    """Resolved configuration for one run."""

    home: Path = Field(default_factory=lambda: Path(DEFAULT_HOME).expanduser())
    default_platform: str = PRIMARY_PROVIDER
    default_model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    save_sessions: bool = False
    session_dir: Path | None = None
    catalog_timeout: float = Field(default=10.0, gt=0)
    platforms: dict[str, ProviderSpec] = Field(default_factory=lambda: dict(DEFAULT_PROVIDERS))
    model_rules: list[ClassificationRule] | None = Field(
        default=None,
        description="Replaces the built-in streaming/blocking rules when set",
    )

    @property
    def sessions_path(self) -> Path:
        return (self.session_dir or self.home / "sessions").expanduser()

    @property
    def config_path(self) -> Path:
        return self.home / "config.json"


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a user config file; a missing file is an empty config."""
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return data


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    dotenv: bool = True,
) -> AppConfig:
    """Build the configuration for this run.

    Args:
        path: Explicit config file (default: ``<home>/config.json``)
        env: Environment mapping (default: os.environ)
        dotenv: Load a ``.env`` file into os.environ first

    Returns:
        Merged AppConfig

    Raises:
        ConfigurationError: If the config file is malformed
    """
    if dotenv:
        load_dotenv()
    env = os.environ if env is None else env

    home = Path(env.get("POLYCHAT_HOME") or DEFAULT_HOME).expanduser()
    config_path = Path(path).expanduser() if path else home / "config.json"
    user = read_config_file(config_path)

    platforms = dict(DEFAULT_PROVIDERS)
    merged: dict[str, Any] = {"home": home}
    try:
        for name, raw in (user.pop("platforms", None) or {}).items():
            platforms[name] = ProviderSpec.model_validate(raw)

        merged.update(user)
        if env.get("POLYCHAT_DEFAULT_PLATFORM"):
            merged["default_platform"] = env["POLYCHAT_DEFAULT_PLATFORM"]
        if env.get("POLYCHAT_DEFAULT_MODEL"):
            merged["default_model"] = env["POLYCHAT_DEFAULT_MODEL"]
        if env.get("POLYCHAT_SAVE_SESSIONS"):
            merged["save_sessions"] = env["POLYCHAT_SAVE_SESSIONS"].strip().lower() in _TRUTHY

        merged["platforms"] = platforms
        return AppConfig.model_validate(merged)
    except PydanticValidationError as e:
        raise ConfigurationError(f"invalid configuration in {config_path}: {e}") from e
