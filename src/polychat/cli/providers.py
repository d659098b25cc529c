"""Factory functions for the CLI.

Centralizes creation of the registry, session store and run-loop context
from configuration. Hides wiring details from command implementations.
"""

from rich.console import Console

from ..config import AppConfig
from ..conversation import ConversationManager
from ..dispatch import RequestDispatcher, RequestState
from ..llm import ModelClassifier
from ..platforms import ProviderRegistry
from ..sessions import SessionStore, create_session_store
from .context import AppContext
from .selector import ConsoleSelector

# Default console for output
_console = Console()


def get_registry(config: AppConfig) -> ProviderRegistry:
    """Create the provider registry from configuration.

    The configured default platform is the primary provider and gets the
    configured default model when none is chosen.
    """
    return ProviderRegistry(
        providers=config.platforms,
        primary=config.default_platform,
        default_model=config.default_model,
    )


def get_session_store(config: AppConfig, force: bool = False) -> SessionStore | None:
    """Create the session store, or None when persistence is disabled.

    Args:
        config: Application configuration
        force: Build the store even if autosave is off (for --clear-sessions)
    """
    if not config.save_sessions and not force:
        return None
    return create_session_store("json", directory=config.sessions_path)


def build_context(
    config: AppConfig,
    console: Console | None = None,
    state: RequestState | None = None,
) -> AppContext:
    """Wire up a fresh conversation context."""
    con = console or _console
    state = state or RequestState()
    registry = get_registry(config)
    dispatcher = RequestDispatcher(
        state,
        classifier=ModelClassifier(config.model_rules),
        console=con,
    )
    conversation = ConversationManager(
        config.system_prompt,
        platform=config.default_platform,
        model=config.default_model,
    )
    return AppContext(
        config=config,
        registry=registry,
        dispatcher=dispatcher,
        conversation=conversation,
        state=state,
        selector=ConsoleSelector(con),
        console=con,
        sessions=get_session_store(config),
    )
