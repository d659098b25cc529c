"""Run-loop context.

AppContext bundles everything one conversation needs and is passed
explicitly to every command handler. Nothing here lives at module scope.
"""

import logging

from rich.console import Console

from ..config import AppConfig
from ..conversation import ConversationManager
from ..dispatch import RequestDispatcher, RequestState
from ..errors import EmptyQueryError, RequestInterruptedError
from ..platforms import ProviderRegistry
from ..protocols import Selector
from ..sessions import Session, SessionStore, SessionTarget, restore_session

logger = logging.getLogger(__name__)


class AppContext:
    """State owned by the top-level run loop."""

    def __init__(
        self,
        config: AppConfig,
        registry: ProviderRegistry,
        dispatcher: RequestDispatcher,
        conversation: ConversationManager,
        state: RequestState,
        selector: Selector,
        console: Console,
        sessions: SessionStore | None = None,
    ):
        self.config = config
        self.registry = registry
        self.dispatcher = dispatcher
        self.conversation = conversation
        self.state = state
        self.selector = selector
        self.console = console
        self.sessions = sessions
        self.snapshot_id: str | None = None

    @property
    def platform(self) -> str:
        return self.conversation.platform

    @property
    def model(self) -> str:
        return self.conversation.model

    @property
    def base_url(self) -> str:
        connection = self.dispatcher.connection
        return connection.base_url if connection else ""

    async def connect(self, platform: str, model: str, base_url: str | None = None) -> None:
        """Point the conversation at ``platform``/``model``.

        Resolution happens before anything changes, so a missing provider or
        credential leaves the current connection in place.
        """
        connection = self.registry.resolve(platform, pinned_url=base_url)
        await self.dispatcher.connect(connection)
        self.conversation.platform = platform
        self.conversation.model = model

    async def restore(self, session: Session) -> SessionTarget:
        """Replace the conversation with ``session`` and reconnect to its provider.

        The provider is resolved first, so a missing provider or credential
        leaves both the conversation and the connection untouched.
        """
        connection = self.registry.resolve(session.provider, pinned_url=session.base_url or None)
        target = restore_session(session, self.conversation)
        await self.dispatcher.connect(connection)
        self.snapshot_id = session.id
        return target

    async def ask(self, text: str) -> str | None:
        """Run one user turn.

        Returns:
            The reply, or None if a blocking request was interrupted

        Raises:
            EmptyQueryError: If ``text`` is blank
        """
        if not text.strip():
            raise EmptyQueryError("query is empty")
        self.conversation.append_user(text)
        try:
            reply = await self.dispatcher.send_chat_request(self.conversation.messages, self.model)
        except RequestInterruptedError:
            self.conversation.remove_last_user()
            logger.debug("Dropped interrupted turn")
            return None
        except Exception:
            self.conversation.remove_last_user()
            raise

        if self.dispatcher.is_blocking(self.model):
            self.console.print(reply, style="green", markup=False, highlight=False)

        self.conversation.append_assistant(reply)
        self.conversation.record_history(text, reply)
        self.autosave()
        return reply

    def autosave(self) -> None:
        """Write the current conversation to its snapshot when saving is enabled."""
        if not self.config.save_sessions or self.sessions is None:
            return
        if self.conversation.turn_count == 0:
            return
        session = Session.from_conversation(self.conversation, self.base_url)
        self.snapshot_id = self.sessions.save(session, self.snapshot_id)

    async def close(self) -> None:
        await self.dispatcher.close()
