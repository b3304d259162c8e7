"""SlackTailService - wires the event pipeline to the connection manager."""

import logging
from typing import Any, NoReturn

from slacktail.config import Config
from slacktail.connection import ConnectionManager
from slacktail.dispatch import EventDispatcher
from slacktail.gateway.api.abc import SlackApi
from slacktail.gateway.console.abc import Console
from slacktail.gateway.stream.abc import EventStream
from slacktail.gateway.time.abc import Time
from slacktail.identity import IdentityCache
from slacktail.normalize import TextNormalizer
from slacktail.render import Renderer
from slacktail.types import SlackSession

logger = logging.getLogger(__name__)


class SlackTailService:
    """Orchestrates slacktail: connect → receive → dispatch → render.

    The identity cache and render state are created once and survive every
    reconnect; only the connection itself is replaced.
    """

    def __init__(
        self,
        *,
        config: Config,
        api: SlackApi,
        stream: EventStream,
        time: Time,
        console: Console,
    ) -> None:
        """Initialize the service with dependencies.

        Args:
            config: Loaded configuration
            api: SlackApi for authentication and lookups
            stream: EventStream for the real-time feed
            time: Time abstraction for backoff sleeps
            console: Transcript output
        """
        self._identities = IdentityCache(api)
        self._dispatcher = EventDispatcher(self._identities, console)
        self._renderer = Renderer(
            notification=config.notification,
            normalizer=TextNormalizer(self._identities),
            console=console,
        )
        self._connection = ConnectionManager(
            api=api,
            stream=stream,
            time=time,
            on_connected=self.on_connected,
            on_frame=self.on_frame,
        )

    @property
    def identities(self) -> IdentityCache:
        return self._identities

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def connection(self) -> ConnectionManager:
        return self._connection

    def run(self) -> NoReturn:
        """Main loop. Never returns; stop the process to exit."""
        self._connection.run()

    def on_connected(self, session: SlackSession) -> None:
        """Prepare the cache for a freshly connected session.

        Raises:
            SlackApiCallError: If the user-group preload fails
        """
        logger.info(
            "Logged in as %s on team %s",
            session.self_user.name,
            session.team.name,
        )
        if session.self_user.id and session.self_user.name:
            self._identities.set(session.self_user.id, session.self_user.name)
        self._identities.preload_user_groups()

    def on_frame(self, frame: dict[str, Any]) -> None:
        for request in self._dispatcher.handle(frame):
            self._renderer.render(request)
