"""sway/i3 IPC connection manager with fixed-delay reconnection.

Holds the two connections the daemon needs: one for queries and commands,
one for the window event subscription.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from i3ipc import Event, aio
from i3ipc.events import IpcBaseEvent

from .config import RECONNECT_DELAY
from .errors import IPCConnectionError

logger = logging.getLogger(__name__)

EventHandler = Callable[[aio.Connection, IpcBaseEvent], Awaitable[None]]
ConnectionFactory = Callable[[], Awaitable[aio.Connection]]


async def open_connection(socket_path: Optional[str] = None) -> aio.Connection:
    """Open a new async IPC connection.

    Args:
        socket_path: Explicit socket path (default: SWAYSOCK/I3SOCK discovery)

    Returns:
        Connected i3ipc.aio.Connection

    Raises:
        IPCConnectionError: If the socket cannot be reached
    """
    try:
        # Reconnection is handled here, not by i3ipc, so stream errors reach main()
        return await aio.Connection(socket_path=socket_path, auto_reconnect=False).connect()
    except Exception as e:
        raise IPCConnectionError(f"Failed to connect to window manager IPC: {e}", cause=e) from e


class ResilientConnection:
    """Manages the command and event connections."""

    def __init__(
        self,
        reconnect_delay: float = RECONNECT_DELAY,
        factory: Optional[ConnectionFactory] = None,
    ) -> None:
        """Initialize connection manager.

        Args:
            reconnect_delay: Seconds to wait between failed reconnect attempts
            factory: Coroutine function returning a connected aio.Connection
        """
        self.reconnect_delay = reconnect_delay
        self.factory: ConnectionFactory = factory or open_connection
        self.command_conn: Optional[aio.Connection] = None
        self.event_conn: Optional[aio.Connection] = None
        self.closed = False

    @property
    def is_connected(self) -> bool:
        return self.command_conn is not None and self.event_conn is not None

    async def open_command(self) -> aio.Connection:
        """Open the connection used for tree queries and commands."""
        self.command_conn = await self.factory()
        logger.debug("Command connection established")
        return self.command_conn

    async def open_events(self, handler: EventHandler) -> aio.Connection:
        """Open the event connection and subscribe to window events.

        Args:
            handler: Async handler called as handler(conn, event) for each window event

        Raises:
            IPCConnectionError: If connecting or subscribing fails
        """
        conn = await self.factory()
        try:
            await conn.subscribe([Event.WINDOW])
        except Exception as e:
            raise IPCConnectionError(f"Failed to subscribe to window events: {e}", cause=e) from e
        conn.on(Event.WINDOW, handler)
        self.event_conn = conn
        logger.debug("Subscribed to window events")
        return conn

    async def reconnect(self, handler: EventHandler) -> None:
        """Re-establish the event subscription, retrying until it succeeds.

        The command connection is replaced as well since a window manager
        restart invalidates both sockets. Gives up silently once quit() is called.
        """
        while not self.closed:
            try:
                await self.open_events(handler)
            except Exception as e:
                logger.debug(f"Reconnect attempt failed: {e}")
                logger.error(
                    f"Failed to reconnect. Retrying in {self.reconnect_delay:g} seconds..."
                )
                await asyncio.sleep(self.reconnect_delay)
                continue

            logger.info("Reconnected event stream successfully.")
            try:
                await self.open_command()
            except Exception as e:
                # Keep the old command connection; per-event errors are logged by the daemon
                logger.warning(f"Failed to refresh command connection: {e}")
            return

    async def main(self) -> None:
        """Dispatch events until the event connection closes.

        Returns normally after quit(); raises when the stream fails.
        """
        if not self.event_conn:
            raise IPCConnectionError("Cannot run event loop: not connected")
        await self.event_conn.main()

    def quit(self) -> None:
        """Stop the event loop started by main() and any pending reconnect."""
        self.closed = True
        if self.event_conn:
            self.event_conn.main_quit()
