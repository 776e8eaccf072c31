"""Main daemon entry point.

This module provides the event loop (continuous and one-shot modes),
logging setup and the optional systemd integration (journald, sd_notify).
"""

import asyncio
import logging
import os
import signal
import sys
from typing import List, Optional, Sequence

try:
    from systemd import journal, daemon as sd_daemon
    SYSTEMD_AVAILABLE = True
except ImportError:
    SYSTEMD_AVAILABLE = False

from i3ipc import aio
from i3ipc.events import IpcBaseEvent

from .config import AutotilingConfig, parse_args
from .connection import ResilientConnection
from .errors import AutotilingError
from .layout_rule import apply_autotile

logger = logging.getLogger(__name__)

SYSLOG_IDENTIFIER = "async-autotiling"

_installed_handlers: List[logging.Handler] = []


def setup_logging(quiet: bool = False, level: Optional[str] = None) -> None:
    """Configure the root logger.

    Quiet mode silences everything. Otherwise info goes to stdout and
    warnings/errors to stderr, or to the journal when started by systemd.

    Args:
        quiet: Suppress all output
        level: Log level name (default: LOG_LEVEL env var, then INFO)
    """
    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
    _installed_handlers.clear()

    if quiet:
        handlers: List[logging.Handler] = [logging.NullHandler()]
        root_logger.setLevel(logging.CRITICAL + 1)
    else:
        log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
        root_logger.setLevel(log_level)

        if SYSTEMD_AVAILABLE and os.environ.get("JOURNAL_STREAM"):
            handlers = [journal.JournalHandler(SYSLOG_IDENTIFIER=SYSLOG_IDENTIFIER)]
        else:
            stdout_handler = logging.StreamHandler(sys.stdout)
            stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
            stderr_handler = logging.StreamHandler(sys.stderr)
            stderr_handler.setLevel(logging.WARNING)
            handlers = [stdout_handler, stderr_handler]

        formatter = logging.Formatter("%(message)s")
        for handler in handlers:
            handler.setFormatter(formatter)

    for handler in handlers:
        root_logger.addHandler(handler)
        _installed_handlers.append(handler)


def notify_ready() -> None:
    """Send READY=1 to systemd when running as a notify service."""
    if SYSTEMD_AVAILABLE:
        sd_daemon.notify("READY=1")
        logger.debug("Sent READY=1 to systemd")


class AutotilingDaemon:
    """Listens for focus events and keeps the split direction in sync."""

    def __init__(
        self,
        config: AutotilingConfig,
        connection: Optional[ResilientConnection] = None,
    ) -> None:
        self.config = config
        self.connection = connection or ResilientConnection(
            reconnect_delay=config.reconnect_delay
        )
        self.is_shutting_down = False

    async def run_once(self) -> Optional[str]:
        """Apply the layout rule a single time.

        Returns:
            The command sent, or None

        Raises:
            AutotilingError: On connection failure or rejected command
        """
        conn = await self.connection.open_command()
        return await apply_autotile(conn, self.config)

    async def on_window_event(self, conn: aio.Connection, event: IpcBaseEvent) -> None:
        """Handle window events; only focus changes trigger the layout rule.

        Errors are logged so a single bad event never stops the daemon.
        """
        if getattr(event, "change", None) != "focus":
            return

        try:
            await apply_autotile(self.connection.command_conn, self.config)
        except Exception as e:
            logger.error(f"Error during auto-tiling: {e}")

    async def run(self) -> None:
        """Run the event loop until shutdown.

        Raises:
            AutotilingError: If the initial connections cannot be made
        """
        await self.connection.open_command()
        await self.connection.open_events(self.on_window_event)

        logger.info("AutoTiling started, listening for window events...")
        notify_ready()

        while not self.is_shutting_down:
            try:
                await self.connection.main()
            except Exception as e:
                if self.is_shutting_down:
                    break
                logger.error(f"Event stream error: {e}. Attempting to reconnect...")
                await self.connection.reconnect(self.on_window_event)
            else:
                logger.info("Event stream closed")
                break

    def stop(self) -> None:
        """Request a clean shutdown."""
        self.is_shutting_down = True
        self.connection.quit()

    def setup_signal_handlers(self) -> None:
        """Stop cleanly on SIGINT/SIGTERM."""
        loop = asyncio.get_running_loop()

        def shutdown_handler() -> None:
            logger.info("Received shutdown signal")
            self.stop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, shutdown_handler)


async def main_async(config: AutotilingConfig) -> int:
    """Async main function.

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    daemon = AutotilingDaemon(config)

    if config.once:
        try:
            await daemon.run_once()
        except Exception as e:
            logger.error(f"Error during auto-tiling: {e}")
            return 1
        return 0

    daemon.setup_signal_handlers()
    try:
        await daemon.run()
    except AutotilingError as e:
        logger.error(f"Fatal error: {e}")
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    config = parse_args(argv)
    setup_logging(config.quiet)

    try:
        exit_code = asyncio.run(main_async(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = 0
    except Exception as e:
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
