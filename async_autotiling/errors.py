"""
Exceptions raised by the autotiling daemon.

Startup connection errors are fatal; everything raised while handling a
single focus event is logged by the event loop and otherwise ignored.
"""

from typing import Optional


class AutotilingError(Exception):
    """Base exception for autotiling errors."""


class IPCConnectionError(AutotilingError):
    """Connecting or subscribing to the window manager IPC socket failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class CommandFailedError(AutotilingError):
    """The window manager rejected a command."""

    def __init__(self, command: str, error: Optional[str] = None):
        self.command = command
        self.error = error or "Unknown error"
        super().__init__(f"Command '{command}' failed: {self.error}")
