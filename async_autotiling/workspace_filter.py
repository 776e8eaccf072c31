"""Workspace allow-list filter."""

import logging
from typing import Optional

from i3ipc import aio

from .config import AutotilingConfig
from .models import Workspace

logger = logging.getLogger(__name__)


async def get_focused_workspace_name(conn: aio.Connection) -> Optional[str]:
    """Return the name of the currently focused workspace.

    Args:
        conn: i3ipc async connection

    Returns:
        Workspace name, or None if no workspace reports focus
    """
    replies = await conn.get_workspaces()
    for reply in replies:
        workspace = Workspace.from_reply(reply)
        if workspace.focused:
            return workspace.name
    return None


async def workspace_allowed(conn: aio.Connection, config: AutotilingConfig) -> bool:
    """Check whether the focused workspace passes the configured allow-list.

    No IPC request is made when the allow-list is empty.
    """
    if not config.workspaces:
        return True

    name = await get_focused_workspace_name(conn)
    if not config.allows_workspace(name):
        logger.debug(f"Skipping workspace {name!r}: not in {list(config.workspaces)}")
        return False
    return True
