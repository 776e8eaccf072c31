"""Split direction decision for the focused window.

The rule: find the container holding the focused window, and if the
window is taller than `width / ratio` make the next split vertical,
otherwise horizontal. A command is only sent when the container's
current layout differs from the desired one.

Corresponds to i3/sway commands: `splitv` / `splith`
"""

import logging
from typing import Optional, Tuple

from i3ipc import aio

from .config import AutotilingConfig
from .errors import CommandFailedError
from .models import Node, NodeLayout, Rect, split_command
from .workspace_filter import workspace_allowed

logger = logging.getLogger(__name__)


def find_focused_parent(tree: Node) -> Optional[Node]:
    """Find the node whose direct children include the focused node.

    Follows the focus chain from the root (first id of each `focus` list)
    through tiling and floating children, so only the branch that holds
    input focus is visited.

    Args:
        tree: Root of the tree snapshot

    Returns:
        Parent container of the focused node, or None
    """
    node: Optional[Node] = tree
    while node is not None:
        if any(child.focused for child in node.nodes):
            return node
        if not node.focus:
            return None
        next_id = node.focus[0]
        node = next((child for child in node.children() if child.id == next_id), None)
    return None


def find_focused_child(parent: Node) -> Optional[Node]:
    return next((child for child in parent.nodes if child.focused), None)


def should_skip(node: Node, parent: Node) -> bool:
    """Check whether a focused node is not a split direction candidate.

    Skipped: fullscreen nodes, floating nodes, and nodes inside (or being)
    a tabbed/stacked container.
    """
    if node.is_fullscreen or node.is_floating:
        return True
    return parent.layout.is_stacking or node.layout.is_stacking


def desired_layout(rect: Rect, ratio: float) -> NodeLayout:
    """Pick the split layout for a window of the given size.

    Args:
        rect: Focused window geometry
        ratio: Threshold; vertical when height > width / ratio

    Returns:
        NodeLayout.SPLITV or NodeLayout.SPLITH
    """
    if rect.height > rect.width / ratio:
        return NodeLayout.SPLITV
    return NodeLayout.SPLITH


def find_focused_pair(tree: Node) -> Optional[Tuple[Node, Node]]:
    parent = find_focused_parent(tree)
    if parent is None:
        return None
    focused = find_focused_child(parent)
    if focused is None:
        return None
    return parent, focused


def decide_split(tree: Node, ratio: float) -> Optional[str]:
    """Decide which split command (if any) the tree needs.

    Args:
        tree: Root of the tree snapshot
        ratio: Aspect ratio threshold

    Returns:
        "splitv", "splith", or None when nothing should be sent
    """
    pair = find_focused_pair(tree)
    if pair is None:
        return None
    parent, focused = pair

    if should_skip(focused, parent):
        logger.debug(f"Skipping node {focused.id} (layout={parent.layout.value})")
        return None

    layout = desired_layout(focused.rect, ratio)
    if layout == parent.layout:
        return None
    return split_command(layout)


async def apply_autotile(conn: aio.Connection, config: AutotilingConfig) -> Optional[str]:
    """Run the decision rule against the live tree and send the command.

    Args:
        conn: i3ipc async connection used for queries and commands
        config: Daemon configuration (ratio, workspace allow-list)

    Returns:
        The command sent, or None if nothing was sent

    Raises:
        CommandFailedError: If the window manager rejected the command
    """
    if not await workspace_allowed(conn, config):
        return None

    tree = Node.from_con(await conn.get_tree())
    command = decide_split(tree, config.ratio)
    if command is None:
        return None

    result = await conn.command(command)
    if result and not result[0].success:
        raise CommandFailedError(command, getattr(result[0], "error", None))

    logger.info(f"Focus changed -> Next split direction set to '{command}'")
    return command
