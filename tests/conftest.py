"""
Pytest configuration and fixtures for async-autotiling tests.

Trees are built as raw GET_TREE JSON so they go through the same
conversion as live IPC replies.
"""

import logging
from itertools import count
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

_ids = count(100)


def make_node(
    node_type: str = "con",
    *,
    width: int = 100,
    height: int = 100,
    layout: str = "none",
    focused: bool = False,
    percent: Optional[float] = None,
    floating: Optional[str] = None,
    nodes: Optional[List[Dict[str, Any]]] = None,
    floating_nodes: Optional[List[Dict[str, Any]]] = None,
    focus: Optional[List[int]] = None,
    name: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a raw IPC node dictionary.

    When `focus` is not given, children are ordered with the ones on the
    focused path first, mirroring what sway/i3 report.
    """
    nodes = nodes or []
    floating_nodes = floating_nodes or []
    if focus is None:
        children = nodes + floating_nodes
        on_path = [c["id"] for c in children if _contains_focus(c)]
        focus = on_path + [c["id"] for c in children if c["id"] not in on_path]
    return {
        "id": next(_ids),
        "type": node_type,
        "name": name,
        "layout": layout,
        "focused": focused,
        "percent": percent,
        "floating": floating,
        "rect": {"x": 0, "y": 0, "width": width, "height": height},
        "focus": focus,
        "nodes": nodes,
        "floating_nodes": floating_nodes,
    }


def _contains_focus(node: Dict[str, Any]) -> bool:
    if node["focused"]:
        return True
    return any(_contains_focus(c) for c in node["nodes"] + node["floating_nodes"])


def make_tree(
    width: int,
    height: int,
    parent_layout: str = "splith",
    **window_kwargs: Any,
) -> Dict[str, Any]:
    """Root -> output -> workspace -> container(parent_layout) -> [focused window, sibling]."""
    window = make_node(width=width, height=height, focused=True, **window_kwargs)
    sibling = make_node(width=width, height=height)
    parent = make_node(layout=parent_layout, width=2 * width, height=height, nodes=[window, sibling])
    return wrap_in_workspace([parent])


def wrap_in_workspace(
    nodes: List[Dict[str, Any]],
    floating_nodes: Optional[List[Dict[str, Any]]] = None,
    workspace_layout: str = "splith",
) -> Dict[str, Any]:
    workspace = make_node(
        "workspace",
        layout=workspace_layout,
        width=1920,
        height=1080,
        nodes=nodes,
        floating_nodes=floating_nodes,
        name="1",
    )
    output = make_node("output", layout="output", width=1920, height=1080, nodes=[workspace])
    return make_node("root", layout="splith", width=1920, height=1080, nodes=[output])


def make_connection(
    tree: Optional[Dict[str, Any]] = None,
    workspaces: Optional[List[SimpleNamespace]] = None,
    success: bool = True,
    error: Optional[str] = None,
) -> MagicMock:
    """Create mock i3ipc.aio.Connection for queries and commands."""
    conn = MagicMock()
    conn.get_tree = AsyncMock(return_value=SimpleNamespace(ipc_data=tree or make_node("root")))
    conn.get_workspaces = AsyncMock(return_value=workspaces or [])
    conn.command = AsyncMock(return_value=[SimpleNamespace(success=success, error=error)])
    return conn


def make_event_connection(main_side_effect: Any = None) -> MagicMock:
    """Create mock event connection (subscribe/on/main/main_quit)."""
    conn = MagicMock()
    conn.subscribe = AsyncMock()
    conn.on = MagicMock()
    conn.main = AsyncMock(side_effect=main_side_effect)
    conn.main_quit = MagicMock()
    return conn


def workspace_reply(name: str, focused: bool = False) -> SimpleNamespace:
    return SimpleNamespace(name=name, focused=focused)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging() changes between tests."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def tall_window_tree():
    """100x200 focused window in a horizontal container."""
    return make_tree(100, 200, parent_layout="splith")


@pytest.fixture
def mock_sway_connection(tall_window_tree):
    return make_connection(tall_window_tree)
