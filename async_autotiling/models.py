"""Data models for the window manager tree snapshot.

The IPC reply for GET_TREE is converted into these dataclasses so the
layout decision can be made on plain values. Nothing here is mutated
after construction; a fresh snapshot is fetched for every decision.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class NodeLayout(str, Enum):
    """Container layout as reported by the IPC `layout` field."""

    SPLITH = "splith"
    SPLITV = "splitv"
    STACKED = "stacked"
    TABBED = "tabbed"
    OUTPUT = "output"
    DOCKAREA = "dockarea"
    NONE = "none"

    @classmethod
    def from_ipc(cls, value: Optional[str]) -> "NodeLayout":
        try:
            return cls(value)
        except ValueError:
            return cls.NONE

    @property
    def is_split(self) -> bool:
        return self in (NodeLayout.SPLITH, NodeLayout.SPLITV)

    @property
    def is_stacking(self) -> bool:
        """Tabbed and stacked containers overlap their children."""
        return self in (NodeLayout.TABBED, NodeLayout.STACKED)


class NodeKind(str, Enum):
    """Node type as reported by the IPC `type` field."""

    ROOT = "root"
    OUTPUT = "output"
    WORKSPACE = "workspace"
    CON = "con"
    FLOATING_CON = "floating_con"
    DOCKAREA = "dockarea"

    @classmethod
    def from_ipc(cls, value: Optional[str]) -> "NodeKind":
        try:
            return cls(value)
        except ValueError:
            return cls.CON


@dataclass(frozen=True)
class Rect:
    """Node geometry in pixels."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def from_ipc(cls, data: Optional[Dict[str, Any]]) -> "Rect":
        data = data or {}
        return cls(
            x=int(data.get("x", 0)),
            y=int(data.get("y", 0)),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )


@dataclass
class Node:
    """A single node of the window manager tree."""

    id: int
    rect: Rect = field(default_factory=Rect)
    layout: NodeLayout = NodeLayout.NONE
    kind: NodeKind = NodeKind.CON
    focused: bool = False
    percent: Optional[float] = None
    floating: Optional[str] = None  # i3 only: auto_off, auto_on, user_off, user_on
    name: Optional[str] = None
    focus: List[int] = field(default_factory=list)  # Child ids, most recently focused first
    nodes: List["Node"] = field(default_factory=list)
    floating_nodes: List["Node"] = field(default_factory=list)

    @classmethod
    def from_ipc(cls, data: Dict[str, Any]) -> "Node":
        """Build a node (and its subtree) from raw GET_TREE JSON.

        Args:
            data: Node dictionary as returned by the IPC socket

        Returns:
            Node with all children converted recursively
        """
        percent = data.get("percent")
        return cls(
            id=int(data.get("id", 0)),
            rect=Rect.from_ipc(data.get("rect")),
            layout=NodeLayout.from_ipc(data.get("layout")),
            kind=NodeKind.from_ipc(data.get("type")),
            focused=bool(data.get("focused", False)),
            percent=float(percent) if percent is not None else None,
            floating=data.get("floating"),
            name=data.get("name"),
            focus=list(data.get("focus") or []),
            nodes=[cls.from_ipc(child) for child in data.get("nodes") or []],
            floating_nodes=[cls.from_ipc(child) for child in data.get("floating_nodes") or []],
        )

    @classmethod
    def from_con(cls, con: Any) -> "Node":
        """Build a node from an i3ipc container using its raw `ipc_data`."""
        return cls.from_ipc(con.ipc_data)

    @property
    def is_fullscreen(self) -> bool:
        # sway reports percent > 1.0 for fullscreen nodes; fullscreen_mode is unreliable there
        return self.percent is not None and self.percent > 1.0

    @property
    def is_floating(self) -> bool:
        if self.kind == NodeKind.FLOATING_CON:
            return True
        return self.floating is not None and self.floating.endswith("_on")

    def children(self) -> List["Node"]:
        return self.nodes + self.floating_nodes


@dataclass(frozen=True)
class Workspace:
    """Workspace entry from the GET_WORKSPACES reply."""

    name: str
    focused: bool = False

    @classmethod
    def from_reply(cls, reply: Any) -> "Workspace":
        """Build from an i3ipc WorkspaceReply or a raw dictionary."""
        if isinstance(reply, dict):
            return cls(name=reply.get("name", ""), focused=bool(reply.get("focused", False)))
        return cls(name=reply.name, focused=bool(reply.focused))


def split_command(layout: NodeLayout) -> str:
    """Return the IPC command that sets the next split direction.

    Args:
        layout: NodeLayout.SPLITH or NodeLayout.SPLITV

    Raises:
        ValueError: If layout is not a split layout
    """
    if not layout.is_split:
        raise ValueError(f"Not a split layout: {layout.value}")
    return layout.value
