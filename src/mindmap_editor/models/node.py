"""Domain models for the mind map tree."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mindmap_editor.config import NODE_DEFAULT_COLOR, NODE_TEXT_COLOR


@dataclass(frozen=True)
class Point:
    """A coordinate in world space."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Node:
    """A single node in a mind map tree.

    Geometry (position, width, height) is owned by the layout engine. The
    extended schema fields (node_type, priority, style) stay None in the
    minimal variant.
    """

    id: str
    text: str
    position: Point = Point()
    width: float = 0.0
    height: float = 0.0
    children: tuple["Node", ...] = ()
    is_collapsed: bool = False
    children_count: int = 0
    color: str = NODE_DEFAULT_COLOR
    text_color: str = NODE_TEXT_COLOR
    node_type: str | None = None
    priority: int | None = None
    style: Mapping[str, Any] | None = field(default=None, hash=False)

    @property
    def has_children(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True)
class NodeWithParent:
    """A node located in a tree together with its immediate parent."""

    node: Node
    parent: Node | None
