"""Normalize raw, loosely shaped tree data into Node snapshots."""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from loguru import logger

from mindmap_editor.config import INVALID_NODE_TEXT, UNTITLED_NODE_TEXT
from mindmap_editor.core.tree.operations import count_descendants, generate_id
from mindmap_editor.models.node import Node

_TEXT_KEYS = ("text", "name", "label")


def _raw_text(raw: Mapping[str, Any]) -> str | None:
    for key in _TEXT_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _raw_id(raw: Mapping[str, Any]) -> str | None:
    value = raw.get("id")
    if isinstance(value, bool) or value is None or value == "":
        return None
    if isinstance(value, str | int):
        return str(value)
    return None


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _build(raw: Mapping[str, Any], node_id: str, text: str, seen: set[str]) -> Node:
    seen.add(node_id)
    children: list[Node] = []
    raw_children = raw.get("children")
    if isinstance(raw_children, list | tuple):
        for raw_child in raw_children:
            child = _parse_child(raw_child, seen)
            if child is not None:
                children.append(child)

    node = Node(id=node_id, text=text, children=tuple(children))

    is_collapsed = bool(_first(raw, "isCollapsed", "is_collapsed"))
    color = raw.get("color")
    text_color = _first(raw, "textColor", "text_color")
    node_type = _first(raw, "nodeType", "node_type")
    priority = raw.get("priority")
    style = raw.get("style")

    return replace(
        node,
        is_collapsed=is_collapsed,
        children_count=count_descendants(node) if is_collapsed and children else 0,
        color=color if isinstance(color, str) and color else node.color,
        text_color=text_color if isinstance(text_color, str) and text_color else node.text_color,
        node_type=node_type if isinstance(node_type, str) and node_type else None,
        priority=priority if isinstance(priority, int) and not isinstance(priority, bool) else None,
        style=dict(style) if isinstance(style, Mapping) else None,
    )


def _parse_child(raw: Any, seen: set[str]) -> Node | None:
    if not isinstance(raw, Mapping):
        logger.warning("Dropping child that is not an object: {!r}", raw)
        return None
    node_id = _raw_id(raw)
    text = _raw_text(raw)
    if node_id is None or text is None:
        logger.warning("Dropping child without id or text: {!r}", dict(raw))
        return None
    if node_id in seen:
        logger.warning("Dropping child with duplicate id {!r}", node_id)
        return None
    return _build(raw, node_id, text, seen)


def normalize_tree(raw: Any) -> Node:
    """Convert arbitrary tree data into a Node tree.

    The root is lenient (a missing id is generated, a missing text becomes a
    placeholder); children without an id or any of text/name/label are dropped
    together with their subtree. Data that is not an object at all yields a
    single fallback node.
    """
    if not isinstance(raw, Mapping):
        logger.warning("Root data is not an object, using a fallback node")
        return Node(id=generate_id(), text=INVALID_NODE_TEXT)

    node_id = _raw_id(raw) or generate_id()
    text = _raw_text(raw) or UNTITLED_NODE_TEXT
    return _build(raw, node_id, text, set())


def seed_collapsed_counts(root: Node) -> Node:
    """Fill in children_count for collapsed nodes built outside normalize_tree."""

    def walk(node: Node) -> Node:
        children = tuple(walk(c) for c in node.children)
        count = count_descendants(node) if node.is_collapsed and node.children else 0
        if count == node.children_count and all(
            a is b for a, b in zip(children, node.children, strict=True)
        ):
            return node
        return replace(node, children=children, children_count=count)

    return walk(root)


def strip_extensions(root: Node) -> Node:
    """Drop type, priority and style so a tree fits the minimal schema."""

    def walk(node: Node) -> Node:
        children = tuple(walk(c) for c in node.children)
        if (
            node.node_type is None
            and node.priority is None
            and node.style is None
            and all(a is b for a, b in zip(children, node.children, strict=True))
        ):
            return node
        return replace(node, children=children, node_type=None, priority=None, style=None)

    return walk(root)


def to_data(node: Node) -> dict[str, Any]:
    """Extract the business fields of a tree, dropping layout and runtime state."""
    result: dict[str, Any] = {"id": node.id, "text": node.text}
    if node.node_type:
        result["nodeType"] = node.node_type
    if node.priority is not None:
        result["priority"] = node.priority
    if node.children:
        result["children"] = [to_data(child) for child in node.children]
    return result
