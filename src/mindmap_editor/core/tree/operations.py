"""Tree lookups and copy-on-write edits.

All functions are pure. Edits return a new root that shares every untouched
subtree with the input, so a snapshot held elsewhere never changes.
"""

import uuid
from collections.abc import Callable, Iterator
from dataclasses import replace

from mindmap_editor.errors import TreeIntegrityError
from mindmap_editor.models.node import Node, NodeWithParent, Point


def generate_id() -> str:
    """Return a fresh opaque node id."""
    return f"node-{uuid.uuid4().hex}"


def create_node(node_id: str, text: str) -> Node:
    """Create a detached node with zero geometry and default flags."""
    return Node(id=node_id, text=text)


def deep_copy(node: Node | None) -> Node | None:
    """Return a fully independent structural clone of a subtree."""
    if node is None:
        return None

    def _clone(n: Node) -> Node:
        return replace(
            n,
            position=Point(n.position.x, n.position.y),
            children=tuple(_clone(child) for child in n.children),
            style=dict(n.style) if n.style is not None else None,
        )

    return _clone(node)


def iter_nodes(root: Node | None, *, include_collapsed: bool = True) -> Iterator[Node]:
    """Yield nodes in document (pre-)order."""
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if node.is_collapsed and not include_collapsed:
            continue
        stack.extend(reversed(node.children))


def find_by_id(root: Node | None, node_id: str) -> Node | None:
    """Find a node by id, pre-order, first match wins."""
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def find_with_parent(root: Node | None, node_id: str) -> NodeWithParent | None:
    """Find a node and its immediate parent. The parent is None only for the root."""
    if root is None:
        return None
    stack: list[tuple[Node, Node | None]] = [(root, None)]
    while stack:
        node, parent = stack.pop()
        if node.id == node_id:
            return NodeWithParent(node=node, parent=parent)
        stack.extend((child, node) for child in reversed(node.children))
    return None


def find_path(root: Node | None, node_id: str) -> tuple[Node, ...] | None:
    """Return the chain of nodes from the root down to node_id (inclusive)."""
    if root is None:
        return None
    if root.id == node_id:
        return (root,)
    for child in root.children:
        sub = find_path(child, node_id)
        if sub is not None:
            return (root, *sub)
    return None


def count_descendants(node: Node | None) -> int:
    """Count every node below this one, regardless of collapse state."""
    if node is None:
        return 0
    return sum(1 + count_descendants(child) for child in node.children)


def subtree_ids(node: Node) -> frozenset[str]:
    """Return the ids of a node and all its descendants."""
    return frozenset(n.id for n in iter_nodes(node))


def is_in_subtree(ancestor: Node, node_id: str) -> bool:
    """True when node_id is ancestor itself or one of its descendants."""
    return find_by_id(ancestor, node_id) is not None


def replace_node(root: Node, node_id: str, update: Callable[[Node], Node]) -> Node:
    """Return a new root where node_id has been replaced by update(node).

    Raises:
        KeyError: If node_id is not in the tree.
    """
    path = find_path(root, node_id)
    if path is None:
        raise KeyError(node_id)
    return _rebuild_path(path, update(path[-1]))


def remove_node(root: Node, node_id: str) -> Node:
    """Return a new root without node_id and its subtree.

    Raises:
        KeyError: If node_id is not in the tree.
        TreeIntegrityError: If asked to remove the root itself.
    """
    path = find_path(root, node_id)
    if path is None:
        raise KeyError(node_id)
    if len(path) == 1:
        msg = f"Cannot detach the root node {node_id!r}"
        raise TreeIntegrityError(msg)
    parent = path[-2]
    new_parent = replace(parent, children=tuple(c for c in parent.children if c.id != node_id))
    return _rebuild_path(path[:-1], new_parent)


def insert_child(root: Node, parent_id: str, child: Node, *, index: int | None = None) -> Node:
    """Return a new root with child inserted under parent_id.

    index None appends; any other value is passed to list.insert semantics.
    """

    def _insert(parent: Node) -> Node:
        children = list(parent.children)
        if index is None:
            children.append(child)
        else:
            children.insert(index, child)
        return replace(parent, children=tuple(children))

    return replace_node(root, parent_id, _insert)


def _rebuild_path(path: tuple[Node, ...], new_leaf: Node) -> Node:
    """Rebuild the ancestors along path so they point at new_leaf."""
    current = new_leaf
    for ancestor, old_child in zip(reversed(path[:-1]), reversed(path[1:]), strict=True):
        if not any(c is old_child for c in ancestor.children):
            msg = f"Parent link missing between {ancestor.id!r} and {old_child.id!r}"
            raise TreeIntegrityError(msg)
        children = tuple(current if c is old_child else c for c in ancestor.children)
        current = replace(ancestor, children=children)
    return current
