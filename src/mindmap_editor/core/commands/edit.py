"""Field edits: text, priority and collapse state."""

from collections.abc import Collection
from dataclasses import replace

from loguru import logger

from mindmap_editor.core.commands.results import CommandResult, Relayout
from mindmap_editor.core.layout.engine import apply_layout
from mindmap_editor.core.tree.operations import count_descendants, find_by_id, find_path, replace_node
from mindmap_editor.models.node import Node


def _not_found(root: Node | None, node_id: str) -> CommandResult:
    logger.debug("Edit rejected: node {} not found", node_id)
    return CommandResult(root=root, error=f"Node {node_id!r} not found")


def _with_collapsed(node: Node, collapsed: bool) -> Node:
    """Set the collapse flag and keep the cached descendant count in step."""
    return replace(
        node,
        is_collapsed=collapsed,
        children_count=count_descendants(node) if collapsed else 0,
    )


def update_text(
    root: Node | None, node_id: str, text: str, *, relayout: Relayout = apply_layout
) -> CommandResult:
    """Replace the text of one node and re-lay-out the tree."""
    node = find_by_id(root, node_id)
    if root is None or node is None:
        return _not_found(root, node_id)
    if node.text == text:
        return CommandResult(root=root)
    new_root = replace_node(root, node_id, lambda n: replace(n, text=text))
    return CommandResult(root=relayout(new_root))


def update_priority(
    root: Node | None,
    node_id: str,
    priority: int | None,
    *,
    allowed: Collection[int] | None = None,
    relayout: Relayout = apply_layout,
) -> CommandResult:
    """Set (or clear, with None) the priority of one node.

    Values outside allowed are rejected.
    """
    node = find_by_id(root, node_id)
    if root is None or node is None:
        return _not_found(root, node_id)
    if priority is not None and allowed is not None and priority not in allowed:
        logger.debug("Priority {} rejected for {}", priority, node_id)
        return CommandResult(root=root, error=f"Unknown priority {priority!r}")
    if node.priority == priority:
        return CommandResult(root=root)
    new_root = replace_node(root, node_id, lambda n: replace(n, priority=priority))
    return CommandResult(root=relayout(new_root))


def toggle_collapse(
    root: Node | None, node_id: str, *, relayout: Relayout = apply_layout
) -> CommandResult:
    """Flip the collapse state of a node. Leaves are left alone."""
    node = find_by_id(root, node_id)
    if root is None or node is None:
        return _not_found(root, node_id)
    if not node.children:
        return CommandResult(root=root)
    new_root = replace_node(root, node_id, lambda n: _with_collapsed(n, not n.is_collapsed))
    return CommandResult(root=relayout(new_root))


def set_all_collapsed(
    root: Node | None, collapsed: bool, *, relayout: Relayout = apply_layout
) -> CommandResult:
    """Collapse or expand every node that has children."""
    if root is None:
        return CommandResult(root=root, error="There is no tree to change")

    changed = False

    def walk(node: Node) -> Node:
        nonlocal changed
        if not node.children:
            return node
        children = tuple(walk(c) for c in node.children)
        if node.is_collapsed != collapsed:
            changed = True
        return _with_collapsed(replace(node, children=children), collapsed)

    new_root = walk(root)
    if not changed:
        return CommandResult(root=root)
    return CommandResult(root=relayout(new_root))


def expand_path_to(
    root: Node | None, node_id: str, *, relayout: Relayout = apply_layout
) -> CommandResult:
    """Expand every collapsed ancestor of node_id so the node becomes visible."""
    path = find_path(root, node_id)
    if root is None or path is None:
        return _not_found(root, node_id)
    collapsed = [n.id for n in path[:-1] if n.is_collapsed]
    if not collapsed:
        return CommandResult(root=root)
    new_root = root
    for ancestor_id in collapsed:
        new_root = replace_node(new_root, ancestor_id, lambda n: _with_collapsed(n, False))
    return CommandResult(root=relayout(new_root))
