"""Structural commands: add, delete and re-parent nodes.

Each command takes the current snapshot (never modified) and returns a new,
re-laid-out snapshot in a result object, with the cached descendant counts
of collapsed nodes brought up to date. Rejections return the input tree
unchanged together with a reason.
"""

from dataclasses import replace

from loguru import logger

from mindmap_editor.config import NEW_NODE_TEXT
from mindmap_editor.core.commands.results import AddResult, CommandResult, DeleteResult, Relayout
from mindmap_editor.core.constraints import TypeConstraintTable, check_placement
from mindmap_editor.core.layout.engine import apply_layout
from mindmap_editor.core.tree.normalize import seed_collapsed_counts
from mindmap_editor.core.tree.operations import (
    create_node,
    find_by_id,
    find_with_parent,
    generate_id,
    insert_child,
    is_in_subtree,
    remove_node,
    subtree_ids,
)
from mindmap_editor.models.node import Node
from mindmap_editor.protocols import MovePredicate


def _reject_add(root: Node | None, error: str) -> AddResult:
    logger.debug("Add rejected: {}", error)
    return AddResult(root=root, error=error)


def add_node(
    root: Node | None,
    text: str,
    *,
    parent_id: str | None = None,
    node_type: str | None = None,
    constraints: TypeConstraintTable | None = None,
    new_id: str | None = None,
    relayout: Relayout = apply_layout,
) -> AddResult:
    """Add a new node under parent_id (the root when parent_id is None).

    An empty tree accepts the new node as its root. Fixed-first types are
    inserted before their siblings, all others are appended.

    Args:
        root: Current tree snapshot.
        text: Label of the new node; empty text falls back to NEW_NODE_TEXT.
        parent_id: Parent to add under.
        node_type: Type tag of the new node (extended schema).
        constraints: Placement rules to validate against.
        new_id: Id for the new node; generated when omitted.
        relayout: Whole-tree layout function.
    """
    node_id = new_id or generate_id()
    new_node = replace(create_node(node_id, text or NEW_NODE_TEXT), node_type=node_type)

    if root is None:
        if parent_id is not None:
            return _reject_add(root, f"Parent node {parent_id!r} not found")
        return AddResult(root=relayout(new_node), new_node_id=node_id)

    if find_by_id(root, node_id) is not None:
        return _reject_add(root, f"Node id {node_id!r} is already in use")

    parent = root if parent_id is None else find_by_id(root, parent_id)
    if parent is None:
        return _reject_add(root, f"Parent node {parent_id!r} not found")

    index: int | None = None
    if constraints is not None:
        reason = check_placement(constraints, parent, node_type)
        if reason:
            return _reject_add(root, reason)
        if constraints.is_fixed_first(parent, node_type):
            index = 0

    new_root = insert_child(root, parent.id, new_node, index=index)
    logger.debug("Added node {} under {}", node_id, parent.id)
    return AddResult(root=relayout(seed_collapsed_counts(new_root)), new_node_id=node_id)


def add_sibling(
    root: Node | None,
    sibling_of: str,
    text: str,
    *,
    node_type: str | None = None,
    constraints: TypeConstraintTable | None = None,
    new_id: str | None = None,
    relayout: Relayout = apply_layout,
) -> AddResult:
    """Add a node next to sibling_of, under the same parent.

    The root has no parent, so a sibling of the root would be a second root
    and is rejected.
    """
    found = find_with_parent(root, sibling_of)
    if found is None:
        return _reject_add(root, f"Node {sibling_of!r} not found")
    if found.parent is None:
        return _reject_add(root, "The root node cannot have siblings")
    return add_node(
        root,
        text,
        parent_id=found.parent.id,
        node_type=node_type,
        constraints=constraints,
        new_id=new_id,
        relayout=relayout,
    )


def delete_node(root: Node | None, node_id: str, *, relayout: Relayout = apply_layout) -> DeleteResult:
    """Delete a node and its whole subtree.

    Deleting the root promotes its first child to be the new root; the other
    root children are re-attached after the promoted node's own children.
    The last remaining node can never be deleted.
    """
    found = find_with_parent(root, node_id)
    if root is None or found is None:
        logger.debug("Delete rejected: node {} not found", node_id)
        return DeleteResult(root=root, error=f"Node {node_id!r} not found")

    node, parent = found.node, found.parent
    if parent is not None:
        deleted = subtree_ids(node)
        new_root = remove_node(root, node_id)
        logger.debug("Deleted node {} ({} nodes)", node_id, len(deleted))
        return DeleteResult(
            root=relayout(seed_collapsed_counts(new_root)),
            deleted_ids=deleted,
            selected_id=parent.id,
        )

    if not node.children:
        logger.debug("Delete rejected: {} is the last node", node_id)
        return DeleteResult(
            root=root, error="Cannot delete the last node", selected_id=root.id
        )

    heir, *others = node.children
    promoted = replace(heir, children=(*heir.children, *others))
    logger.debug("Deleted root {}, promoted {}", node_id, heir.id)
    return DeleteResult(
        root=relayout(seed_collapsed_counts(promoted)),
        deleted_ids=frozenset({node_id}),
        selected_id=heir.id,
    )


def move_node(
    root: Node | None,
    node_id: str,
    new_parent_id: str,
    *,
    constraints: TypeConstraintTable | None = None,
    can_move: MovePredicate | None = None,
    relayout: Relayout = apply_layout,
) -> CommandResult:
    """Re-parent a node (with its subtree) under new_parent_id.

    Rejected when either id is unknown, when the target is the node itself or
    one of its descendants, when the placement rules forbid it, or when
    can_move vetoes it.
    """

    def reject(error: str) -> CommandResult:
        logger.debug("Move of {} rejected: {}", node_id, error)
        return CommandResult(root=root, error=error)

    found = find_with_parent(root, node_id)
    if root is None or found is None:
        return reject(f"Node {node_id!r} not found")
    target = find_by_id(root, new_parent_id)
    if target is None:
        return reject(f"Target node {new_parent_id!r} not found")
    if node_id == new_parent_id:
        return reject("A node cannot be moved onto itself")
    if found.parent is None:
        return reject("The root node cannot be moved")

    node = found.node
    if is_in_subtree(node, new_parent_id):
        return reject("A node cannot be moved into its own subtree")

    index: int | None = None
    if constraints is not None:
        reason = check_placement(constraints, target, node.node_type, moving_id=node_id)
        if reason:
            return reject(reason)
        if constraints.is_fixed_first(target, node.node_type):
            index = 0

    if can_move is not None and not can_move(node, target):
        return reject("Move was vetoed")

    detached = remove_node(root, node_id)
    new_root = insert_child(detached, new_parent_id, node, index=index)
    logger.debug("Moved node {} from {} to {}", node_id, found.parent.id, new_parent_id)
    return CommandResult(root=relayout(seed_collapsed_counts(new_root)))
