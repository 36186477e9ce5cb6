"""Render tree snapshots as markdown outlines."""

import io

from mindmap_editor.core.layout.measure import BadgeLabels
from mindmap_editor.models.node import Node


def render_outline(
    root: Node | None,
    *,
    max_depth: int | None = None,
    badges: BadgeLabels | None = None,
    show_ids: bool = False,
) -> str:
    """Render a tree as an indented markdown bullet list.

    Collapsed nodes and nodes at max_depth stand in for their hidden subtree
    with a single "... (N more)" line.

    Args:
        root: Tree to render.
        max_depth: Max levels below the root to include (None = unlimited).
        badges: Type and priority labels to prefix each line with.
        show_ids: Whether to append each node's id.

    Returns:
        Markdown string with bullet-list hierarchy.
    """
    if root is None:
        return ""

    out = io.StringIO()
    stack: list[tuple[Node, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        indent = "    " * depth

        labels = badges.for_node(node) if badges is not None else []
        prefix = "".join(f"[{label}] " for label in labels)
        suffix = f"  (id={node.id})" if show_ids else ""

        lines = node.text.split("\n")
        out.write(f"{indent}- {prefix}{lines[0]}{suffix}\n")
        for line in lines[1:]:
            out.write(f"{indent}  {line}\n")

        if not node.children:
            continue
        truncated = max_depth is not None and depth >= max_depth
        if node.is_collapsed or truncated:
            hidden = node.children_count if node.is_collapsed else len(node.children)
            noun = "node" if hidden == 1 else "nodes"
            out.write(f"{indent}    - ... ({hidden} more {noun})\n")
            continue
        stack.extend((child, depth + 1) for child in reversed(node.children))

    return out.getvalue()
