"""Tree layout: assign every node its box size and world position.

The layout is a right-growing fan-out. Each node's own box comes from its
text; each branch is as tall as the larger of the node itself and its stacked
children column. Whichever is shorter gets centred against the other.

The whole tree is always re-laid-out, because a size change deep in one branch
can push every sibling below it.
"""

from dataclasses import dataclass, replace

from mindmap_editor.core.layout.measure import (
    BadgeLabels,
    CellWidthMeasurer,
    LayoutConfig,
    measure_node,
)
from mindmap_editor.models.node import Node, Point
from mindmap_editor.protocols import TextMeasurer


@dataclass(frozen=True)
class _Sized:
    """A node with its own box size and the sizes of its visible subtree."""

    node: Node
    width: float
    height: float
    children: tuple["_Sized", ...]
    column_height: float

    @property
    def branch_height(self) -> float:
        return max(self.height, self.column_height)


def _size(
    node: Node,
    layout: LayoutConfig,
    measurer: TextMeasurer,
    badges: BadgeLabels | None,
) -> _Sized:
    width, height = measure_node(node, layout=layout, measurer=measurer, badges=badges)
    if node.is_collapsed or not node.children:
        return _Sized(node, width, height, (), 0.0)

    children = tuple(_size(child, layout, measurer, badges) for child in node.children)
    column = sum(c.branch_height for c in children) + (len(children) - 1) * layout.v_spacing
    return _Sized(node, width, height, children, column)


def _place(sized: _Sized, x: float, anchor_y: float, layout: LayoutConfig) -> Node:
    node = sized.node
    if sized.height >= sized.column_height:
        node_y = anchor_y
        column_y = anchor_y + sized.height / 2 - sized.column_height / 2
    else:
        column_y = anchor_y
        node_y = anchor_y + sized.column_height / 2 - sized.height / 2

    if not sized.children:
        # Collapsed subtrees keep their hidden children untouched.
        placed_children = node.children
    else:
        child_x = x + sized.width + layout.h_spacing
        offset = 0.0
        placed: list[Node] = []
        for child in sized.children:
            placed.append(_place(child, child_x, column_y + offset, layout))
            offset += child.branch_height + layout.v_spacing
        placed_children = tuple(placed)

    return replace(
        node,
        position=Point(x, node_y),
        width=sized.width,
        height=sized.height,
        children=placed_children,
    )


def apply_layout(
    root: Node | None,
    *,
    layout: LayoutConfig | None = None,
    measurer: TextMeasurer | None = None,
    badges: BadgeLabels | None = None,
) -> Node | None:
    """Lay out a whole tree and return the positioned copy.

    Args:
        root: Tree to lay out. The input is never modified.
        layout: Spacing and sizing rules.
        measurer: Text width backend; defaults to CellWidthMeasurer.
        badges: Type/priority badge labels (extended schema only).

    Returns:
        The laid-out tree, or None when root is None.
    """
    if root is None:
        return None
    layout = layout or LayoutConfig()
    measurer = measurer or CellWidthMeasurer()
    sized = _size(root, layout, measurer, badges)
    return _place(sized, layout.root_x, 0.0, layout)


def branch_height(node: Node, *, layout: LayoutConfig | None = None) -> float:
    """Vertical space a laid-out node's visible subtree occupies.

    Uses the sizes stored on the nodes by the last layout pass.
    """
    layout = layout or LayoutConfig()
    if node.is_collapsed or not node.children:
        return node.height
    column = sum(branch_height(c, layout=layout) for c in node.children)
    column += (len(node.children) - 1) * layout.v_spacing
    return max(node.height, column)
