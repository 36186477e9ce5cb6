"""Configuration constants for the mind map editor core."""

# Spacing between a parent's right edge and its children column.
CHILD_H_SPACING: float = 60
# Vertical gap between sibling branches.
CHILD_V_SPACING: float = 15

# Node box band. Text wraps once the width reaches MAX_NODE_WIDTH.
MIN_NODE_WIDTH: float = 80
MAX_NODE_WIDTH: float = 300
MIN_NODE_HEIGHT: float = 50

TEXT_PADDING_X: float = 12
TEXT_PADDING_Y: float = 8
FONT_SIZE: float = 14
LINE_HEIGHT_RATIO: float = 1.2

# Type / priority badges drawn to the left of the label.
BADGE_FONT_SIZE: float = 12
BADGE_PADDING_X: float = 6
BADGE_GAP: float = 6

# Width of one terminal cell relative to the font size, used by the default measurer.
CELL_WIDTH_RATIO: float = 0.55

INITIAL_ZOOM: float = 1.0

NEW_NODE_TEXT: str = "New idea"
UNTITLED_NODE_TEXT: str = "Untitled"
INVALID_NODE_TEXT: str = "Invalid node"

NODE_DEFAULT_COLOR: str = "#FFFFFF"
NODE_TEXT_COLOR: str = "#1f2937"

# Badge label per built-in node type.
TYPE_LABELS: dict[str, str] = {
    "rootNode": "Root",
    "moduleNode": "Module",
    "testPointNode": "Test point",
    "caseNode": "Case",
    "preconditionNode": "Precondition",
    "stepNode": "Step",
    "resultNode": "Expected",
}

# Priority value -> badge label. Values outside this table are rejected.
PRIORITY_LABELS: dict[int, str] = {
    0: "P0",
    1: "P1",
    2: "P2",
    3: "P3",
}
