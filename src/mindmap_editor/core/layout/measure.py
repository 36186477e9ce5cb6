"""Node box measurement: word wrapping and badge sizing."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from wcwidth import wcwidth

from mindmap_editor import config
from mindmap_editor.models.node import Node
from mindmap_editor.protocols import TextMeasurer


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing and sizing rules for the layout engine."""

    h_spacing: float = config.CHILD_H_SPACING
    v_spacing: float = config.CHILD_V_SPACING
    min_width: float = config.MIN_NODE_WIDTH
    max_width: float = config.MAX_NODE_WIDTH
    min_height: float = config.MIN_NODE_HEIGHT
    padding_x: float = config.TEXT_PADDING_X
    padding_y: float = config.TEXT_PADDING_Y
    font_size: float = config.FONT_SIZE
    line_height_ratio: float = config.LINE_HEIGHT_RATIO
    badge_font_size: float = config.BADGE_FONT_SIZE
    badge_padding_x: float = config.BADGE_PADDING_X
    badge_gap: float = config.BADGE_GAP

    @property
    def line_height(self) -> float:
        return self.font_size * self.line_height_ratio

    @property
    def root_x(self) -> float:
        return self.h_spacing / 2


@dataclass(frozen=True)
class BadgeLabels:
    """Badge text per node type and per priority. Empty tables disable badges."""

    types: Mapping[str, str] = field(default_factory=dict)
    priorities: Mapping[int, str] = field(default_factory=dict)

    def for_node(self, node: Node) -> list[str]:
        labels: list[str] = []
        if node.node_type and node.node_type in self.types:
            labels.append(self.types[node.node_type])
        if node.priority is not None and node.priority in self.priorities:
            labels.append(self.priorities[node.priority])
        return labels


class CellWidthMeasurer:
    """Estimate text width from terminal cell widths.

    Narrow glyphs take one cell, East Asian wide glyphs two, combining marks
    none. One cell is cell_ratio * font_size wide.
    """

    def __init__(self, cell_ratio: float = config.CELL_WIDTH_RATIO) -> None:
        self.cell_ratio = cell_ratio

    def measure(self, text: str, font_size: float) -> float:
        cells = sum(max(wcwidth(ch), 0) for ch in text)
        return cells * self.cell_ratio * font_size


def _break_word(word: str, max_width: float, measure: TextMeasurer, font_size: float) -> list[str]:
    """Split a single word into chunks that each fit max_width (at least one char each)."""
    pieces: list[str] = []
    current = ""
    for ch in word:
        if current and measure.measure(current + ch, font_size) > max_width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, max_width: float, measure: TextMeasurer, font_size: float) -> list[str]:
    """Word-wrap text into lines no wider than max_width.

    Words wider than a full line are broken per character. Always returns at
    least one line, which may be empty.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if measure.measure(candidate, font_size) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = word
        if measure.measure(word, font_size) > max_width:
            *full, current = _break_word(word, max_width, measure, font_size)
            lines.extend(full)
    if current:
        lines.append(current)
    return lines or [""]


def measure_node(
    node: Node,
    *,
    layout: LayoutConfig,
    measurer: TextMeasurer,
    badges: BadgeLabels | None = None,
) -> tuple[float, float]:
    """Compute the (width, height) of a node's own box."""
    badge_width = 0.0
    if badges is not None:
        for label in badges.for_node(node):
            badge_width += (
                measurer.measure(label, layout.badge_font_size)
                + layout.badge_padding_x * 2
                + layout.badge_gap
            )

    text = node.text.strip()
    natural = measurer.measure(text or " ", layout.font_size) + layout.padding_x * 2 + badge_width
    width = max(layout.min_width, min(natural, layout.max_width))

    max_text_width = width - layout.padding_x * 2 - badge_width
    lines = wrap_text(text, max(max_text_width, 1.0), measurer, layout.font_size)
    height = max(layout.min_height, len(lines) * layout.line_height + layout.padding_y * 2)
    return width, height
