"""Editor-wide options shared by the reducer and the history."""

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import partial

from mindmap_editor import config
from mindmap_editor.core.commands.results import Relayout
from mindmap_editor.core.constraints import DEFAULT_CONSTRAINTS, TypeConstraintTable
from mindmap_editor.core.layout.engine import apply_layout
from mindmap_editor.core.layout.measure import BadgeLabels, CellWidthMeasurer, LayoutConfig
from mindmap_editor.core.tree.operations import generate_id
from mindmap_editor.protocols import MovePredicate, TextMeasurer


class SchemaVariant(enum.Enum):
    """Which node schema the editor works with.

    MINIMAL nodes carry only text and structure; search skips collapsed
    subtrees. EXTENDED nodes also carry type, priority and style; search
    reaches into collapsed subtrees and constraints apply.
    """

    MINIMAL = "minimal"
    EXTENDED = "extended"


@dataclass(frozen=True)
class EditorConfig:
    """Collaborators and rules the editor consults but does not own."""

    variant: SchemaVariant = SchemaVariant.EXTENDED
    layout: LayoutConfig = LayoutConfig()
    measurer: TextMeasurer = field(default_factory=CellWidthMeasurer, compare=False)
    constraints: TypeConstraintTable = DEFAULT_CONSTRAINTS
    type_labels: Mapping[str, str] = field(
        default_factory=lambda: dict(config.TYPE_LABELS), hash=False
    )
    priority_labels: Mapping[int, str] = field(
        default_factory=lambda: dict(config.PRIORITY_LABELS), hash=False
    )
    can_move: MovePredicate | None = field(default=None, compare=False)
    id_factory: Callable[[], str] = field(default=generate_id, compare=False)

    @property
    def extended(self) -> bool:
        return self.variant is SchemaVariant.EXTENDED

    @property
    def search_collapsed(self) -> bool:
        return self.extended

    def badges(self) -> BadgeLabels | None:
        if not self.extended:
            return None
        return BadgeLabels(types=self.type_labels, priorities=self.priority_labels)

    def relayout(self) -> Relayout:
        return partial(
            apply_layout, layout=self.layout, measurer=self.measurer, badges=self.badges()
        )
