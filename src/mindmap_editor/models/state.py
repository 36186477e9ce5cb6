"""Editing state envelope around a tree snapshot."""

from dataclasses import dataclass, field

from mindmap_editor.config import INITIAL_ZOOM
from mindmap_editor.models.node import Node


@dataclass(frozen=True)
class NoFocus:
    """Nothing is selected."""


@dataclass(frozen=True)
class Selected:
    """A node is selected."""

    node_id: str


@dataclass(frozen=True)
class Editing:
    """A node is selected and its text is being edited."""

    node_id: str


Focus = NoFocus | Selected | Editing

NO_FOCUS = NoFocus()


@dataclass(frozen=True)
class Viewport:
    """Pan/zoom of the rendering layer, stored here for convenience."""

    x: float = 0.0
    y: float = 0.0
    zoom: float = INITIAL_ZOOM


@dataclass(frozen=True)
class SearchState:
    """Current search term and its matches."""

    term: str = ""
    matches: tuple[str, ...] = ()
    highlighted: frozenset[str] = frozenset()
    current_index: int = -1
    current_id: str | None = None


@dataclass(frozen=True)
class EditorState:
    """Everything the renderer needs to draw one moment of the editor."""

    root: Node | None = None
    focus: Focus = field(default=NO_FOCUS)
    viewport: Viewport = Viewport()
    read_only: bool = False
    search: SearchState = SearchState()

    @property
    def selected_node_id(self) -> str | None:
        if isinstance(self.focus, Selected | Editing):
            return self.focus.node_id
        return None

    @property
    def editing_node_id(self) -> str | None:
        if isinstance(self.focus, Editing):
            return self.focus.node_id
        return None
