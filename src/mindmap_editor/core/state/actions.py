"""Actions understood by the editor reducer and history."""

from dataclasses import dataclass

from mindmap_editor.models.node import Node

# --- Undoable: structural edits recorded in history ---


@dataclass(frozen=True)
class AddNode:
    text: str
    parent_id: str | None = None
    node_type: str | None = None


@dataclass(frozen=True)
class AddSibling:
    sibling_of: str
    text: str
    node_type: str | None = None


@dataclass(frozen=True)
class DeleteNode:
    node_id: str


@dataclass(frozen=True)
class MoveNode:
    node_id: str
    new_parent_id: str


@dataclass(frozen=True)
class UpdateText:
    node_id: str
    text: str


@dataclass(frozen=True)
class UpdatePriority:
    node_id: str
    priority: int | None


@dataclass(frozen=True)
class ToggleCollapse:
    node_id: str


@dataclass(frozen=True)
class SetAllCollapsed:
    collapsed: bool


@dataclass(frozen=True)
class ReplaceTree:
    """Swap in a whole edited tree as a single undoable step."""

    root: Node


# --- Non-undoable: ephemeral UI state ---


@dataclass(frozen=True)
class SelectNode:
    node_id: str | None


@dataclass(frozen=True)
class EditNode:
    node_id: str | None


@dataclass(frozen=True)
class SetViewport:
    x: float | None = None
    y: float | None = None
    zoom: float | None = None


@dataclass(frozen=True)
class SetSearchTerm:
    term: str


@dataclass(frozen=True)
class NextMatch:
    pass


@dataclass(frozen=True)
class PreviousMatch:
    pass


@dataclass(frozen=True)
class SetReadOnly:
    read_only: bool


# --- Handled by the history wrapper ---


@dataclass(frozen=True)
class LoadData:
    """Load a fresh tree. Resets focus, search, viewport and history."""

    root: Node | None


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


StructuralAction = (
    AddNode
    | AddSibling
    | DeleteNode
    | MoveNode
    | UpdateText
    | UpdatePriority
    | ToggleCollapse
    | SetAllCollapsed
    | ReplaceTree
)

UiAction = (
    SelectNode | EditNode | SetViewport | SetSearchTerm | NextMatch | PreviousMatch | SetReadOnly
)

Action = StructuralAction | UiAction | LoadData | Undo | Redo

UNDOABLE_ACTIONS: tuple[type, ...] = (
    AddNode,
    AddSibling,
    DeleteNode,
    MoveNode,
    UpdateText,
    UpdatePriority,
    ToggleCollapse,
    SetAllCollapsed,
    ReplaceTree,
)


def is_undoable(action: object) -> bool:
    return isinstance(action, UNDOABLE_ACTIONS)
