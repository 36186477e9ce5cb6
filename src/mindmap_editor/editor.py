"""Stateful facade over the pure reducer and history.

MindMapEditor is what a renderer or UI layer talks to: it owns one History,
turns method calls into actions, and reports each outcome as an EditOutcome.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger

from mindmap_editor.core.commands.results import AddResult, DeleteResult
from mindmap_editor.core.state import actions as act
from mindmap_editor.core.state.history import History
from mindmap_editor.core.state.options import EditorConfig
from mindmap_editor.core.tree.normalize import normalize_tree
from mindmap_editor.models.node import Node
from mindmap_editor.models.state import EditorState


@dataclass(frozen=True)
class EditOutcome:
    """What happened to one editor call.

    node_id is the id of a node created by the call; deleted_ids lists every
    node a delete removed.
    """

    success: bool
    error: str | None = None
    node_id: str | None = None
    deleted_ids: frozenset[str] = frozenset()


class MindMapEditor:
    """Single-session mind map editor."""

    def __init__(self, config: EditorConfig | None = None) -> None:
        self.config = config or EditorConfig()
        self._history = History()

    @property
    def history(self) -> History:
        return self._history

    @property
    def state(self) -> EditorState:
        return self._history.present

    @property
    def root(self) -> Node | None:
        return self._history.present.root

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def dispatch(self, action: act.Action) -> EditOutcome:
        """Apply any action and keep the resulting history."""
        transition = self._history.dispatch(action, self.config)
        self._history = transition.history
        if transition.error is not None:
            logger.debug("{} rejected: {}", type(action).__name__, transition.error)
            return EditOutcome(success=False, error=transition.error)

        command = transition.command
        if isinstance(command, AddResult):
            return EditOutcome(success=True, node_id=command.new_node_id)
        if isinstance(command, DeleteResult):
            return EditOutcome(success=True, deleted_ids=command.deleted_ids)
        return EditOutcome(success=True)

    # --- loading ---

    def load(self, raw: Any) -> EditOutcome:
        """Normalize raw tree data and load it, resetting focus, search and history."""
        root = normalize_tree(raw) if raw is not None else None
        outcome = self.dispatch(act.LoadData(root))
        return EditOutcome(success=outcome.success, node_id=root.id if root else None)

    def replace_tree(self, raw: Any) -> EditOutcome:
        """Load edited tree data as a single undoable step."""
        return self.dispatch(act.ReplaceTree(normalize_tree(raw)))

    # --- structure ---

    def add(self, text: str, parent_id: str | None = None, node_type: str | None = None) -> EditOutcome:
        return self.dispatch(act.AddNode(text=text, parent_id=parent_id, node_type=node_type))

    def add_sibling(self, sibling_of: str, text: str, node_type: str | None = None) -> EditOutcome:
        return self.dispatch(act.AddSibling(sibling_of=sibling_of, text=text, node_type=node_type))

    def delete(self, node_id: str) -> EditOutcome:
        return self.dispatch(act.DeleteNode(node_id))

    def move(self, node_id: str, new_parent_id: str) -> EditOutcome:
        return self.dispatch(act.MoveNode(node_id=node_id, new_parent_id=new_parent_id))

    def update_text(self, node_id: str, text: str) -> EditOutcome:
        return self.dispatch(act.UpdateText(node_id=node_id, text=text))

    def update_priority(self, node_id: str, priority: int | None) -> EditOutcome:
        return self.dispatch(act.UpdatePriority(node_id=node_id, priority=priority))

    def toggle_collapse(self, node_id: str) -> EditOutcome:
        return self.dispatch(act.ToggleCollapse(node_id))

    def collapse_all(self) -> EditOutcome:
        return self.dispatch(act.SetAllCollapsed(collapsed=True))

    def expand_all(self) -> EditOutcome:
        return self.dispatch(act.SetAllCollapsed(collapsed=False))

    # --- UI state ---

    def select(self, node_id: str | None) -> EditOutcome:
        return self.dispatch(act.SelectNode(node_id))

    def edit(self, node_id: str | None) -> EditOutcome:
        return self.dispatch(act.EditNode(node_id))

    def set_viewport(
        self, x: float | None = None, y: float | None = None, zoom: float | None = None
    ) -> EditOutcome:
        return self.dispatch(act.SetViewport(x=x, y=y, zoom=zoom))

    def set_search_term(self, term: str) -> EditOutcome:
        return self.dispatch(act.SetSearchTerm(term))

    def next_match(self) -> EditOutcome:
        return self.dispatch(act.NextMatch())

    def previous_match(self) -> EditOutcome:
        return self.dispatch(act.PreviousMatch())

    def set_read_only(self, read_only: bool) -> EditOutcome:
        return self.dispatch(act.SetReadOnly(read_only))

    # --- history ---

    def undo(self) -> EditOutcome:
        return self.dispatch(act.Undo())

    def redo(self) -> EditOutcome:
        return self.dispatch(act.Redo())
