"""Linear undo/redo log of editor snapshots.

The history is a plain value: dispatch() returns a new History and never
touches the one it was called on, so the caller decides where it lives.
"""

from dataclasses import dataclass, replace

from loguru import logger

from mindmap_editor.core.commands.results import CommandResult
from mindmap_editor.core.state import actions as act
from mindmap_editor.core.state.options import EditorConfig
from mindmap_editor.core.state.reducer import commit_tree, step
from mindmap_editor.models.node import Node
from mindmap_editor.models.state import Editing, EditorState, Selected


def _expanded_tree(action: act.Action, before: EditorState, after: EditorState) -> bool:
    """Match navigation that had to open collapsed branches is recorded."""
    return isinstance(action, act.NextMatch | act.PreviousMatch) and after.root is not before.root


@dataclass(frozen=True)
class HistoryTransition:
    """The history after an action, plus the reason when it was rejected."""

    history: "History"
    error: str | None = None
    command: CommandResult | None = None


@dataclass(frozen=True)
class History:
    present: EditorState = EditorState()
    past: tuple[EditorState, ...] = ()
    future: tuple[EditorState, ...] = ()
    last_loaded_root: Node | None = None

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def _restore(self, snapshot: EditorState, cfg: EditorConfig) -> EditorState:
        """Bring a stored snapshot back as present, carrying over live UI state.

        Read-only mode and the viewport belong to the session; tree, focus and
        search come back from the snapshot. A snapshot without a tree falls
        back to the last loaded one.
        """
        live = self.present
        focus = snapshot.focus
        if live.read_only and isinstance(focus, Editing):
            focus = Selected(focus.node_id)
        restored = replace(snapshot, focus=focus, read_only=live.read_only, viewport=live.viewport)
        if snapshot.root is None and self.last_loaded_root is not None:
            return commit_tree(restored, self.last_loaded_root, cfg)
        return restored

    def dispatch(self, action: act.Action, cfg: EditorConfig) -> HistoryTransition:
        """Apply action and record it when it is undoable or opened collapsed branches.

        Args:
            action: Action to apply.
            cfg: Editor configuration.

        Returns:
            HistoryTransition whose history is self when nothing changed.
        """
        match action:
            case act.Undo():
                if not self.past:
                    return HistoryTransition(history=self, error="Nothing to undo")
                restored = self._restore(self.past[-1], cfg)
                logger.debug("Undo ({} steps left)", len(self.past) - 1)
                return HistoryTransition(
                    history=replace(
                        self,
                        past=self.past[:-1],
                        present=restored,
                        future=(self.present, *self.future),
                    )
                )

            case act.Redo():
                if not self.future:
                    return HistoryTransition(history=self, error="Nothing to redo")
                restored = self._restore(self.future[0], cfg)
                logger.debug("Redo ({} steps left)", len(self.future) - 1)
                return HistoryTransition(
                    history=replace(
                        self,
                        past=(*self.past, self.present),
                        present=restored,
                        future=self.future[1:],
                    )
                )

            case act.LoadData():
                state = step(self.present, action, cfg).state
                return HistoryTransition(history=History(present=state, last_loaded_root=state.root))

        transition = step(self.present, action, cfg)
        if transition.state is self.present:
            return HistoryTransition(history=self, error=transition.error, command=transition.command)

        if act.is_undoable(action) or _expanded_tree(action, self.present, transition.state):
            history = replace(
                self,
                past=(*self.past, self.present),
                present=transition.state,
                future=(),
            )
        else:
            history = replace(self, present=transition.state)
        return HistoryTransition(history=history, command=transition.command)
