"""Pure, synchronous reducer for the editing state machine.

step() applies one action to an EditorState and reports why an action was
rejected; reduce() returns only the state. A rejected or no-op action always
returns the very same state object, which the history wrapper relies on.
"""

from dataclasses import dataclass, replace

from loguru import logger

from mindmap_editor.core.commands.edit import (
    expand_path_to,
    set_all_collapsed,
    toggle_collapse,
    update_priority,
    update_text,
)
from mindmap_editor.core.commands.results import AddResult, CommandResult, DeleteResult
from mindmap_editor.core.commands.structure import add_node, add_sibling, delete_node, move_node
from mindmap_editor.core.search.searcher import (
    next_match_index,
    previous_match_index,
    search_tree,
)
from mindmap_editor.core.state import actions as act
from mindmap_editor.core.state.options import EditorConfig
from mindmap_editor.core.tree.normalize import seed_collapsed_counts, strip_extensions
from mindmap_editor.core.tree.operations import find_by_id
from mindmap_editor.models.node import Node
from mindmap_editor.models.state import (
    NO_FOCUS,
    Editing,
    EditorState,
    SearchState,
    Selected,
    Viewport,
)

READ_ONLY_ERROR = "The mind map is read-only"


@dataclass(frozen=True)
class Transition:
    """The state after an action, plus the command outcome when there was one."""

    state: EditorState
    error: str | None = None
    command: CommandResult | None = None


def _rejected(state: EditorState, error: str, command: CommandResult | None = None) -> Transition:
    return Transition(state=state, error=error, command=command)


def _search_state(root: Node | None, term: str, previous: SearchState, cfg: EditorConfig) -> SearchState:
    """Index term against root, keeping the current match when it survives."""
    index = search_tree(root, term, include_collapsed=cfg.search_collapsed)
    if not index.matches:
        return SearchState(term=term)
    current = 0
    if previous.current_id in index.matches:
        current = index.matches.index(previous.current_id)  # type: ignore[arg-type]
    return SearchState(
        term=term,
        matches=index.matches,
        highlighted=index.highlighted,
        current_index=current,
        current_id=index.matches[current],
    )


def commit_tree(state: EditorState, root: Node | None, cfg: EditorConfig) -> EditorState:
    """Swap in a new tree and keep focus and search consistent with it."""
    focus = state.focus
    focused_id = state.selected_node_id
    if focused_id is not None and find_by_id(root, focused_id) is None:
        focus = Selected(root.id) if root is not None else NO_FOCUS
    search = state.search
    if search.term:
        search = _search_state(root, search.term, search, cfg)
    return replace(state, root=root, focus=focus, search=search)


def _prepare(root: Node, cfg: EditorConfig) -> Node:
    root = seed_collapsed_counts(root)
    return root if cfg.extended else strip_extensions(root)


def _run_command(state: EditorState, action: act.StructuralAction, cfg: EditorConfig) -> CommandResult:
    relayout = cfg.relayout()
    root = state.root
    constraints = cfg.constraints if cfg.extended else None
    match action:
        case act.AddNode(text=text, parent_id=parent_id, node_type=node_type):
            if node_type is not None and not cfg.extended:
                return CommandResult(root=root, error="Node types need the extended schema")
            return add_node(
                root,
                text,
                parent_id=parent_id,
                node_type=node_type,
                constraints=constraints,
                new_id=cfg.id_factory(),
                relayout=relayout,
            )
        case act.AddSibling(sibling_of=sibling_of, text=text, node_type=node_type):
            if node_type is not None and not cfg.extended:
                return CommandResult(root=root, error="Node types need the extended schema")
            return add_sibling(
                root,
                sibling_of,
                text,
                node_type=node_type,
                constraints=constraints,
                new_id=cfg.id_factory(),
                relayout=relayout,
            )
        case act.DeleteNode(node_id=node_id):
            return delete_node(root, node_id, relayout=relayout)
        case act.MoveNode(node_id=node_id, new_parent_id=new_parent_id):
            return move_node(
                root,
                node_id,
                new_parent_id,
                constraints=constraints,
                can_move=cfg.can_move,
                relayout=relayout,
            )
        case act.UpdateText(node_id=node_id, text=text):
            return update_text(root, node_id, text, relayout=relayout)
        case act.UpdatePriority(node_id=node_id, priority=priority):
            if not cfg.extended:
                return CommandResult(root=root, error="Priorities need the extended schema")
            return update_priority(
                root, node_id, priority, allowed=cfg.priority_labels.keys(), relayout=relayout
            )
        case act.ToggleCollapse(node_id=node_id):
            return toggle_collapse(root, node_id, relayout=relayout)
        case act.SetAllCollapsed(collapsed=collapsed):
            return set_all_collapsed(root, collapsed, relayout=relayout)
        case act.ReplaceTree(root=new_root):
            return CommandResult(root=relayout(_prepare(new_root, cfg)))
    msg = f"Unhandled structural action {action!r}"
    raise TypeError(msg)


def _apply_structural(state: EditorState, action: act.StructuralAction, cfg: EditorConfig) -> Transition:
    if state.read_only:
        logger.debug("{} rejected: read-only", type(action).__name__)
        return _rejected(state, READ_ONLY_ERROR)

    result = _run_command(state, action, cfg)
    if not result.ok:
        return _rejected(state, result.error or "", result)
    if result.root is state.root:
        return Transition(state=state, command=result)

    new_state = commit_tree(state, result.root, cfg)
    if isinstance(result, AddResult) and result.new_node_id is not None:
        new_state = replace(new_state, focus=Selected(result.new_node_id))
    elif isinstance(result, DeleteResult) and result.selected_id is not None:
        new_state = replace(new_state, focus=Selected(result.selected_id))
    return Transition(state=new_state, command=result)


def _go_to_match(state: EditorState, index: int, cfg: EditorConfig) -> EditorState:
    match_id = state.search.matches[index]
    search = replace(state.search, current_index=index, current_id=match_id)
    root = state.root
    if cfg.search_collapsed:
        # The match may sit inside a collapsed branch; open the way to it.
        root = expand_path_to(root, match_id, relayout=cfg.relayout()).root
    return replace(state, root=root, search=search)


def _load(state: EditorState, root: Node | None, cfg: EditorConfig) -> EditorState:
    laid_out = cfg.relayout()(_prepare(root, cfg)) if root is not None else None
    return EditorState(
        root=laid_out,
        focus=Selected(laid_out.id) if laid_out is not None else NO_FOCUS,
        viewport=Viewport(x=cfg.layout.root_x, y=0.0),
        read_only=state.read_only,
    )


def step(state: EditorState, action: act.Action, cfg: EditorConfig) -> Transition:
    """Apply one action to state.

    Args:
        state: Current editing state (never modified).
        action: Action to apply.
        cfg: Editor configuration.

    Returns:
        Transition with the new state and, for rejected actions, the reason.
    """
    match action:
        case act.LoadData(root=root):
            return Transition(state=_load(state, root, cfg))

        case act.SelectNode(node_id=None):
            if state.focus is NO_FOCUS:
                return Transition(state=state)
            return Transition(state=replace(state, focus=NO_FOCUS))

        case act.SelectNode(node_id=node_id):
            if find_by_id(state.root, node_id) is None:
                return _rejected(state, f"Node {node_id!r} not found")
            if state.focus == Selected(node_id):
                return Transition(state=state)
            return Transition(state=replace(state, focus=Selected(node_id)))

        case act.EditNode(node_id=None):
            if not isinstance(state.focus, Editing):
                return Transition(state=state)
            return Transition(state=replace(state, focus=Selected(state.focus.node_id)))

        case act.EditNode(node_id=node_id):
            if state.read_only:
                return _rejected(state, READ_ONLY_ERROR)
            if find_by_id(state.root, node_id) is None:
                return _rejected(state, f"Node {node_id!r} not found")
            if state.focus == Editing(node_id):
                return Transition(state=state)
            return Transition(state=replace(state, focus=Editing(node_id)))

        case act.SetViewport(x=x, y=y, zoom=zoom):
            current = state.viewport
            viewport = Viewport(
                x=current.x if x is None else x,
                y=current.y if y is None else y,
                zoom=current.zoom if zoom is None else zoom,
            )
            if viewport == current:
                return Transition(state=state)
            return Transition(state=replace(state, viewport=viewport))

        case act.SetSearchTerm(term=term):
            search = _search_state(state.root, term, SearchState(), cfg)
            return Transition(state=replace(state, search=search))

        case act.NextMatch() | act.PreviousMatch():
            count = len(state.search.matches)
            if count == 0:
                return Transition(state=state)
            move = next_match_index if isinstance(action, act.NextMatch) else previous_match_index
            return Transition(state=_go_to_match(state, move(state.search.current_index, count), cfg))

        case act.SetReadOnly(read_only=read_only):
            if state.read_only == read_only:
                return Transition(state=state)
            focus = state.focus
            if read_only and isinstance(focus, Editing):
                focus = Selected(focus.node_id)
            return Transition(state=replace(state, read_only=read_only, focus=focus))

        case act.Undo() | act.Redo():
            return Transition(state=state)

    return _apply_structural(state, action, cfg)  # type: ignore[arg-type]


def reduce(state: EditorState, action: act.Action, cfg: EditorConfig) -> EditorState:
    """Apply one action and return only the resulting state."""
    return step(state, action, cfg).state
