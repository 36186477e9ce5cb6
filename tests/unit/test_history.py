"""Tests for the undo/redo history."""

from dataclasses import replace

import pytest

from mindmap_editor.core.state import actions as act
from mindmap_editor.core.state.history import History
from mindmap_editor.core.state.options import EditorConfig
from mindmap_editor.core.tree.operations import find_by_id, iter_nodes, replace_node
from mindmap_editor.models.node import Node
from mindmap_editor.models.state import Editing, EditorState, Selected, Viewport


def _dispatch(history: History, cfg: EditorConfig, *actions: act.Action) -> History:
    for action in actions:
        history = history.dispatch(action, cfg).history
    return history


@pytest.fixture
def loaded(plain_tree: Node, extended_config: EditorConfig) -> History:
    return History().dispatch(act.LoadData(plain_tree), extended_config).history


def test_fresh_history_cannot_undo_or_redo() -> None:
    history = History()
    assert not history.can_undo
    assert not history.can_redo


def test_load_resets_history(loaded: History, plain_tree: Node, extended_config: EditorConfig) -> None:
    edited = _dispatch(loaded, extended_config, act.AddNode("A"), act.AddNode("B"))
    assert edited.can_undo

    reloaded = edited.dispatch(act.LoadData(plain_tree), extended_config).history
    assert not reloaded.can_undo
    assert not reloaded.can_redo
    assert reloaded.last_loaded_root is reloaded.present.root


def test_undoable_action_is_recorded(loaded: History, extended_config: EditorConfig) -> None:
    history = _dispatch(loaded, extended_config, act.AddNode("A"))
    assert history.past == (loaded.present,)
    assert history.future == ()


def test_ui_actions_are_not_recorded(loaded: History, extended_config: EditorConfig) -> None:
    history = _dispatch(
        loaded,
        extended_config,
        act.SelectNode("jazz"),
        act.SetViewport(x=5.0),
        act.SetSearchTerm("book"),
    )
    assert not history.can_undo
    assert history.present.selected_node_id == "jazz"


def test_rejected_action_leaves_history_alone(
    loaded: History, extended_config: EditorConfig
) -> None:
    transition = loaded.dispatch(act.MoveNode("books", "py"), extended_config)
    assert transition.history is loaded
    assert transition.error is not None


def test_undo_and_redo_without_entries(loaded: History, extended_config: EditorConfig) -> None:
    assert loaded.dispatch(act.Undo(), extended_config).history is loaded
    assert loaded.dispatch(act.Redo(), extended_config).history is loaded


def _without_session(state: EditorState) -> EditorState:
    return replace(state, viewport=Viewport(), read_only=False)


def test_round_trip(loaded: History, extended_config: EditorConfig) -> None:
    start = _dispatch(
        loaded,
        extended_config,
        act.SelectNode("jazz"),
        act.SetSearchTerm("book"),
        act.NextMatch(),
        act.SetViewport(x=40.0, zoom=2.0),
    )
    assert start.present.search.current_id == "py"
    assert not start.can_undo

    edits: list[act.Action] = [
        act.AddNode("A", parent_id="music"),
        act.UpdateText("jazz", "Bebop"),
        act.ToggleCollapse("books"),
        act.MoveNode("py", "music"),
        act.DeleteNode("rs"),
    ]
    edited = _dispatch(start, extended_config, *edits)
    assert len(edited.past) == len(edits)
    edited = _dispatch(edited, extended_config, act.PreviousMatch(), act.SetReadOnly(True))

    undone = _dispatch(edited, extended_config, *[act.Undo()] * len(edits))
    assert _without_session(undone.present) == _without_session(start.present)
    assert undone.present.search.current_id == "py"
    assert undone.present.focus == Selected("jazz")
    assert not undone.can_undo

    redone = _dispatch(undone, extended_config, *[act.Redo()] * len(edits))
    assert _without_session(redone.present) == _without_session(edited.present)
    assert not redone.can_redo


def test_new_edit_clears_redo(loaded: History, extended_config: EditorConfig) -> None:
    history = _dispatch(loaded, extended_config, act.AddNode("A"), act.Undo())
    assert history.can_redo
    history = _dispatch(history, extended_config, act.AddNode("B"))
    assert not history.can_redo


def test_undo_keeps_live_viewport_and_read_only(
    loaded: History, extended_config: EditorConfig
) -> None:
    history = _dispatch(
        loaded,
        extended_config,
        act.EditNode("jazz"),
        act.UpdateText("jazz", "Bebop"),
        act.SetViewport(x=100.0, y=50.0, zoom=1.5),
        act.SetReadOnly(True),
    )
    undone = _dispatch(history, extended_config, act.Undo())
    assert undone.present.viewport == Viewport(x=100.0, y=50.0, zoom=1.5)
    assert undone.present.read_only
    # the restored snapshot was editing jazz, which read-only mode forbids
    assert undone.present.focus == Selected("jazz")
    assert find_by_id(undone.present.root, "jazz").text == "Jazz"  # type: ignore[union-attr]


def test_undo_restores_edit_focus_when_writable(
    loaded: History, extended_config: EditorConfig
) -> None:
    history = _dispatch(loaded, extended_config, act.EditNode("jazz"), act.UpdateText("jazz", "Bebop"))
    undone = _dispatch(history, extended_config, act.Undo())
    assert undone.present.focus == Editing("jazz")


def test_undo_after_loading_nothing_returns_to_empty_tree(
    extended_config: EditorConfig,
) -> None:
    history = _dispatch(History(), extended_config, act.AddNode("First"))
    assert history.present.root is not None
    history = _dispatch(history, extended_config, act.LoadData(None))
    history = _dispatch(history, extended_config, act.AddNode("Second"))

    undone = _dispatch(history, extended_config, act.Undo())
    assert undone.present.root is None


def test_undo_of_tree_less_snapshot_uses_last_loaded_root(
    plain_tree: Node, extended_config: EditorConfig
) -> None:
    # A history whose oldest snapshot has no tree, e.g. before anything was drawn.
    history = _dispatch(History(), extended_config, act.AddNode("First"))
    history = History(
        present=history.present,
        past=history.past,
        last_loaded_root=plain_tree,
    )
    undone = _dispatch(history, extended_config, act.Undo())
    assert undone.present.root is plain_tree


def test_snapshots_are_not_altered(loaded: History, extended_config: EditorConfig) -> None:
    before = [n.text for n in iter_nodes(loaded.present.root)]
    _dispatch(loaded, extended_config, act.UpdateText("jazz", "Bebop"), act.DeleteNode("books"))
    assert [n.text for n in iter_nodes(loaded.present.root)] == before


def test_undo_restores_current_match(loaded: History, extended_config: EditorConfig) -> None:
    history = _dispatch(loaded, extended_config, act.SetSearchTerm("book"), act.NextMatch())
    before = history.present.search
    assert before.current_id == "py"

    history = _dispatch(history, extended_config, act.DeleteNode("py"))
    assert history.present.search.current_id == "books"

    undone = _dispatch(history, extended_config, act.Undo())
    assert undone.present.search == before
    assert undone.present.search.current_index == 1


def test_opening_a_collapsed_branch_for_a_match_is_undoable(
    plain_tree: Node, extended_config: EditorConfig
) -> None:
    tree = replace_node(plain_tree, "books", lambda n: replace(n, is_collapsed=True))
    history = _dispatch(History(), extended_config, act.LoadData(tree), act.SetSearchTerm("rust"))
    assert not history.can_undo

    navigated = _dispatch(history, extended_config, act.NextMatch())
    assert navigated.can_undo
    assert not find_by_id(navigated.present.root, "books").is_collapsed  # type: ignore[union-attr]

    undone = _dispatch(navigated, extended_config, act.Undo())
    books = find_by_id(undone.present.root, "books")
    assert books is not None
    assert books.is_collapsed
    assert books.children_count == 2

    redone = _dispatch(undone, extended_config, act.Redo())
    assert not find_by_id(redone.present.root, "books").is_collapsed  # type: ignore[union-attr]


def test_match_navigation_in_visible_tree_is_not_recorded(
    loaded: History, extended_config: EditorConfig
) -> None:
    history = _dispatch(loaded, extended_config, act.SetSearchTerm("book"), act.NextMatch())
    assert history.present.search.current_id == "py"
    assert not history.can_undo
