"""Tests for the node type constraint table."""

import pytest

from mindmap_editor.core.constraints import (
    DEFAULT_CONSTRAINTS,
    TypeConstraintTable,
    check_placement,
    find_violations,
)
from mindmap_editor.core.tree.normalize import normalize_tree
from mindmap_editor.core.tree.operations import find_by_id
from mindmap_editor.models.node import Node


def _node(root: Node, node_id: str) -> Node:
    node = find_by_id(root, node_id)
    assert node is not None
    return node


def test_allowed_child_passes(typed_tree: Node) -> None:
    assert check_placement(DEFAULT_CONSTRAINTS, _node(typed_tree, "mod"), "caseNode") is None


def test_type_outside_allow_list_is_rejected(typed_tree: Node) -> None:
    reason = check_placement(DEFAULT_CONSTRAINTS, _node(typed_tree, "mod"), "stepNode")
    assert reason == "A moduleNode node cannot contain a stepNode node"


def test_untyped_child_under_constrained_parent_is_rejected(typed_tree: Node) -> None:
    reason = check_placement(DEFAULT_CONSTRAINTS, _node(typed_tree, "case1"), None)
    assert reason is not None
    assert "untyped" in reason


def test_unconstrained_parent_accepts_anything() -> None:
    parent = Node(id="p", text="Plain")
    assert check_placement(DEFAULT_CONSTRAINTS, parent, "stepNode") is None
    assert check_placement(DEFAULT_CONSTRAINTS, parent, None) is None


def test_cardinality_cap(typed_tree: Node) -> None:
    reason = check_placement(DEFAULT_CONSTRAINTS, _node(typed_tree, "case1"), "preconditionNode")
    assert reason == "A caseNode node allows at most 1 preconditionNode child"


def test_cardinality_ignores_the_node_being_moved(typed_tree: Node) -> None:
    case = _node(typed_tree, "case1")
    assert check_placement(DEFAULT_CONSTRAINTS, case, "preconditionNode", moving_id="pre1") is None


def test_fixed_first(typed_tree: Node) -> None:
    case = _node(typed_tree, "case1")
    assert DEFAULT_CONSTRAINTS.is_fixed_first(case, "preconditionNode")
    assert not DEFAULT_CONSTRAINTS.is_fixed_first(case, "stepNode")
    assert not DEFAULT_CONSTRAINTS.is_fixed_first(Node(id="p", text="P"), "preconditionNode")


def test_from_mapping() -> None:
    table = TypeConstraintTable.from_mapping(
        {"folder": {"allowedChildren": ["folder", "file"], "maxChildren": {"file": 2}}}
    )
    rule = table.rule_for("folder")
    assert rule is not None
    assert rule.allowed_children == {"folder", "file"}
    assert rule.max_children == {"file": 2}
    assert table.rule_for(None) is None
    assert table.rule_for("file") is None


@pytest.mark.parametrize(
    "data",
    [
        {"folder": ["file"]},
        {"folder": {"allowedChildren": "file"}},
        {"folder": {"maxChildren": {"file": -1}}},
        {"folder": {"fixedFirst": [1]}},
    ],
)
def test_from_mapping_rejects_bad_shapes(data: dict) -> None:
    with pytest.raises(ValueError):
        TypeConstraintTable.from_mapping(data)


def test_valid_tree_has_no_violations(typed_tree: Node) -> None:
    assert find_violations(DEFAULT_CONSTRAINTS, typed_tree) == []
    assert find_violations(DEFAULT_CONSTRAINTS, None) == []


def test_find_violations_reports_each_problem() -> None:
    tree = normalize_tree(
        {
            "id": "case",
            "text": "Case",
            "nodeType": "caseNode",
            "children": [
                {"id": "s", "text": "Step", "nodeType": "stepNode"},
                {"id": "p1", "text": "Pre", "nodeType": "preconditionNode"},
                {"id": "p2", "text": "Pre again", "nodeType": "preconditionNode"},
                {"id": "loose", "text": "Loose"},
            ],
        }
    )
    assert find_violations(DEFAULT_CONSTRAINTS, tree) == [
        "case: preconditionNode child p1 must come first",
        "case: more than 1 preconditionNode children (p2)",
        "case: preconditionNode child p2 must come first",
        "case: untyped child loose is not allowed",
    ]
