"""Per-node-type placement rules consulted by add and move."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mindmap_editor.models.node import Node


@dataclass(frozen=True)
class TypeRule:
    """What a node of one type may contain.

    allowed_children is a closed allow-list; an untyped child never matches it.
    max_children caps how many children of a given type may coexist.
    fixed_first types always sit at index 0 of the children.
    """

    allowed_children: frozenset[str]
    max_children: Mapping[str, int] = field(default_factory=dict, hash=False)
    fixed_first: frozenset[str] = frozenset()


@dataclass(frozen=True)
class TypeConstraintTable:
    """Placement rules keyed by parent node type.

    Parents whose type has no rule (including untyped parents) accept anything.
    """

    rules: Mapping[str, TypeRule] = field(default_factory=dict, hash=False)

    def rule_for(self, node_type: str | None) -> TypeRule | None:
        if node_type is None:
            return None
        return self.rules.get(node_type)

    def is_fixed_first(self, parent: Node, child_type: str | None) -> bool:
        rule = self.rule_for(parent.node_type)
        return rule is not None and child_type is not None and child_type in rule.fixed_first

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TypeConstraintTable":
        """Build a table from JSON-like configuration.

        Expected shape::

            {"caseNode": {"allowedChildren": ["stepNode", "preconditionNode"],
                          "maxChildren": {"preconditionNode": 1},
                          "fixedFirst": ["preconditionNode"]}}

        Raises:
            ValueError: If the mapping does not have that shape.
        """
        rules: dict[str, TypeRule] = {}
        for parent_type, raw in data.items():
            if not isinstance(raw, Mapping):
                msg = f"Rule for {parent_type!r} must be an object, got {type(raw).__name__}"
                raise ValueError(msg)
            allowed = raw.get("allowedChildren", [])
            caps = raw.get("maxChildren", {})
            fixed = raw.get("fixedFirst", [])
            if not isinstance(allowed, list) or not all(isinstance(t, str) for t in allowed):
                msg = f"allowedChildren for {parent_type!r} must be a list of strings"
                raise ValueError(msg)
            if not isinstance(caps, Mapping) or not all(
                isinstance(v, int) and v >= 0 for v in caps.values()
            ):
                msg = f"maxChildren for {parent_type!r} must map types to non-negative ints"
                raise ValueError(msg)
            if not isinstance(fixed, list) or not all(isinstance(t, str) for t in fixed):
                msg = f"fixedFirst for {parent_type!r} must be a list of strings"
                raise ValueError(msg)
            rules[parent_type] = TypeRule(
                allowed_children=frozenset(allowed),
                max_children=dict(caps),
                fixed_first=frozenset(fixed),
            )
        return cls(rules=rules)


def check_placement(
    table: TypeConstraintTable,
    parent: Node,
    child_type: str | None,
    *,
    moving_id: str | None = None,
) -> str | None:
    """Return why a child of child_type may not go under parent, or None if it may.

    moving_id excludes a node already under parent from the cardinality count,
    so moving a child within the same parent is not counted twice.
    """
    rule = table.rule_for(parent.node_type)
    if rule is None:
        return None

    if child_type is None or child_type not in rule.allowed_children:
        shown = child_type or "untyped"
        return f"A {parent.node_type} node cannot contain a {shown} node"

    cap = rule.max_children.get(child_type)
    if cap is not None:
        existing = sum(
            1 for c in parent.children if c.node_type == child_type and c.id != moving_id
        )
        if existing >= cap:
            noun = "child" if cap == 1 else "children"
            return f"A {parent.node_type} node allows at most {cap} {child_type} {noun}"
    return None


DEFAULT_CONSTRAINTS = TypeConstraintTable.from_mapping(
    {
        "rootNode": {"allowedChildren": ["moduleNode", "testPointNode", "caseNode"]},
        "moduleNode": {"allowedChildren": ["moduleNode", "testPointNode", "caseNode"]},
        "testPointNode": {"allowedChildren": ["testPointNode", "caseNode"]},
        "caseNode": {
            "allowedChildren": ["preconditionNode", "stepNode"],
            "maxChildren": {"preconditionNode": 1},
            "fixedFirst": ["preconditionNode"],
        },
        "preconditionNode": {"allowedChildren": []},
        "stepNode": {"allowedChildren": ["resultNode"], "maxChildren": {"resultNode": 1}},
        "resultNode": {"allowedChildren": []},
    }
)


def find_violations(table: TypeConstraintTable, root: Node | None) -> list[str]:
    """List every placement in root that table would not allow, in document order."""
    problems: list[str] = []
    if root is None:
        return problems
    stack = [root]
    while stack:
        node = stack.pop()
        rule = table.rule_for(node.node_type)
        if rule is not None:
            seen: dict[str, int] = {}
            for index, child in enumerate(node.children):
                if child.node_type is None or child.node_type not in rule.allowed_children:
                    shown = child.node_type or "untyped"
                    problems.append(f"{node.id}: {shown} child {child.id} is not allowed")
                    continue
                seen[child.node_type] = seen.get(child.node_type, 0) + 1
                cap = rule.max_children.get(child.node_type)
                if cap is not None and seen[child.node_type] > cap:
                    problems.append(
                        f"{node.id}: more than {cap} {child.node_type} children ({child.id})"
                    )
                if child.node_type in rule.fixed_first and index != 0:
                    problems.append(f"{node.id}: {child.node_type} child {child.id} must come first")
        stack.extend(reversed(node.children))
    return problems
