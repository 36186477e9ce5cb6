"""Shared test fixtures."""

from typing import Any

import pytest

from mindmap_editor.core.layout.measure import LayoutConfig
from mindmap_editor.core.state.options import EditorConfig, SchemaVariant
from mindmap_editor.core.tree.normalize import normalize_tree
from mindmap_editor.editor import MindMapEditor
from mindmap_editor.models.node import Node
from tests.unit.fakes import FixedWidthMeasurer, SequentialIds

# Root
# ├── Books
# │   ├── Python cookbook
# │   └── Rust book
# └── Music
#     └── Jazz
PLAIN_TREE: dict[str, Any] = {
    "id": "root",
    "text": "Root",
    "children": [
        {
            "id": "books",
            "text": "Books",
            "children": [
                {"id": "py", "text": "Python cookbook"},
                {"id": "rs", "text": "Rust book"},
            ],
        },
        {
            "id": "music",
            "text": "Music",
            "children": [{"id": "jazz", "text": "Jazz"}],
        },
    ],
}

# A typed test-case tree for the extended schema.
TYPED_TREE: dict[str, Any] = {
    "id": "root",
    "text": "Login",
    "nodeType": "rootNode",
    "children": [
        {
            "id": "mod",
            "text": "Auth module",
            "nodeType": "moduleNode",
            "children": [
                {
                    "id": "case1",
                    "text": "Valid password",
                    "nodeType": "caseNode",
                    "priority": 1,
                    "children": [
                        {"id": "pre1", "text": "User exists", "nodeType": "preconditionNode"},
                        {
                            "id": "step1",
                            "text": "Submit form",
                            "nodeType": "stepNode",
                            "children": [
                                {"id": "res1", "text": "Logged in", "nodeType": "resultNode"}
                            ],
                        },
                    ],
                },
                {"id": "case2", "text": "Wrong password", "nodeType": "caseNode"},
            ],
        },
    ],
}


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer()


@pytest.fixture
def layout_config() -> LayoutConfig:
    return LayoutConfig()


@pytest.fixture
def extended_config(measurer: FixedWidthMeasurer) -> EditorConfig:
    return EditorConfig(
        variant=SchemaVariant.EXTENDED, measurer=measurer, id_factory=SequentialIds()
    )


@pytest.fixture
def minimal_config(measurer: FixedWidthMeasurer) -> EditorConfig:
    return EditorConfig(
        variant=SchemaVariant.MINIMAL, measurer=measurer, id_factory=SequentialIds()
    )


@pytest.fixture
def plain_tree() -> Node:
    return normalize_tree(PLAIN_TREE)


@pytest.fixture
def typed_tree() -> Node:
    return normalize_tree(TYPED_TREE)


@pytest.fixture
def editor(extended_config: EditorConfig) -> MindMapEditor:
    """Extended-schema editor loaded with the plain tree."""
    ed = MindMapEditor(extended_config)
    ed.load(PLAIN_TREE)
    return ed


@pytest.fixture
def typed_editor(extended_config: EditorConfig) -> MindMapEditor:
    ed = MindMapEditor(extended_config)
    ed.load(TYPED_TREE)
    return ed
