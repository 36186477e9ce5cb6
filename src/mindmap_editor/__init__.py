"""Mind map editor core: tree model, layout, commands, history and search."""

from mindmap_editor.core.state.options import EditorConfig, SchemaVariant
from mindmap_editor.editor import EditOutcome, MindMapEditor
from mindmap_editor.models.node import Node, Point
from mindmap_editor.protocols import MovePredicate, TextMeasurer

__all__ = [
    "EditOutcome",
    "EditorConfig",
    "MindMapEditor",
    "MovePredicate",
    "Node",
    "Point",
    "SchemaVariant",
    "TextMeasurer",
]
