"""Deterministic collaborators for testing the editor core."""

from mindmap_editor.models.node import Node


class FixedWidthMeasurer:
    """Text measurer where every character is char_width wide.

    Records every measured string so tests can assert on what was measured.
    """

    def __init__(self, char_width: float = 8.0) -> None:
        self.char_width = char_width
        self.calls: list[str] = []

    def measure(self, text: str, font_size: float) -> float:
        """Return len(text) * char_width, ignoring font_size."""
        self.calls.append(text)
        return len(text) * self.char_width


class SequentialIds:
    """Id factory yielding n1, n2, n3, ..."""

    def __init__(self, prefix: str = "n") -> None:
        self.prefix = prefix
        self.issued = 0

    def __call__(self) -> str:
        self.issued += 1
        return f"{self.prefix}{self.issued}"


class RecordingVeto:
    """Move predicate that vetoes moves into the given parent ids and records every call."""

    def __init__(self, *blocked_parents: str) -> None:
        self.blocked = set(blocked_parents)
        self.calls: list[tuple[str, str]] = []

    def __call__(self, node: Node, new_parent: Node) -> bool:
        self.calls.append((node.id, new_parent.id))
        return new_parent.id not in self.blocked
