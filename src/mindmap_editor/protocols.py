"""Protocols for collaborators injected into the editor core."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mindmap_editor.models.node import Node


@runtime_checkable
class TextMeasurer(Protocol):
    """Protocol for text measurement backends used by the layout engine."""

    def measure(self, text: str, font_size: float) -> float:
        """Return the rendered width of a single line of text, in world units."""
        ...


@runtime_checkable
class MovePredicate(Protocol):
    """Protocol for an external veto on otherwise legal re-parenting."""

    def __call__(self, node: "Node", new_parent: "Node") -> bool:
        """Return False to veto moving node under new_parent."""
        ...
