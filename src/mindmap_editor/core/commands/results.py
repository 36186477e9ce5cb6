"""Results returned by structural commands."""

from collections.abc import Callable
from dataclasses import dataclass

from mindmap_editor.models.node import Node

# Whole-tree re-layout applied after every successful command.
Relayout = Callable[[Node | None], Node | None]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a command.

    On rejection, root is the input tree object itself and error carries an
    advisory reason suitable for showing to the user.
    """

    root: Node | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AddResult(CommandResult):
    """Outcome of adding a node."""

    new_node_id: str | None = None


@dataclass(frozen=True)
class DeleteResult(CommandResult):
    """Outcome of deleting a node.

    deleted_ids holds every id that no longer exists, so callers can drop
    selection or edit state that points at them. selected_id is the node that
    should receive the selection afterwards.
    """

    deleted_ids: frozenset[str] = frozenset()
    selected_id: str | None = None
