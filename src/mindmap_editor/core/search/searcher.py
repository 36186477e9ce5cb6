"""Substring search over a tree snapshot."""

from dataclasses import dataclass

from mindmap_editor.core.tree.operations import iter_nodes
from mindmap_editor.models.node import Node


@dataclass(frozen=True)
class SearchIndex:
    """Matching node ids in document order, plus the same ids as a set."""

    matches: tuple[str, ...] = ()
    highlighted: frozenset[str] = frozenset()


def _prepare_term(term: str) -> str:
    return term.strip().lower()


def search_tree(root: Node | None, term: str, *, include_collapsed: bool = True) -> SearchIndex:
    """Find nodes whose text contains term, case-insensitively.

    Args:
        root: Tree to scan, in pre-order.
        term: Search text. Blank terms match nothing.
        include_collapsed: Whether to look inside collapsed subtrees.

    Returns:
        SearchIndex with matches in document order.
    """
    needle = _prepare_term(term)
    if not needle:
        return SearchIndex()
    matches = tuple(
        node.id
        for node in iter_nodes(root, include_collapsed=include_collapsed)
        if needle in node.text.lower()
    )
    return SearchIndex(matches=matches, highlighted=frozenset(matches))


def next_match_index(current: int, count: int) -> int:
    """Index of the next match, wrapping around. -1 when there are no matches."""
    if count <= 0:
        return -1
    return (current + 1) % count


def previous_match_index(current: int, count: int) -> int:
    """Index of the previous match, wrapping around. -1 when there are no matches."""
    if count <= 0:
        return -1
    return (current - 1) % count
