"""Exceptions raised by the editor core.

Expected rejections (unknown ids, illegal moves, malformed input) are returned
as values, never raised. Only broken internal invariants raise.
"""


class TreeIntegrityError(RuntimeError):
    """A tree snapshot violates an invariant that should be impossible to break."""
