"""Path parsing for DazzleBind.

Paths are purely syntactic: splitting never touches a value. The data tree
walks a path one head segment at a time.
"""

from typing import Optional, Tuple

PATH_SEPARATOR = "."
SELF_REFERENCE = "#"


def split_path(path: str) -> Tuple[str, Optional[str]]:
    """Split a path into its head segment and the remainder.

    Args:
        path: Dotted path, e.g. ``"player.stats.health"``

    Returns:
        Tuple of (head, rest) where rest is None if there is no separator.
        A trailing separator produces an empty rest.

    Example:
        >>> split_path("a.b.c")
        ('a', 'b.c')
        >>> split_path("a")
        ('a', None)
    """
    head, separator, rest = path.partition(PATH_SEPARATOR)
    if not separator:
        return head, None
    return head, rest


def is_self_reference(segment: str) -> bool:
    """Check if a segment means "stop at the current node"."""
    return segment == SELF_REFERENCE


def join_path(parent: Optional[str], segment: str) -> str:
    """Build the full path of a child segment.

    The root's own path is the self-reference token, which is dropped when
    joining so that children of the root read as plain member names.
    """
    if not parent or parent == SELF_REFERENCE:
        return segment
    return parent + PATH_SEPARATOR + segment
