"""Core abstractions for DazzleBind.

This package contains the building blocks of the binding tree: path
parsing, events, accessors and data nodes.
"""

from .path import PATH_SEPARATOR, SELF_REFERENCE, split_path, is_self_reference
from .events import Event
from .accessor import (
    Accessor,
    AccessorKind,
    AccessorResolver,
    FieldAccessor,
    PropertyAccessor,
    MethodAccessor,
    IndexedElementAccessor,
    ContextAccessor,
)
from .node import DataNode

__all__ = [
    "PATH_SEPARATOR",
    "SELF_REFERENCE",
    "split_path",
    "is_self_reference",
    "Event",
    "Accessor",
    "AccessorKind",
    "AccessorResolver",
    "FieldAccessor",
    "PropertyAccessor",
    "MethodAccessor",
    "IndexedElementAccessor",
    "ContextAccessor",
    "DataNode",
]
