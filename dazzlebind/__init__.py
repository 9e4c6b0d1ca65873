"""DazzleBind - Path-based reactive data binding.

DazzleBind binds consumers to locations in an arbitrary object graph using
dotted paths. Paths are resolved lazily into a cached tree of data nodes;
changes propagate from the root towards the leaves, driven either by writes
through the context, by push sources living next to bound members, or by
notifying collections.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzlebind import Context

    ctx = Context(player)
    ctx.register_listener("stats.health", print)
    ctx.set_value("stats.health", 7)     # prints 7
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .config import BindingConfig, NamingCase
from .errors import (
    BindingError,
    InvalidPathError,
    ReadOnlyWriteError,
    DispatchDepthError,
    ConversionWarning,
)
from .core import (
    Accessor,
    AccessorKind,
    AccessorResolver,
    FieldAccessor,
    PropertyAccessor,
    MethodAccessor,
    IndexedElementAccessor,
    DataNode,
    Event,
    SELF_REFERENCE,
)
from .observable import ObservableValue, ObservableList, is_push_source, is_notifying_collection
from .error_policies import (
    ListenerErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)
from .context import Context
from .binding import DataBinding

__all__ = [
    "__version__",
    # Config
    "BindingConfig",
    "NamingCase",
    # Errors
    "BindingError",
    "InvalidPathError",
    "ReadOnlyWriteError",
    "DispatchDepthError",
    "ConversionWarning",
    # Core
    "Accessor",
    "AccessorKind",
    "AccessorResolver",
    "FieldAccessor",
    "PropertyAccessor",
    "MethodAccessor",
    "IndexedElementAccessor",
    "DataNode",
    "Event",
    "SELF_REFERENCE",
    # Observables
    "ObservableValue",
    "ObservableList",
    "is_push_source",
    "is_notifying_collection",
    # Error policies
    "ListenerErrorPolicy",
    "FailFastPolicy",
    "ContinueOnErrorsPolicy",
    "CollectErrorsPolicy",
    "ThresholdPolicy",
    # API
    "Context",
    "DataBinding",
]
