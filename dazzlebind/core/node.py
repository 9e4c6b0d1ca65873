"""DataNode: the unit of the binding tree.

Each node caches one resolved path segment of a context: the accessor used
to read it, the last known value, and the subscriptions that keep that value
current. Nodes are created lazily the first time a path is requested and
are kept for the lifetime of the context.

Value changes travel strictly root-to-leaf. When a node's value changes it
first dispatches to its own listeners (from a snapshot, so listeners may
subscribe and unsubscribe freely), then every child re-resolves against the
new value in the order the children were first requested. A child only
notifies its own listeners and children if its value actually differs.
"""

import datetime
import inspect
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Callable, List, Optional

from ..config import BindingConfig
from ..error_policies import FailFastPolicy, ListenerErrorPolicy
from ..errors import BindingError, DispatchDepthError, InvalidPathError
from ..observable import is_notifying_collection, is_push_source
from ._node_store import _NodeStore
from .accessor import Accessor, AccessorResolver, ContextAccessor, shape_of
from .events import Event
from .path import SELF_REFERENCE, is_self_reference, join_path, split_path

logger = logging.getLogger(__name__)

_MISSING = object()

_SIMPLE_TYPES = (
    type(None), bool, int, float, complex, str, bytes,
    Decimal, Fraction, Enum,
    datetime.date, datetime.time, datetime.timedelta,
)


def _is_simple(value: Any) -> bool:
    if isinstance(value, _SIMPLE_TYPES):
        return True
    return isinstance(value, tuple) and all(_is_simple(item) for item in value)


def values_differ(old: Any, new: Any) -> bool:
    """Check if replacing old with new is a change worth notifying.

    Simple values (None, numbers, strings, bytes, enums, dates and tuples of
    those) compare by type and equality, with NaN equal to NaN. Everything
    else compares by identity.
    """
    if old is new:
        return False
    if _is_simple(old) and _is_simple(new):
        if type(old) is not type(new):
            return True
        # NaN never equals itself
        return old != new and not (old != old and new != new)
    return True


class Dispatcher:
    """Dispatches node notifications for one context.

    Counts how many listener callbacks are running, one inside another, so
    that a listener which keeps re-triggering changes is stopped with
    DispatchDepthError instead of exhausting the interpreter stack. The
    structural root-to-leaf cascade is not counted. Listener exceptions are
    routed through the configured error policy.
    """

    def __init__(self, max_depth: int, error_policy: Optional[ListenerErrorPolicy] = None):
        self.max_depth = max_depth
        self.error_policy = error_policy or FailFastPolicy()
        self.depth = 0

    def dispatch(self, node: 'DataNode') -> None:
        """Notify node's listeners, then cascade into its children.

        The cascade runs even when a listener error propagates, so
        descendants never keep values computed from a replaced parent.
        """
        if self.depth >= self.max_depth:
            raise DispatchDepthError(
                f"Notification depth exceeded {self.max_depth} while updating '{node.path}'"
            )

        try:
            value = node.value
            for listener in node.value_changed.snapshot():
                self.depth += 1
                try:
                    listener(value)
                except BindingError:
                    raise
                except Exception as e:
                    self.error_policy.handle(e, node.path, listener)
                finally:
                    self.depth -= 1
        finally:
            for child in node.children():
                child._on_parent_value_changed(node.value)


@dataclass
class NodeEnvironment:
    """Shared state for all nodes of one context."""
    store: _NodeStore
    resolver: AccessorResolver
    config: BindingConfig
    dispatcher: Dispatcher


class DataNode:
    """Cached resolution of one path segment.

    A node is either resolved (it has an accessor and a cached value that is
    recomputed on every parent change) or unresolved (no accessor, value
    None). Unresolved nodes appear when the parent's shape is unknown at
    creation time or when a new parent value no longer has the member.
    """

    def __init__(self,
                 name: str,
                 env: NodeEnvironment,
                 accessor: Optional[Accessor] = None,
                 parent: Optional['DataNode'] = None):
        """Create a node. Use create_root() or get_child() instead.

        Args:
            name: Segment name used to reach this node from its parent
            env: Shared state of the owning context
            accessor: Resolved capability, None while unresolved
            parent: Parent node, None for the root
        """
        self.name = name
        self.env = env
        self.node_id = env.store.allocate_id()
        self.parent = parent
        self.path = SELF_REFERENCE if parent is None else join_path(parent.path, name)
        self.accessor = accessor
        self.value_changed = Event(f"{self.path}.value_changed")

        self._value: Any = None
        self._push_source: Any = None
        self._observed_collection: Any = None

    @classmethod
    def create_root(cls, env: NodeEnvironment, context: Any) -> 'DataNode':
        """Create the root node of a context, wrapping its bound root object."""
        root = cls(SELF_REFERENCE, env, ContextAccessor(context))
        root._set_value(context.root, notify=False)
        return root

    @property
    def value(self) -> Any:
        """Last known value of this node."""
        return self._value

    @property
    def push_source(self) -> Any:
        """The bridged push source, if one is bound."""
        return self._push_source

    @property
    def is_resolved(self) -> bool:
        return self.accessor is not None

    @property
    def can_value_change(self) -> bool:
        """Check if the accessor reports a value that can change."""
        return self.accessor is not None and self.accessor.can_change

    @property
    def declared_type(self) -> Any:
        """Declared type of this node's value, used when the value is None."""
        return self.accessor.value_type if self.accessor is not None else None

    @property
    def is_observing_collection(self) -> bool:
        return self._observed_collection is not None

    def children(self) -> List['DataNode']:
        """Return child nodes in the order they were first requested."""
        return self.env.store.children(self.node_id)

    def find_descendant(self, path: str) -> Optional['DataNode']:
        """Walk path from this node, creating nodes as needed.

        Args:
            path: Dotted path relative to this node

        Returns:
            The node at path, or None if a segment can't be resolved
        """
        head, rest = split_path(path)
        if is_self_reference(head):
            return self

        child = self.get_child(head)
        if child is None:
            return None

        return child.find_descendant(rest) if rest else child

    def find_existing(self, path: str) -> Optional['DataNode']:
        """Walk path through nodes that already exist, creating nothing.

        Returns:
            The node at path, or None if it was never requested
        """
        head, rest = split_path(path)
        if is_self_reference(head):
            return self

        child = self.env.store.peek((self.node_id, head))
        if child is None:
            return None

        return child.find_existing(rest) if rest else child

    def get_child(self, name: str) -> Optional['DataNode']:
        """Return the cached child for name, creating it on first request.

        A cached child that is still unresolved although this node's shape
        is now known names a member that doesn't exist, and is reported as
        missing.

        Args:
            name: Segment name

        Returns:
            The child node, or None if this node's value has no such member
        """
        child = self.env.store.get((self.node_id, name))
        if child is None:
            return self._create_child(name)
        if child.accessor is None and shape_of(self._value, self.declared_type) is not None:
            return None
        return child

    def set_value(self, value: Any) -> None:
        """Write value through the accessor and update the cached value.

        Raises:
            InvalidPathError: If the node is unresolved or its parent value is None
            ReadOnlyWriteError: If the accessor can't be written
        """
        if self.accessor is None:
            raise InvalidPathError(self.path, self.name, "segment is not resolved")

        if self.parent is not None:
            host = self.parent.value
            if host is None:
                raise InvalidPathError(self.path, self.name, "parent value is None")
        else:
            host = None

        self.accessor.set(host, value, self.path)
        self._set_value(value)

    def teardown(self) -> None:
        """Release push-source and collection subscriptions and all listeners."""
        self._set_push_source(None)
        self._observe_collection(None)
        self.value_changed.clear()

    def _create_child(self, name: str) -> Optional['DataNode']:
        if not name or name.startswith("_"):
            return None

        accessor = self.env.resolver.resolve(self._value, name, self.declared_type)
        if accessor is None:
            if shape_of(self._value, self.declared_type) is not None:
                return None
            logger.debug("Deferring resolution of '%s': shape of '%s' is unknown",
                         name, self.path)

        child = DataNode(name, self.env, accessor, parent=self)
        child._bind_push_source(self._value)
        child._set_value(child._compute_value(self._value), notify=False)
        self.env.store.put((self.node_id, name), child)

        logger.debug("Created node '%s' (%r)", child.path, accessor)
        return child

    def _on_parent_value_changed(self, parent_value: Any) -> None:
        declared = self.parent.declared_type if self.parent is not None else None
        if shape_of(parent_value, declared) is not None:
            accessor = self.env.resolver.resolve(parent_value, self.name, declared)
            if accessor is None and self.accessor is not None:
                logger.debug("Node '%s' no longer resolves against %s",
                             self.path, type(parent_value).__name__)
            self.accessor = accessor

        self._bind_push_source(parent_value)
        self._set_value(self._compute_value(parent_value))

    def _compute_value(self, parent_value: Any) -> Any:
        if self._push_source is not None:
            return self._push_source.value
        if self.accessor is None:
            return None
        return self.accessor.get(parent_value)

    def _set_value(self, new_value: Any, notify: bool = True, force: bool = False) -> None:
        old_value = self._value
        changed = force or values_differ(old_value, new_value)

        if new_value is not old_value:
            self._observe_collection(new_value)
        self._value = new_value

        if changed and notify:
            self.env.dispatcher.dispatch(self)

    def _bind_push_source(self, host: Any) -> None:
        source = self._find_push_source(host) if self.accessor is not None else None
        self._set_push_source(source)

    def _find_push_source(self, host: Any) -> Any:
        """Locate a push source for this node on the parent value.

        The instance and its own class are searched first, then each base
        class in MRO order. For every class both the configured name and the
        class-private (name-mangled) variant are tried.
        """
        if host is None:
            return None

        provider_name = self.env.config.provider_name(self.name)
        instance_vars = getattr(host, "__dict__", None) or {}

        for klass in inspect.getmro(type(host)):
            if klass is object:
                break
            private_name = f"_{klass.__name__.lstrip('_')}__{provider_name.lstrip('_')}"
            for candidate in (provider_name, private_name):
                source = instance_vars.get(candidate, _MISSING)
                if source is _MISSING and candidate in vars(klass):
                    source = getattr(host, candidate, None)
                if source is not _MISSING and is_push_source(source):
                    return source
        return None

    def _set_push_source(self, source: Any) -> None:
        if source is self._push_source:
            return

        if self._push_source is not None:
            self._push_source.value_changed.unsubscribe(self._on_push_source_changed)

        self._push_source = source

        if source is not None:
            source.value_changed.subscribe(self._on_push_source_changed)
            logger.debug("Bridged push source %r to '%s'", source, self.path)

    def _on_push_source_changed(self, *args: Any) -> None:
        self._set_value(self._push_source.value, force=True)

    def _observe_collection(self, value: Any) -> None:
        old = self._observed_collection
        if old is not None:
            old.cleared.unsubscribe(self._on_collection_cleared)
            old.item_added.unsubscribe(self._on_collection_item_added)
            old.item_removed.unsubscribe(self._on_collection_item_removed)

        self._observed_collection = value if is_notifying_collection(value) else None

        if self._observed_collection is not None:
            self._observed_collection.cleared.subscribe(self._on_collection_cleared)
            self._observed_collection.item_added.subscribe(self._on_collection_item_added)
            self._observed_collection.item_removed.subscribe(self._on_collection_item_removed)

    def _on_collection_cleared(self) -> None:
        self.env.dispatcher.dispatch(self)

    def _on_collection_item_added(self, item: Any) -> None:
        self.env.dispatcher.dispatch(self)

    def _on_collection_item_removed(self, item: Any) -> None:
        self.env.dispatcher.dispatch(self)

    def __repr__(self) -> str:
        return f"DataNode(path={self.path!r}, value={self._value!r})"
