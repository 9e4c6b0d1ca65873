"""Accessor capabilities for DazzleBind.

An Accessor knows HOW to read (and possibly write) one member of a host
value: a field, a property, a method or an element of an iterable. The data
tree never touches host objects directly; it always goes through the
accessor resolved for the segment.

The AccessorResolver builds accessors from a value's shape (its class) and
keeps them in an explicit capability table keyed by (shape, name), so
introspection happens once per member rather than on every lookup.
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Iterable, MutableSequence
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from ..errors import InvalidPathError, ReadOnlyWriteError

_MISSING = object()


class AccessorKind(Enum):
    """The capability variants an accessor can represent."""
    FIELD = "field"
    PROPERTY = "property"
    METHOD = "method"
    INDEXED_ELEMENT = "indexed_element"
    CONTEXT = "context"


class Accessor(ABC):
    """Abstract capability for reading and writing one member of a host.

    Accessors are shape-level objects: the same instance serves every host
    of the resolved class, so they must not hold per-host state.
    """

    kind: AccessorKind

    def __init__(self, name: str, value_type: Any = None):
        """Initialize the accessor.

        Args:
            name: Segment name this accessor resolves
            value_type: Declared type of the member's value, if known
        """
        self.name = name
        self.value_type = value_type

    @property
    @abstractmethod
    def can_change(self) -> bool:
        """Check if the value behind this accessor can change over time.

        Listeners on accessors that can't change will never be notified
        unless a push source drives the node.
        """
        pass

    @property
    def writable(self) -> bool:
        """Check if set() is supported."""
        return False

    @abstractmethod
    def get(self, host: Any) -> Any:
        """Read the member from host.

        Args:
            host: The parent value (may be None)

        Returns:
            The member's value, or None if host is None
        """
        pass

    def set(self, host: Any, value: Any, path: str) -> None:
        """Write the member on host.

        Args:
            host: The parent value
            value: New value to store
            path: Full path of the node being written, for error messages

        Raises:
            ReadOnlyWriteError: If the accessor doesn't support writing
        """
        raise ReadOnlyWriteError(path, f"{self.kind.value} '{self.name}' can't be written")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class FieldAccessor(Accessor):
    """Plain attribute: instance attribute, slot, or class attribute."""

    kind = AccessorKind.FIELD

    @property
    def can_change(self) -> bool:
        return True

    @property
    def writable(self) -> bool:
        return True

    def get(self, host: Any) -> Any:
        if host is None:
            return None
        # Instances of the same shape may not all carry the attribute
        return getattr(host, self.name, None)

    def set(self, host: Any, value: Any, path: str) -> None:
        try:
            setattr(host, self.name, value)
        except AttributeError as e:
            # Frozen dataclasses and read-only slots end up here
            raise ReadOnlyWriteError(path, str(e)) from e


class PropertyAccessor(Accessor):
    """A ``property`` descriptor, writable when it defines a setter."""

    kind = AccessorKind.PROPERTY

    def __init__(self, name: str, prop: property, value_type: Any = None):
        super().__init__(name, value_type)
        self.prop = prop

    @property
    def can_change(self) -> bool:
        return self.writable

    @property
    def writable(self) -> bool:
        return self.prop.fset is not None

    def get(self, host: Any) -> Any:
        if host is None:
            return None
        return getattr(host, self.name)

    def set(self, host: Any, value: Any, path: str) -> None:
        if not self.writable:
            raise ReadOnlyWriteError(path, f"property '{self.name}' is read-only")
        setattr(host, self.name, value)


class MethodAccessor(Accessor):
    """A method; its value is the bound callable and never changes."""

    kind = AccessorKind.METHOD

    @property
    def can_change(self) -> bool:
        return False

    def get(self, host: Any) -> Any:
        if host is None:
            return None
        return getattr(host, self.name)


class IndexedElementAccessor(Accessor):
    """Element of an iterable, addressed by a non-negative integer segment.

    Reading walks the iterable from the start. An index that is never
    reached yields None rather than an error.
    """

    kind = AccessorKind.INDEXED_ELEMENT

    def __init__(self, index: int, value_type: Any = None):
        super().__init__(str(index), value_type)
        self.index = index

    @property
    def can_change(self) -> bool:
        return True

    @property
    def writable(self) -> bool:
        return True

    def get(self, host: Any) -> Any:
        if not isinstance(host, Iterable):
            return None
        for position, item in enumerate(host):
            if position == self.index:
                return item
        return None

    def set(self, host: Any, value: Any, path: str) -> None:
        if not isinstance(host, MutableSequence):
            raise ReadOnlyWriteError(
                path, f"{type(host).__name__} does not support item assignment"
            )
        if self.index >= len(host):
            raise InvalidPathError(
                path, self.name, f"index out of range for length {len(host)}"
            )
        host[self.index] = value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.index})"


class ContextAccessor(Accessor):
    """Capability of the root node: returns the context's bound root object."""

    kind = AccessorKind.CONTEXT

    def __init__(self, context: Any):
        super().__init__("#")
        self.context = context

    @property
    def can_change(self) -> bool:
        return True

    @property
    def writable(self) -> bool:
        return True

    def get(self, host: Any) -> Any:
        return self.context.root

    def set(self, host: Any, value: Any, path: str) -> None:
        self.context._replace_root(value)


def unwrap_optional(declared: Any) -> Any:
    """Strip ``Optional[...]`` from a declared type."""
    if get_origin(declared) is Union:
        args = [arg for arg in get_args(declared) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return declared


def shape_of(value: Any, declared_type: Any = None) -> Optional[type]:
    """Return the class to resolve members against.

    The runtime class of the value wins; the declared type is used only when
    the value is None. Returns None when neither is known.
    """
    if value is not None:
        return type(value)
    declared = unwrap_optional(declared_type)
    if isinstance(declared, type):
        return declared
    origin = get_origin(declared)
    if isinstance(origin, type):
        return origin
    return None


def element_type_of(declared_type: Any) -> Any:
    """Return the element type of a declared container type, if any."""
    args = get_args(unwrap_optional(declared_type))
    if args and args[0] is not Ellipsis:
        return args[0]
    return None


def _lookup_class_attribute(shape: type, name: str) -> Any:
    """Find a raw class attribute along the MRO without invoking descriptors."""
    for klass in inspect.getmro(shape):
        if name in vars(klass):
            return vars(klass)[name]
    return _MISSING


def _is_routine(raw: Any) -> bool:
    return inspect.isroutine(raw) or isinstance(raw, (staticmethod, classmethod))


def _class_hints(shape: type) -> Dict[str, Any]:
    """Collect annotated attribute types for a class and its bases."""
    try:
        return get_type_hints(shape)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references; fall back to the raw annotations
        hints = {}
        for klass in reversed(inspect.getmro(shape)):
            hints.update(getattr(klass, "__annotations__", {}) or {})
        return hints


def _return_annotation(func: Any) -> Any:
    if func is None:
        return None
    try:
        return get_type_hints(func).get("return")
    except (NameError, TypeError, AttributeError):
        return getattr(func, "__annotations__", {}).get("return")


class AccessorResolver:
    """Resolves segment names to accessors using a per-shape capability table.

    Resolution priority for a shape and segment name:
        1. iterable shape and a non-negative integer segment -> indexed element
        2. field (instance attribute, slot, annotated or class attribute)
        3. property
        4. method
        5. otherwise no capability (None)

    Only public members are bound; names starting with an underscore never
    resolve. Entries registered with register() take precedence over
    introspection and also apply to subclasses of the registered shape.
    """

    def __init__(self):
        self._table: Dict[Tuple[type, str], Accessor] = {}
        self._registered: Dict[Tuple[type, str], Accessor] = {}
        self.hits = 0
        self.misses = 0

    def register(self, shape: type, name: str, accessor: Accessor) -> None:
        """Register an explicit accessor for a member of a shape.

        Args:
            shape: Class the member belongs to
            name: Segment name
            accessor: Accessor to use instead of introspection
        """
        self._registered[(shape, name)] = accessor
        # Drop introspected entries that the registration now overrides
        for key in [key for key in self._table if key[1] == name and issubclass(key[0], shape)]:
            del self._table[key]

    def resolve(self, value: Any, name: str, declared_type: Any = None) -> Optional[Accessor]:
        """Resolve the accessor for member name of value.

        Args:
            value: The parent value whose member is being looked up
            name: Segment name
            declared_type: Declared type of value, used when value is None
                and to infer the element type of containers

        Returns:
            Accessor, or None if the shape has no such member
        """
        if not name or name.startswith("_"):
            return None

        shape = shape_of(value, declared_type)
        if shape is None:
            return None

        registered = self._find_registered(shape, name)
        if registered is not None:
            return registered

        if name.isdecimal() and issubclass(shape, Iterable):
            return IndexedElementAccessor(int(name), element_type_of(declared_type))

        key = (shape, name)
        accessor = self._table.get(key)
        if accessor is not None:
            self.hits += 1
            return accessor

        self.misses += 1
        accessor = self._introspect(shape, name, value)
        if accessor is not None:
            self._table[key] = accessor
        return accessor

    def clear(self) -> None:
        """Forget all introspected entries (registrations are kept)."""
        self._table.clear()
        self.hits = 0
        self.misses = 0

    def get_stats(self) -> Dict[str, Any]:
        """Get capability table statistics.

        Returns:
            Dictionary with table size, registrations and hit rate
        """
        stats = {
            'entries': len(self._table),
            'registered': len(self._registered),
        }

        total_attempts = self.hits + self.misses
        if total_attempts > 0:
            stats['hit_rate'] = self.hits / total_attempts

        return stats

    def _find_registered(self, shape: type, name: str) -> Optional[Accessor]:
        if not self._registered:
            return None
        for klass in inspect.getmro(shape):
            accessor = self._registered.get((klass, name))
            if accessor is not None:
                return accessor
        return None

    def _introspect(self, shape: type, name: str, value: Any) -> Optional[Accessor]:
        raw = _lookup_class_attribute(shape, name)
        hints = _class_hints(shape)
        instance_vars = getattr(value, "__dict__", None) if value is not None else None
        in_instance = instance_vars is not None and name in instance_vars

        # Field: anything readable that is neither a property nor a routine.
        # An instance attribute shadows a method of the same name.
        if in_instance and not isinstance(raw, property):
            return FieldAccessor(name, hints.get(name))
        if raw is _MISSING and name in hints:
            return FieldAccessor(name, hints.get(name))
        if raw is not _MISSING and not isinstance(raw, property) and not _is_routine(raw):
            return FieldAccessor(name, hints.get(name))

        if isinstance(raw, property):
            return PropertyAccessor(name, raw, _return_annotation(raw.fget))

        if _is_routine(raw):
            return MethodAccessor(name)

        return None
