"""Observable building blocks for bound object graphs.

Two contracts are consumed by the data tree:

Push source:
    Any object with a ``value`` attribute and a ``value_changed`` Event.
    A data node bridges to a push source found next to the member it binds
    (see BindingConfig.provider_name) and treats it as authoritative.

Notifying collection:
    Any object with ``cleared``, ``item_added`` and ``item_removed`` Events.
    A data node holding such a value re-fires its own notification when the
    contents change, keeping the same collection reference.

ObservableValue and ObservableList are the stock implementations.
"""

from typing import Any, Generic, Iterable, List, Optional, TypeVar

from .core.events import Event

T = TypeVar("T")


def is_push_source(obj: Any) -> bool:
    """Check if an object satisfies the push-source contract."""
    return hasattr(obj, "value") and isinstance(getattr(obj, "value_changed", None), Event)


def is_notifying_collection(obj: Any) -> bool:
    """Check if an object satisfies the notifying-collection contract."""
    return all(
        isinstance(getattr(obj, name, None), Event)
        for name in ("cleared", "item_added", "item_removed")
    )


class ObservableValue(Generic[T]):
    """A value holder that notifies subscribers when it changes.

    Typically declared next to a public property of a context class:

        class PlayerContext(Context):
            def __init__(self):
                self._healthProperty = ObservableValue(100)
                super().__init__()

            @property
            def Health(self):
                return self._healthProperty.value

            @Health.setter
            def Health(self, value):
                self._healthProperty.value = value

    Notification happens only when the new value differs from the old one,
    compared with ``==``.
    """

    def __init__(self, value: Optional[T] = None):
        self._value = value
        self.value_changed = Event("value_changed")

    @property
    def value(self) -> Optional[T]:
        return self._value

    @value.setter
    def value(self, new_value: Optional[T]) -> None:
        if new_value is self._value:
            return
        try:
            unchanged = bool(new_value == self._value)
        except (TypeError, ValueError):
            # Values without a usable truth value for == (e.g. arrays)
            unchanged = False
        self._value = new_value
        if not unchanged:
            self.value_changed.fire()

    def notify(self) -> None:
        """Fire value_changed without changing the value.

        Useful when the held object was mutated in place.
        """
        self.value_changed.fire()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._value!r})"


class ObservableList(List[T]):
    """A list that reports additions, removals and clears.

    Only the structural operations raise events; replacing an element
    in place is reported as a removal followed by an addition.
    """

    def __init__(self, items: Iterable[T] = ()):
        super().__init__(items)
        self.cleared = Event("cleared")
        self.item_added = Event("item_added")
        self.item_removed = Event("item_removed")

    def append(self, item: T) -> None:
        super().append(item)
        self.item_added.fire(item)

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.append(item)

    def insert(self, index: int, item: T) -> None:
        super().insert(index, item)
        self.item_added.fire(item)

    def remove(self, item: T) -> None:
        super().remove(item)
        self.item_removed.fire(item)

    def pop(self, index: int = -1) -> T:
        item = super().pop(index)
        self.item_removed.fire(item)
        return item

    def clear(self) -> None:
        super().clear()
        self.cleared.fire()

    def __setitem__(self, index, item) -> None:
        if isinstance(index, slice):
            old_items = self[index]
            new_items = list(item)
            super().__setitem__(index, new_items)
            for old in old_items:
                self.item_removed.fire(old)
            for new in new_items:
                self.item_added.fire(new)
            return
        old = self[index]
        super().__setitem__(index, item)
        self.item_removed.fire(old)
        self.item_added.fire(item)

    def __delitem__(self, index) -> None:
        removed = self[index] if isinstance(index, slice) else [self[index]]
        super().__delitem__(index)
        for item in removed:
            self.item_removed.fire(item)

    def __iadd__(self, items: Iterable[T]) -> 'ObservableList[T]':
        self.extend(items)
        return self

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self)!r})"
