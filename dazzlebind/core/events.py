"""Synchronous multicast notifications.

An Event holds an ordered list of handlers. Dispatch iterates a snapshot of
that list, so handlers may subscribe or unsubscribe (themselves or others)
while the event is firing. Changes made during dispatch apply from the next
dispatch on.
"""

from typing import Any, Callable, List, Tuple


class Event:
    """Ordered, duplicate-tolerant list of callbacks fired synchronously."""

    def __init__(self, name: str = "event"):
        self.name = name
        self._handlers: List[Callable[..., Any]] = []

    def subscribe(self, handler: Callable[..., Any]) -> None:
        """Add a handler. The same handler may be added more than once."""
        if not callable(handler):
            raise TypeError(f"{self.name} handler must be callable, got {handler!r}")
        self._handlers.append(handler)

    def unsubscribe(self, handler: Callable[..., Any]) -> bool:
        """Remove the most recently added occurrence of handler.

        Returns:
            True if a handler was removed, False if it wasn't subscribed
        """
        for index in range(len(self._handlers) - 1, -1, -1):
            if self._handlers[index] == handler:
                del self._handlers[index]
                return True
        return False

    def snapshot(self) -> Tuple[Callable[..., Any], ...]:
        """Return the handlers as they are right now."""
        return tuple(self._handlers)

    def fire(self, *args: Any) -> None:
        """Invoke every handler subscribed at the moment of the call."""
        for handler in self.snapshot():
            handler(*args)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()

    def __iadd__(self, handler: Callable[..., Any]) -> 'Event':
        self.subscribe(handler)
        return self

    def __isub__(self, handler: Callable[..., Any]) -> 'Event':
        self.unsubscribe(handler)
        return self

    def __contains__(self, handler: object) -> bool:
        return handler in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        # An event with no handlers is still a valid event
        return True

    def __repr__(self) -> str:
        return f"Event({self.name!r}, handlers={len(self._handlers)})"
