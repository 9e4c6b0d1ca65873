"""DataBinding: a presentation-side handle on one path of a context.

Setters, formatters and providers hold DataBindings instead of talking to a
Context directly. A binding keeps the latest value, re-emits changes through
its own event and offers typed reads that recover locally from unexpected
values: a mismatch is reported as a ConversionWarning and a default is
returned, so one confused consumer never disturbs the notification graph.
"""

import logging
import numbers
import warnings
from typing import Any, Optional, Type, TypeVar

from .context import Context
from .core.events import Event
from .errors import ConversionWarning

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DataBinding:
    """Binding of one consumer to one path of a context."""

    def __init__(self, context: Context, path: str):
        self.context = context
        self.path = path
        self.value_changed = Event(f"binding:{path}")
        self._value: Any = None
        self._initialized = False

    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_initialized(self) -> bool:
        """True once enable() has read the initial value."""
        return self._initialized

    def enable(self) -> Any:
        """Start observing the path.

        Returns:
            The current value at the path
        """
        if not self._initialized:
            self._value = self.context.register_listener(self.path, self._on_value_changed)
            self._initialized = True
        return self._value

    def disable(self) -> None:
        """Stop observing the path. The last value stays readable."""
        if self._initialized:
            self.context.remove_listener(self.path, self._on_value_changed)
            self._initialized = False

    def get_value(self, expected_type: Optional[Type[T]] = None, default: Optional[T] = None) -> Optional[T]:
        """Read the bound value, checking its type.

        Args:
            expected_type: Type the consumer can handle (None accepts anything)
            default: Returned when the value is None or can't be used

        Returns:
            The value, a numeric conversion of it, or default
        """
        value = self._value
        if expected_type is None:
            return value if value is not None else default
        if value is None:
            return default
        if isinstance(value, expected_type):
            return value

        # Numbers convert between int, float and friends
        if (isinstance(value, numbers.Real) and not isinstance(value, bool)
                and isinstance(expected_type, type) and issubclass(expected_type, numbers.Number)
                and expected_type is not bool):
            try:
                return expected_type(value)
            except (TypeError, ValueError, OverflowError):
                pass

        warnings.warn(
            f"Value at '{self.path}' is {type(value).__name__}, expected "
            f"{getattr(expected_type, '__name__', expected_type)}; using default {default!r}",
            ConversionWarning,
            stacklevel=2,
        )
        logger.debug("Conversion of %r at '%s' to %r failed", value, self.path, expected_type)
        return default

    def set_value(self, value: Any) -> None:
        """Write through to the context."""
        self.context.set_value(self.path, value)

    def _on_value_changed(self, value: Any) -> None:
        self._value = value
        self.value_changed.fire(value)

    def __repr__(self) -> str:
        return f"DataBinding({self.path!r}, value={self._value!r})"
