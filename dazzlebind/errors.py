"""Exception taxonomy for DazzleBind.

Structural failures (bad path, read-only write) surface synchronously at the
call that caused them. Value-shape mismatches on the presentation side are
reported with ConversionWarning and recovered by the consumer.
"""

from typing import Optional


class BindingError(Exception):
    """Base class for all binding errors."""
    pass


class InvalidPathError(BindingError, LookupError):
    """Raised when a path segment can't be resolved against its parent value."""

    def __init__(self, path: str, segment: Optional[str] = None, reason: Optional[str] = None):
        self.path = path
        self.segment = segment
        message = f"Invalid path '{path}'"
        if segment is not None:
            message += f" at segment '{segment}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ReadOnlyWriteError(BindingError, TypeError):
    """Raised when set_value targets a node whose accessor can't be written."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        message = f"Value at '{path}' is read-only"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DispatchDepthError(BindingError, RecursionError):
    """Raised when nested notifications exceed the configured depth."""
    pass


class ConversionWarning(UserWarning):
    """A consumer received a bound value of an unexpected type."""
    pass
