"""
Listener error policies for DazzleBind.

This module provides a flexible error handling system through the Policy pattern,
deciding what happens when a listener raises while a node dispatches its
value-changed notification.

Structural errors (InvalidPathError, ReadOnlyWriteError, DispatchDepthError)
are never routed through a policy; they always surface to the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


def _listener_name(listener: Callable[..., Any]) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


class ListenerErrorPolicy(ABC):
    """
    Base class for listener error policies.

    Subclasses implement different strategies for handling exceptions
    raised by listener callbacks during dispatch.
    """

    @abstractmethod
    def handle(self, error: Exception, path: str, listener: Callable[..., Any]) -> None:
        """
        Handle an error raised by a listener.

        Args:
            error: The exception that was raised
            path: Path of the node that was dispatching
            listener: The callback that raised

        Returns:
            None to let dispatch continue with the next listener,
            or re-raises the exception to abort the notification.
        """
        pass


class FailFastPolicy(ListenerErrorPolicy):
    """
    Policy that immediately re-raises any error, aborting the notification.

    This is the default behavior - the exception reaches whoever triggered
    the change (set_value, a push source, a collection mutation).
    """

    def handle(self, error: Exception, path: str, listener: Callable[..., Any]) -> None:
        """Re-raise the error immediately."""
        raise error


class ContinueOnErrorsPolicy(ListenerErrorPolicy):
    """
    Policy that logs errors and keeps dispatching.

    Errors are collected for later inspection. Remaining listeners and the
    child cascade still run, so one broken consumer can't stall the tree.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for each error
        """
        self.errors: List[Dict[str, Any]] = []
        self.verbose = verbose

    def handle(self, error: Exception, path: str, listener: Callable[..., Any]) -> None:
        """Record the error and continue."""
        self.errors.append({
            'path': path,
            'listener': _listener_name(listener),
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        })

        if self.verbose:
            logger.warning(
                "Listener %s failed for '%s': %s",
                _listener_name(listener), path, error,
            )

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        paths = {e['path'] for e in self.errors}
        return {
            'total_errors': len(self.errors),
            'failing_paths': len(paths),
            'errors': self.errors,
        }


class CollectErrorsPolicy(ListenerErrorPolicy):
    """
    Policy that collects all errors without logging, for batch processing.

    Similar to ContinueOnErrorsPolicy but silent.
    """

    def __init__(self):
        """Initialize the policy."""
        self.errors: List[Dict[str, Any]] = []

    def handle(self, error: Exception, path: str, listener: Callable[..., Any]) -> None:
        """Silently collect the error."""
        self.errors.append({
            'path': path,
            'listener': _listener_name(listener),
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        })


class ThresholdPolicy(ListenerErrorPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails fast.

    Useful when occasional listener failures are expected but too many
    indicate a broken consumer that should halt propagation.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, log a warning for each tolerated error
        """
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors: List[Exception] = []

    def handle(self, error: Exception, path: str, listener: Callable[..., Any]) -> None:
        """Tolerate the error if under threshold, otherwise raise."""
        self.error_count += 1
        self.errors.append(error)

        if self.error_count > self.max_errors:
            raise RuntimeError(f"Listener error threshold exceeded ({self.max_errors} errors)") from error

        if self.verbose:
            logger.warning(
                "[%d/%d] Listener %s failed for '%s': %s",
                self.error_count, self.max_errors, _listener_name(listener), path, error,
            )
