"""Context: the root entry point of a binding tree.

A Context wraps one root object and answers path-based requests against it.
It can be used in two ways:

Wrap an existing object graph:
    ctx = Context(player)
    ctx.get_value("inventory.0.name")

Subclass it, so the context itself is the root (its public members are
bindable, its underscore members are not):
    class PlayerContext(Context):
        def __init__(self):
            self.health = 100
            super().__init__()

Every operation is synchronous; a single set_value() may cascade through
any number of dependent nodes before it returns.
"""

import logging
from typing import Any, Callable, Optional

from .config import BindingConfig
from .core._node_store import _NodeStore
from .core.accessor import AccessorResolver
from .core.node import DataNode, Dispatcher, NodeEnvironment
from .error_policies import ListenerErrorPolicy
from .errors import BindingError, InvalidPathError

logger = logging.getLogger(__name__)

_SELF = object()


class Context:
    """Root of one bound object graph and entry point for path-based access.

    The only public operations are get_value, set_value, register_listener
    and remove_listener (plus dispose). Collaborators never reach into the
    node tree directly.
    """

    def __init__(self,
                 data: Any = _SELF,
                 config: Optional[BindingConfig] = None,
                 resolver: Optional[AccessorResolver] = None,
                 error_policy: Optional[ListenerErrorPolicy] = None):
        """Create a context.

        Args:
            data: Root object to bind. Defaults to the context itself,
                for contexts defined as subclasses.
            config: Push-source naming and dispatch limits
            resolver: Accessor resolver to share a capability table between
                contexts; a private one is created if omitted
            error_policy: What to do when a listener raises (default: re-raise)

        Raises:
            ValueError: If the configuration is invalid
        """
        self._config = config or BindingConfig()
        config_errors = self._config.validate()
        if config_errors:
            raise ValueError(f"Invalid configuration: {'; '.join(config_errors)}")

        self._root = self if data is _SELF else data
        self._disposed = False
        self._env = NodeEnvironment(
            store=_NodeStore(),
            resolver=resolver or AccessorResolver(),
            config=self._config,
            dispatcher=Dispatcher(self._config.max_dispatch_depth, error_policy),
        )
        self._root_node = DataNode.create_root(self._env, self)

    @property
    def root(self) -> Any:
        """The bound root object."""
        return self._root

    @property
    def config(self) -> BindingConfig:
        return self._config

    @property
    def error_policy(self) -> ListenerErrorPolicy:
        return self._env.dispatcher.error_policy

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def get_value(self, path: str) -> Any:
        """Return the current value at path.

        Args:
            path: Dotted path relative to the root, or "#" for the root itself

        Returns:
            Cached value at path (None if an intermediate value is None or an
            index is out of range)

        Raises:
            InvalidPathError: If a segment can't be resolved
        """
        return self._find_node(path).value

    def set_value(self, path: str, value: Any) -> None:
        """Write value at path and notify dependents.

        Setting "#" replaces the bound root object.

        Raises:
            InvalidPathError: If a segment can't be resolved or a parent value is None
            ReadOnlyWriteError: If the member at path can't be written
        """
        self._find_node(path).set_value(value)

    def register_listener(self, path: str, callback: Callable[[Any], Any]) -> Any:
        """Subscribe callback to value changes at path.

        Args:
            path: Dotted path to observe
            callback: Called with the new value on every change

        Returns:
            Current value at path, so the caller can initialize synchronously

        Raises:
            InvalidPathError: If a segment can't be resolved
        """
        node = self._find_node(path)
        node.value_changed.subscribe(callback)

        parent_known = node.parent is None or node.parent.value is not None
        if node.is_resolved and not node.can_value_change and node.push_source is None and parent_known:
            host = node.parent.value if node.parent is not None else self._root
            logger.warning(
                "Expected %s.%s in context of type '%s'. "
                "No data provider found for path '%s', value will never change.",
                type(host).__name__,
                self._config.provider_name(node.name),
                type(self._root).__name__,
                path,
            )

        return node.value

    def remove_listener(self, path: str, callback: Callable[[Any], Any]) -> None:
        """Unsubscribe callback from path.

        Only nodes that already exist are walked, so removing a callback
        from a path that was never requested is a no-op and creates nothing.
        """
        if self._disposed:
            raise BindingError(f"Context for {type(self._root).__name__} has been disposed")

        node = self._root_node.find_existing(path)
        if node is not None:
            node.value_changed.unsubscribe(callback)

    def dispose(self) -> None:
        """Release every subscription held by the node tree.

        After disposal the context can't be used any more.
        """
        if self._disposed:
            return

        for node in self._env.store:
            node.teardown()
        self._root_node.teardown()
        node_count = len(self._env.store)
        self._env.store.clear()
        self._disposed = True
        logger.debug("Disposed context for %s (%d nodes)", type(self._root).__name__, node_count)

    def __enter__(self) -> 'Context':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    def _find_node(self, path: str) -> DataNode:
        if self._disposed:
            raise BindingError(f"Context for {type(self._root).__name__} has been disposed")

        node = self._root_node.find_descendant(path)
        if node is None:
            raise InvalidPathError(path, reason=f"not found in {type(self._root).__name__}")
        return node

    def _replace_root(self, value: Any) -> None:
        # Called by the root node's accessor; the root node updates its own
        # cached value and cascades afterwards.
        self._root = value

    def __repr__(self) -> str:
        if self._root is self:
            return f"{self.__class__.__name__}(nodes={len(self._env.store)})"
        return f"{self.__class__.__name__}({type(self._root).__name__}, nodes={len(self._env.store)})"
