"""Test fixtures and helpers for DazzleBind consumers.

This module provides reusable testing utilities that work with the node tree
of a Context without modifying it. Lookups here never create nodes, so tests
can assert on exactly which paths have been requested.
"""

from typing import Any, Dict, List, Optional

from ..context import Context
from ..core.node import DataNode


class BindingTestHelper:
    """Read-only introspection of a context's node tree for tests.

    Example:
        ctx = Context(player)
        ctx.get_value("stats.health")
        helper = BindingTestHelper(ctx)
        assert helper.tree_paths() == ["stats", "stats.health"]
    """

    def __init__(self, context: Context):
        """Initialize helper with a context.

        Args:
            context: The context to inspect
        """
        self._context = context

    @property
    def root_node(self) -> DataNode:
        return self._context._root_node

    def node_for(self, path: str) -> Optional[DataNode]:
        """Return the existing node at path without creating anything.

        Args:
            path: Dotted path, or "#" for the root

        Returns:
            The node, or None if the path was never requested
        """
        return self.root_node.find_existing(path)

    def node_count(self) -> int:
        """Number of nodes created below the root."""
        return len(self._context._env.store)

    def tree_paths(self) -> List[str]:
        """Full paths of all created nodes, in creation order."""
        return [node.path for node in self._context._env.store]

    def listener_count(self, path: str) -> int:
        """Number of listeners subscribed at path (0 if the path doesn't exist)."""
        node = self.node_for(path)
        return len(node.value_changed) if node is not None else 0

    def has_push_source(self, path: str) -> bool:
        """Check if a push source is bridged to the node at path."""
        node = self.node_for(path)
        return node is not None and node.push_source is not None

    def is_observing_collection(self, path: str) -> bool:
        """Check if the node at path is subscribed to collection notifications."""
        node = self.node_for(path)
        return node is not None and node.is_observing_collection

    def is_resolved(self, path: str) -> bool:
        """Check if the node at path exists and has an accessor."""
        node = self.node_for(path)
        return node is not None and node.is_resolved

    def accessor_kind(self, path: str) -> Optional[Any]:
        """Return the AccessorKind of the node at path, if resolved."""
        node = self.node_for(path)
        if node is None or node.accessor is None:
            return None
        return node.accessor.kind

    def store_stats(self) -> Dict[str, Any]:
        """Node store statistics (node count, hit rate)."""
        return self._context._env.store.get_stats()

    def resolver_stats(self) -> Dict[str, Any]:
        """Capability table statistics of the context's resolver."""
        return self._context._env.resolver.get_stats()
