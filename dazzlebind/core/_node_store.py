"""
Private node storage for a binding context.

Every DataNode of a context lives in one arena keyed by
(parent_node_id, segment_name). Entries are never evicted while the
context is alive; the whole arena is released by clear() when the
context is disposed.
"""

from collections import OrderedDict
from typing import Any, Dict, Iterator, List, Optional, Tuple

NodeKey = Tuple[int, str]


class _NodeStore:
    """
    Private arena of data nodes with insertion-ordered child lookup.

    This class encapsulates all node storage operations:
    - Get/put by (parent_node_id, segment_name)
    - Child enumeration in first-resolved order
    - Node id allocation
    - Statistics tracking
    """

    def __init__(self):
        """Initialize an empty arena."""
        self.nodes: "OrderedDict[NodeKey, Any]" = OrderedDict()
        self._children: Dict[int, List[NodeKey]] = {}
        self._next_id = 0
        self.hits = 0
        self.misses = 0

    def allocate_id(self) -> int:
        """Return a fresh node id, unique within this store."""
        node_id = self._next_id
        self._next_id += 1
        return node_id

    def get(self, key: NodeKey) -> Optional[Any]:
        """
        Get a node by key.

        Args:
            key: (parent_node_id, segment_name)

        Returns:
            Stored node or None if not found
        """
        node = self.nodes.get(key)
        if node is None:
            self.misses += 1
        else:
            self.hits += 1
        return node

    def peek(self, key: NodeKey) -> Optional[Any]:
        """Get a node by key without touching the hit/miss counters."""
        return self.nodes.get(key)

    def put(self, key: NodeKey, node: Any) -> None:
        """
        Store a node permanently.

        Args:
            key: (parent_node_id, segment_name)
            node: Node to store

        Raises:
            KeyError: If a node is already stored under key
        """
        if key in self.nodes:
            raise KeyError(f"Node already stored for {key!r}")

        self.nodes[key] = node
        self._children.setdefault(key[0], []).append(key)

    def children(self, parent_id: int) -> List[Any]:
        """
        Return the children of a node in the order they were first resolved.

        Returns a new list, so callers may iterate while children are added.
        """
        return [self.nodes[key] for key in self._children.get(parent_id, ())]

    def clear(self) -> None:
        """Release every stored node."""
        self.nodes.clear()
        self._children.clear()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get arena statistics.

        Returns:
            Dictionary with node counts and lookup hit rate
        """
        stats = {
            'nodes': len(self.nodes),
            'parents': len(self._children),
        }

        # Calculate hit rate if we have attempts
        total_attempts = self.hits + self.misses
        if total_attempts > 0:
            stats['hit_rate'] = self.hits / total_attempts

        return stats

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self.nodes.values()))
