"""Directed dependency graph.

Each node owns one edge listing the nodes it depends on. The graph is built
fresh from a ``node -> dependencies`` mapping for every sort, and edges are
mutated in place as dependencies are satisfied.
"""

import logging
import threading
from typing import Generic, Hashable, Iterable, Iterator, Mapping, TypeVar

__all__ = ["Edge", "DependencyGraph"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


class Edge(Generic[T]):
    """``source`` depends on every node in ``dependencies``."""

    __slots__ = ("source", "dependencies")

    def __init__(self, source: T, dependencies: Iterable[T]):
        self.source = source
        self.dependencies: set[T] = set(dependencies)

    @property
    def is_ready(self) -> bool:
        return len(self.dependencies) == 0

    def discard(self, node: T) -> bool:
        """Remove ``node`` from the dependencies.

        Returns:
            True if this removal left the edge with no dependencies.
        """
        if node not in self.dependencies:
            return False
        self.dependencies.discard(node)
        return self.is_ready

    def __repr__(self) -> str:
        return f"Edge({self.source!r} -> {self.dependencies!r})"


class DependencyGraph(Generic[T]):
    """
    A set of dependency edges over a fixed node universe.

    The node universe is the set of keys of the mapping the graph was built
    from. Dependencies that reference anything outside it are reported by
    :meth:`missing`.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._nodes: tuple[T, ...] = ()
        self._edges: dict[T, Edge[T]] = {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[T, Iterable[T]]) -> "DependencyGraph[T]":
        """
        Build a graph with one edge per mapping entry.

        The dependency collections are copied, so mutating ``mapping`` later
        does not affect the graph.

        Args:
            mapping: Each node mapped to the nodes it depends on.
        """
        graph: DependencyGraph[T] = cls()
        graph._nodes = tuple(mapping.keys())
        for source, dependencies in mapping.items():
            graph._edges[source] = Edge(source, dependencies)
            logger.debug("Added edge %r", graph._edges[source])
        return graph

    @property
    def nodes(self) -> tuple[T, ...]:
        return self._nodes

    def size(self) -> int:
        with self._lock:
            return len(self._edges)

    def __len__(self) -> int:
        return self.size()

    def remove(self, edge: Edge[T]) -> None:
        with self._lock:
            if self._edges.get(edge.source) is edge:
                del self._edges[edge.source]

    def missing(self) -> dict[T, set[T]]:
        """Return the dependencies of each node that are not nodes themselves."""
        universe = set(self._nodes)
        with self._lock:
            return {
                edge.source: edge.dependencies - universe
                for edge in self._edges.values()
                if not edge.dependencies <= universe
            }

    def __iter__(self) -> Iterator[Edge[T]]:
        with self._lock:
            snapshot = list(self._edges.values())
        return iter(snapshot)
