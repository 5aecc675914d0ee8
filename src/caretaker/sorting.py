"""
Topological sorting of dependency graphs.

Implements Kahn's algorithm over a :class:`~caretaker.graph.DependencyGraph`:
nodes without outstanding dependencies are emitted first, and emitting a node
satisfies it as a dependency of every remaining node. Ready nodes are kept on
a stack, so for a fixed input the order is reproducible.
"""

import logging
from typing import Hashable, Iterable, Mapping, TypeVar

from caretaker.errors import CyclicOrUnresolvableDependencyError
from caretaker.graph import DependencyGraph, Edge

__all__ = ["topological_sort"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def topological_sort(mapping: Mapping[T, Iterable[T]]) -> list[T]:
    """
    Order nodes so that every node comes after all of its dependencies.

    Args:
        mapping: Each node mapped to the nodes it depends on.

    Returns:
        Every key of ``mapping``, dependencies first. An empty mapping gives
        an empty list.

    Raises:
        CyclicOrUnresolvableDependencyError: If a dependency is not itself a
            node of the mapping, if there is no node without dependencies to
            start from, or if a cycle leaves some nodes unordered.

    Example:
        >>> topological_sort({"a": ["b", "c"], "b": ["d"], "c": ["b", "d"], "d": []})
        ['d', 'b', 'c', 'a']
    """
    return _sort(DependencyGraph.from_mapping(mapping))


def _sort(graph: DependencyGraph[T]) -> list[T]:
    node_count = len(graph.nodes)
    missing = graph.missing()
    if missing:
        raise CyclicOrUnresolvableDependencyError(missing.keys(), missing)

    ready: list[Edge[T]] = [edge for edge in graph if edge.is_ready]
    if not ready and node_count > 0:
        logger.debug("No component without dependencies among %d", node_count)
        raise CyclicOrUnresolvableDependencyError(graph.nodes)

    queued = {edge.source for edge in ready}
    ordered: list[T] = []

    while ready:
        next_edge = ready.pop()
        graph.remove(next_edge)
        ordered.append(next_edge.source)

        for edge in graph:
            if edge.discard(next_edge.source) and edge.source not in queued:
                queued.add(edge.source)
                ready.append(edge)

    if len(ordered) < node_count:
        raise CyclicOrUnresolvableDependencyError(edge.source for edge in graph)

    logger.debug("Sorted %d nodes", len(ordered))
    return ordered
