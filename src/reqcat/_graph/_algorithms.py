"""Graph algorithms: cycle search and deterministic topological ordering."""

from __future__ import annotations

import heapq
import logging
from collections import deque
from collections.abc import Callable, Collection, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from reqcat._errors import CycleError, InvalidArgumentError

from ._directed_graph import DirectedGraph, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Order:
    """A linear extension of the graph: every arc's source precedes its target."""

    ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Cycle:
    """Ids of one directed cycle, each pointing to the next and the last to the first."""

    ids: tuple[str, ...]


OrderingResult = Order | Cycle


def _may_be_on_cycle(node: Node) -> bool:
    return node.has_incoming() and node.has_outgoing()


def _search_backward(graph: DirectedGraph, start: str, visited: set[str]) -> list[str]:
    """Depth-first search from start along incoming arcs.

    Uses an explicit stack of frames instead of recursion. Every node the
    search reaches is added to visited.

    Returns:
        The cycle closed by the first arc back into the active path, in
        forward order, or an empty list if the search exhausts.

    """
    path: list[str] = [start]
    on_path: set[str] = {start}
    frames: list[Iterator[str]] = [iter(sorted(graph.predecessors(start)))]
    visited.add(start)

    while frames:
        next_id = next(frames[-1], None)
        if next_id is None:
            frames.pop()
            on_path.discard(path.pop())
            continue

        if next_id in on_path:
            # Walking backward, so popping the path yields successor order
            cycle = [next_id]
            while path[-1] != next_id:
                cycle.append(path.pop())
            return cycle

        if next_id in visited:
            continue

        visited.add(next_id)
        on_path.add(next_id)
        path.append(next_id)
        frames.append(iter(sorted(graph.predecessors(next_id))))

    return []


def find_cycle(graph: DirectedGraph) -> list[str]:
    """Find one cycle in the graph if there is any.

    Only nodes with both incoming and outgoing arcs can lie on a cycle, so
    the search starts from those. When a search finds nothing, every node it
    reached is known to be off any cycle and is dropped from a private,
    pruned copy of the graph before the next search.

    Args:
        graph: The graph to search. It is never modified.

    Returns:
        Ids forming a cycle in traversal order (a self-loop yields a single
        id), or an empty list if the graph is acyclic. When several cycles
        exist, which one is returned is unspecified.

    Raises:
        InvalidArgumentError: If graph is None.

    Example:
        >>> find_cycle(DirectedGraph.from_adjacency({"a": ["b"], "b": ["a"]}))
        ['a', 'b']

    """
    if graph is None:
        msg = "graph cannot be None"
        raise InvalidArgumentError(msg)
    if graph.is_empty():
        return []

    candidates = deque(sorted(node.id for node in graph.get_nodes(_may_be_on_cycle)))
    search_graph = graph
    pruned: DirectedGraph | None = None

    while candidates:
        start = candidates.popleft()
        if start not in search_graph:
            continue

        visited: set[str] = set()
        cycle = _search_backward(search_graph, start, visited)
        if cycle:
            logger.debug(f"Found cycle of length {len(cycle)} starting from '{start}'")
            return cycle

        if pruned is None:
            if len(visited) == graph.size():
                return []
            pruned = graph.deep_copy()
            for node in pruned.get_nodes(lambda n: not _may_be_on_cycle(n)):
                pruned.remove_node(node.id)
            search_graph = pruned
            candidates = deque(sorted(pruned))

        for node_id in visited:
            pruned.remove_node(node_id)
        logger.debug(f"No cycle reachable from '{start}', {pruned.size()} nodes left to search")

    return []


def _node_id(node: Node) -> str:
    return node.id


class TopologicalSorter:
    """Sort graph nodes with Kahn's algorithm and a deterministic tie-break.

    Among the nodes that are ready at the same time, the one with the
    smallest ``key(node)`` comes first, and equal keys fall back to the node
    id. A comparator can be adapted with ``functools.cmp_to_key``.

    One sorter can be reused for any number of graphs.
    """

    def __init__(self, key: Callable[[Node], Any] | None = None) -> None:
        self._key = key if key is not None else _node_id

    def sort(self, graph: DirectedGraph) -> OrderingResult:
        """Order the graph's node ids so that every arc points forward.

        Args:
            graph: The graph to sort. It is never modified.

        Returns:
            ``Order`` with all ids if the graph is acyclic, otherwise
            ``Cycle`` with the ids of one cycle among the nodes that could
            not be ordered.

        Raises:
            InvalidArgumentError: If graph is None.

        """
        if graph is None:
            msg = "graph cannot be None"
            raise InvalidArgumentError(msg)
        if graph.is_empty():
            return Order()

        work = graph.deep_copy()
        frontier = [self._entry(node) for node in work.get_nodes(lambda n: not n.has_incoming())]
        heapq.heapify(frontier)
        order: list[str] = []

        while frontier:
            node_id = heapq.heappop(frontier)[1]
            order.append(node_id)
            node = work.node(node_id)
            for target_id in tuple(node.outgoing):
                work.remove_arc(node_id, target_id)
                target = work.node(target_id)
                if not target.has_incoming():
                    heapq.heappush(frontier, self._entry(target))
            work.remove_node(node_id)

        if not work.is_empty():
            logger.debug(f"Ordered {len(order)} nodes, {work.size()} left on or behind a cycle")
            return Cycle(tuple(find_cycle(work)))

        logger.debug(f"Ordered {len(order)} nodes")
        return Order(tuple(order))

    def _entry(self, node: Node) -> tuple[Any, str]:
        return (self._key(node), node.id)


def topological_sort(
    adjacency: Mapping[str, Collection[str]],
    key: Callable[[Node], Any] | None = None,
) -> list[str]:
    """Sort an adjacency mapping topologically.

    Args:
        adjacency: Mapping from id to the ids that must come after it.
        key: Tie-break key over nodes; defaults to the node id.

    Returns:
        List of ids in which every id precedes the ids it points to.

    Raises:
        CycleError: If the mapping contains a cycle.

    Example:
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": []})
        ['a', 'b', 'c']

    """
    result = TopologicalSorter(key).sort(DirectedGraph.from_adjacency(adjacency))
    match result:
        case Order(ids=ids):
            return list(ids)
        case Cycle(ids=ids):
            raise CycleError(list(ids))
        case _:
            msg = f"Unknown ordering result type: {type(result)}"
            raise TypeError(msg)
