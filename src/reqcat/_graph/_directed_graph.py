"""Mutable directed graph with string node ids."""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterator, Mapping
from dataclasses import dataclass, field

from reqcat._errors import InvalidArgumentError

_EMPTY: frozenset[str] = frozenset()


@dataclass(slots=True, eq=False)
class Node:
    """A node of a DirectedGraph.

    The node stores the ids of its neighbors, never the neighbor objects:
    the graph owns every node and resolves ids through its lookup table.
    Neighbor sets stay ``None`` until the first arc is recorded.

    Nodes compare and hash by identity, so a node of one graph is never
    equal to the node with the same id in a copy of that graph.
    """

    id: str
    _incoming: set[str] | None = field(default=None, repr=False)
    _outgoing: set[str] | None = field(default=None, repr=False)

    @property
    def incoming(self) -> frozenset[str]:
        """Ids of nodes with an arc pointing to this node, as a snapshot."""
        return frozenset(self._incoming) if self._incoming else _EMPTY

    @property
    def outgoing(self) -> frozenset[str]:
        """Ids of nodes this node points to, as a snapshot."""
        return frozenset(self._outgoing) if self._outgoing else _EMPTY

    def has_incoming(self) -> bool:
        """Return True if at least one arc points to this node."""
        return bool(self._incoming)

    def has_outgoing(self) -> bool:
        """Return True if this node points to at least one node."""
        return bool(self._outgoing)

    def _add_incoming(self, node_id: str) -> None:
        if self._incoming is None:
            self._incoming = set()
        self._incoming.add(node_id)

    def _add_outgoing(self, node_id: str) -> None:
        if self._outgoing is None:
            self._outgoing = set()
        self._outgoing.add(node_id)

    def _discard_incoming(self, node_id: str) -> None:
        if self._incoming is not None:
            self._incoming.discard(node_id)

    def _discard_outgoing(self, node_id: str) -> None:
        if self._outgoing is not None:
            self._outgoing.discard(node_id)


class DirectedGraph:
    """A directed graph whose nodes are identified by string ids.

    Cycles and self-loops are allowed; parallel arcs are not. Every arc
    ``u -> v`` is recorded at both endpoints: ``v`` is in ``u.outgoing``
    and ``u`` is in ``v.incoming``.

    The graph is not thread safe.
    """

    __slots__ = ("_nodes",)

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}

    @classmethod
    def from_adjacency(cls, adjacency: Mapping[str, Collection[str]]) -> DirectedGraph:
        """Build a graph from an adjacency mapping.

        A node is created for every id in the mapping, keys and members of
        the value collections alike, so ids that only ever appear as targets
        still exist in the graph.

        Args:
            adjacency: Mapping from a source id to the ids it points to.

        Returns:
            A new DirectedGraph instance.

        Raises:
            InvalidArgumentError: If adjacency is None.

        Example:
            >>> graph = DirectedGraph.from_adjacency({"a": {"b"}, "b": set()})
            >>> graph.has_arc("a", "b")
            True

        """
        if adjacency is None:
            msg = "adjacency cannot be None"
            raise InvalidArgumentError(msg)

        graph = cls()
        for id_from, targets in adjacency.items():
            graph.add_node(id_from)
            for id_to in targets:
                graph.add_node(id_to)
                graph.add_arc(id_from, id_to)
        return graph

    def add_node(self, node_id: str) -> bool:
        """Add a node with the given id.

        Returns:
            True if the node was created, False if it already existed.

        Raises:
            InvalidArgumentError: If node_id is None.

        """
        if node_id is None:
            msg = "node id cannot be None"
            raise InvalidArgumentError(msg)
        if node_id in self._nodes:
            return False
        self._nodes[node_id] = Node(node_id)
        return True

    def add_arc(self, id_from: str, id_to: str) -> bool:
        """Create the arc ``id_from -> id_to``.

        Returns:
            True if both nodes exist and the arc was created, False if a node
            is missing or the arc already exists.

        """
        node_from = self._nodes.get(id_from)
        node_to = self._nodes.get(id_to)
        if node_from is None or node_to is None:
            return False
        if id_to in node_from.outgoing:
            return False
        node_from._add_outgoing(id_to)  # noqa: SLF001
        node_to._add_incoming(id_from)  # noqa: SLF001
        return True

    def remove_arc(self, id_from: str, id_to: str) -> bool:
        """Remove the arc ``id_from -> id_to``.

        Returns:
            True if the arc existed and was removed.

        """
        node_from = self._nodes.get(id_from)
        node_to = self._nodes.get(id_to)
        if node_from is None or node_to is None:
            return False
        if id_to not in node_from.outgoing:
            return False
        node_from._discard_outgoing(id_to)  # noqa: SLF001
        node_to._discard_incoming(id_from)  # noqa: SLF001
        return True

    def remove_node(self, node_id: str) -> bool:
        """Remove a node together with every arc touching it.

        Returns:
            True if the node existed and was removed.

        """
        node = self._nodes.get(node_id)
        if node is None:
            return False
        for id_from in tuple(node.incoming):
            self.remove_arc(id_from, node_id)
        for id_to in tuple(node.outgoing):
            self.remove_arc(node_id, id_to)
        del self._nodes[node_id]
        return True

    def has_node(self, node_id: str) -> bool:
        """Return True if the graph contains a node with this id."""
        return node_id in self._nodes

    def has_arc(self, id_from: str, id_to: str) -> bool:
        """Return True if the graph contains the arc id_from -> id_to."""
        node_from = self._nodes.get(id_from)
        return node_from is not None and id_to in (node_from._outgoing or _EMPTY)  # noqa: SLF001

    def is_empty(self) -> bool:
        """Return True if the graph has no nodes."""
        return not self._nodes

    def size(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def node(self, node_id: str) -> Node | None:
        """Look up a node by id."""
        return self._nodes.get(node_id)

    def get_nodes(self, predicate: Callable[[Node], bool] | None = None) -> set[Node]:
        """Return the nodes satisfying predicate, or all nodes when it is None."""
        if predicate is None:
            return set(self._nodes.values())
        return {node for node in self._nodes.values() if predicate(node)}

    def predecessors(self, node_id: str) -> frozenset[str]:
        """Ids with an arc into node_id (empty for unknown ids)."""
        node = self._nodes.get(node_id)
        return node.incoming if node is not None else _EMPTY

    def successors(self, node_id: str) -> frozenset[str]:
        """Ids node_id has an arc to (empty for unknown ids)."""
        node = self._nodes.get(node_id)
        return node.outgoing if node is not None else _EMPTY

    def roots(self) -> frozenset[str]:
        """Ids of nodes without incoming arcs."""
        return frozenset(n.id for n in self._nodes.values() if not n.has_incoming())

    def leaves(self) -> frozenset[str]:
        """Ids of nodes without outgoing arcs."""
        return frozenset(n.id for n in self._nodes.values() if not n.has_outgoing())

    def deep_copy(self) -> DirectedGraph:
        """Return an independent graph with the same ids and arcs.

        The copy shares no node objects and no mutable collections with
        this graph.
        """
        graph_copy = DirectedGraph()
        for node_id, node in self._nodes.items():
            graph_copy._nodes[node_id] = Node(  # noqa: SLF001
                node_id,
                set(node._incoming) if node._incoming else None,  # noqa: SLF001
                set(node._outgoing) if node._outgoing else None,  # noqa: SLF001
            )
        return graph_copy

    def to_adjacency(self) -> dict[str, set[str]]:
        """Return the graph as a mapping from id to the ids it points to."""
        return {node_id: set(node.outgoing) for node_id, node in self._nodes.items()}

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        """Check if a node id is in the graph."""
        return node_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        """Iterate over node ids in insertion order."""
        return iter(self._nodes)

    def __repr__(self) -> str:
        arcs = sum(len(node._outgoing or _EMPTY) for node in self._nodes.values())  # noqa: SLF001
        return f"DirectedGraph(nodes={len(self._nodes)}, arcs={arcs})"
