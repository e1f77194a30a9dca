"""Graph module providing the dependency graph engine.

This module contains:
- DirectedGraph / Node: a mutable directed graph keyed by string ids
- find_cycle: locates one cycle in a graph
- TopologicalSorter: deterministic ordering returning Order or Cycle
- topological_sort: convenience wrapper raising CycleError
"""

from ._algorithms import Cycle, Order, OrderingResult, TopologicalSorter, find_cycle, topological_sort
from ._directed_graph import DirectedGraph, Node

__all__ = [
    "Cycle",
    "DirectedGraph",
    "Node",
    "Order",
    "OrderingResult",
    "TopologicalSorter",
    "find_cycle",
    "topological_sort",
]
