"""Dependency-ordered concatenation of files declaring require statements."""

__all__ = [
    "REQUIRE_PATTERN",
    "Cycle",
    "CycleError",
    "DirectedGraph",
    "InvalidArgumentError",
    "Node",
    "Order",
    "OrderingResult",
    "PatternExtractor",
    "TopologicalSorter",
    "concatenate",
    "display_key",
    "find_cycle",
    "format_cycle",
    "read_dependency_map",
    "topological_sort",
]

from ._concat import concatenate, display_key, format_cycle
from ._dependencies import read_dependency_map
from ._errors import CycleError, InvalidArgumentError
from ._extract import REQUIRE_PATTERN, PatternExtractor
from ._graph import Cycle, DirectedGraph, Node, Order, OrderingResult, TopologicalSorter, find_cycle, topological_sort
