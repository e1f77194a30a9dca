"""Exceptions shared across reqcat."""


class InvalidArgumentError(ValueError):
    """A required argument was missing or unusable."""


class CycleError(ValueError):
    """No processing order exists because the graph contains a cycle.

    Attributes:
        cycle: Ids forming one directed cycle, in traversal order.

    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        chain = " -> ".join([*cycle, cycle[0]]) if cycle else "<unknown>"
        super().__init__(f"Cycle detected in graph: {chain}")
