"""
Exceptions raised while building or reducing resistor networks.
"""


class InvalidResistance(ValueError):
    """Raised when a resistance is not a strictly positive, finite number."""

    def __init__(self, resistance, message=None):
        self.resistance = resistance
        super().__init__(message or f"Resistance must be a positive finite number, got {resistance!r}")


class ReductionError(Exception):
    """Base class for failures while reducing a network."""


class NotSeriesParallelReducible(ReductionError):
    """
    The network cannot be collapsed any further with the enabled rules.

    Bridge topologies (e.g. a Wheatstone bridge) end up here unless the
    delta-wye transform is enabled.
    """

    def __init__(self, remaining_edges, message=None):
        self.remaining_edges = remaining_edges
        super().__init__(
            message or f"Network is not series/parallel reducible: {remaining_edges} edges remain "
                       f"and no rule applies"
        )


class ResistanceOutOfRange(ReductionError):
    """
    A combined resistance left the range of positive finite floats.

    Raised when a series sum overflows to infinity or a parallel (or
    delta-wye) combination underflows to zero.
    """

    def __init__(self, kind, nodes, value, message=None):
        self.kind = kind
        self.nodes = tuple(nodes)
        self.value = value
        super().__init__(
            message or f"{kind} reduction at {self.nodes} produced {value!r}, "
                       f"outside the range of positive finite floats"
        )
