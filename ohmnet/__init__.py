"""
Ohmnet: equivalent resistance of resistor networks

Describe a network as resistor triples or as wired Resistor components and
collapse it with series/parallel (and optionally delta-wye) reductions, or
solve it exactly with nodal analysis.
"""

from .exceptions import InvalidResistance, ReductionError, NotSeriesParallelReducible, ResistanceOutOfRange
from .graph import ResistorGraph, check_resistance
from .reducer import GraphReducer, ReductionStep, StarNode, equivalent_resistance
from .nodal import conductance_matrix, nodal_resistance
from .components import Component, Terminal, Resistor
from .circuit import Circuit, NodeMapper

__version__ = "0.1.0"

__all__ = [
    # Errors
    "InvalidResistance", "ReductionError", "NotSeriesParallelReducible", "ResistanceOutOfRange",
    # Graph and reduction
    "ResistorGraph", "check_resistance", "GraphReducer", "ReductionStep", "StarNode", "equivalent_resistance",
    # Nodal analysis
    "conductance_matrix", "nodal_resistance",
    # Schematic building
    "Component", "Terminal", "Resistor", "Circuit", "NodeMapper",
]
