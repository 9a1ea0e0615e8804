"""
Exact equivalent resistance by nodal analysis.

Solves Kirchhoff's current law on the conductance (Laplacian) matrix of the
network, so it handles any topology, bridges included. Used as the
reference the series/parallel reduction is checked against.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def conductance_matrix(graph, nodes):
    """
    Build the nodal conductance matrix for ``nodes``.

    Args:
        graph: ResistorGraph
        nodes: Ordered list of nodes; row/column ``i`` belongs to ``nodes[i]``

    Returns:
        np.ndarray: Symmetric ``len(nodes) x len(nodes)`` matrix in siemens
    """
    index = {node: i for i, node in enumerate(nodes)}
    matrix = np.zeros((len(nodes), len(nodes)))
    for node_a, node_b, resistance, _ in graph.edges():
        if node_a not in index or node_b not in index:
            continue
        i, j = index[node_a], index[node_b]
        g = 1.0 / resistance
        matrix[i, i] += g
        matrix[j, j] += g
        matrix[i, j] -= g
        matrix[j, i] -= g
    return matrix


def nodal_resistance(graph, terminal_a, terminal_b):
    """
    Equivalent resistance between two terminals of a ResistorGraph.

    ``terminal_b`` is grounded, 1 A is injected at ``terminal_a`` and the
    resulting node voltage at ``terminal_a`` is the resistance.

    Raises:
        ValueError: if a terminal is unknown, the terminals coincide, or
            they are not connected
    """
    for terminal in (terminal_a, terminal_b):
        if terminal not in graph:
            raise ValueError(f"Terminal {terminal!r} is not a node of the network")
    if terminal_a == terminal_b:
        raise ValueError(f"Terminals must be distinct, got {terminal_a!r} twice")

    component = graph.connected_component(terminal_a)
    if terminal_b not in component:
        raise ValueError(f"Terminals {terminal_a!r} and {terminal_b!r} are not connected")

    # Ground terminal_b by leaving it out of the system
    nodes = [terminal_a] + [n for n in graph.ordered_nodes() if n in component and n not in (terminal_a, terminal_b)]
    index = {node: i for i, node in enumerate(nodes)}

    full = conductance_matrix(graph, nodes + [terminal_b])
    reduced = full[:len(nodes), :len(nodes)]

    current = np.zeros(len(nodes))
    current[index[terminal_a]] = 1.0

    voltages = np.linalg.solve(reduced, current)
    resistance = float(voltages[index[terminal_a]])
    logger.debug("Nodal solve over %d nodes: %s-%s = %g ohm", len(nodes) + 1, terminal_a, terminal_b, resistance)
    return resistance
