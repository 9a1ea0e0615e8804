"""
Undirected multigraph of resistors between circuit junctions.
"""

import math

import networkx as nx

from .exceptions import InvalidResistance


def check_resistance(resistance):
    """
    Validate a resistance value and return it as a float.

    Raises:
        InvalidResistance: if the value is not a number, not finite, or <= 0.
            Strings and booleans are rejected even when float() would take them.
    """
    if isinstance(resistance, (bool, str, bytes, bytearray)):
        raise InvalidResistance(resistance)
    try:
        value = float(resistance)
    except (TypeError, ValueError):
        raise InvalidResistance(resistance) from None
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidResistance(resistance)
    return value


class ResistorGraph:
    """
    Simple undirected multigraph to represent resistor connectivity.

    Nodes are arbitrary hashable junction identifiers. Every edge carries a
    ``resistance`` (ohms) and a ``label``; several edges may join the same
    pair of nodes (resistors in parallel).
    """

    def __init__(self):
        self._graph = nx.MultiGraph()
        self._order = {}  # node -> insertion index, used when ids don't sort
        self._label_counter = 0

    def add_node(self, node):
        if node not in self._order:
            self._order[node] = len(self._order)
        self._graph.add_node(node)

    def add_resistor(self, node_a, node_b, resistance, label=None):
        """
        Insert a resistor between two distinct nodes.

        Args:
            node_a: First junction identifier
            node_b: Second junction identifier
            resistance: Positive finite resistance in ohms
            label: Optional name for the resistor (default: R1, R2, ...)

        Returns:
            The edge key of the new resistor.
        """
        value = check_resistance(resistance)
        if node_a == node_b:
            raise ValueError(f"Resistor endpoints must be distinct nodes, got {node_a!r} twice")

        if label is None:
            self._label_counter += 1
            label = f"R{self._label_counter}"

        return self._add_edge(node_a, node_b, value, str(label))

    def _add_edge(self, node_a, node_b, resistance, label):
        """Insert an edge without validation, for values derived by reductions."""
        self.add_node(node_a)
        self.add_node(node_b)
        return self._graph.add_edge(node_a, node_b, resistance=resistance, label=label)

    def remove_node(self, node):
        """Remove a node together with every resistor touching it."""
        self._graph.remove_node(node)

    def remove_edge(self, node_a, node_b, key):
        self._graph.remove_edge(node_a, node_b, key=key)

    @property
    def nodes(self):
        return set(self._graph.nodes)

    def __contains__(self, node):
        return self._graph.has_node(node)

    def __len__(self):
        return self._graph.number_of_nodes()

    def number_of_edges(self):
        return self._graph.number_of_edges()

    def degree(self, node):
        """Number of resistors touching ``node`` (parallel edges counted separately)."""
        return self._graph.degree(node)

    def edges(self):
        """Yield ``(node_a, node_b, resistance, label)`` for every resistor."""
        for node_a, node_b, data in self._graph.edges(data=True):
            yield node_a, node_b, data["resistance"], data["label"]

    def incident(self, node):
        """
        Get the resistors touching ``node``.

        Returns:
            list: ``(neighbor, key, resistance, label)`` tuples
        """
        return [
            (neighbor, key, data["resistance"], data["label"])
            for _, neighbor, key, data in self._graph.edges(node, keys=True, data=True)
        ]

    def ordered_nodes(self):
        """
        Nodes in a fixed, reproducible order.

        Ascending identifier when the identifiers are mutually orderable,
        insertion order otherwise.
        """
        try:
            return sorted(self._graph.nodes)
        except TypeError:
            return sorted(self._graph.nodes, key=self._order.__getitem__)

    def parallel_groups(self):
        """
        Find node pairs joined by two or more resistors.

        Returns:
            list: ``(node_a, node_b, [(key, resistance, label), ...])`` in node order
        """
        ordered = self.ordered_nodes()
        rank = {node: i for i, node in enumerate(ordered)}
        groups = []
        for node_a in ordered:
            neighbors = sorted(self._graph.adj[node_a], key=rank.__getitem__)
            for node_b in neighbors:
                if rank[node_b] <= rank[node_a]:
                    continue
                bundle = self._graph.adj[node_a][node_b]
                if len(bundle) > 1:
                    groups.append((node_a, node_b, [
                        (key, data["resistance"], data["label"])
                        for key, data in bundle.items()
                    ]))
        return groups

    def connected_component(self, node):
        """All nodes reachable from ``node`` (including itself)."""
        return nx.node_connected_component(self._graph, node)

    def copy(self):
        """Independent copy; mutating it leaves this graph untouched."""
        clone = ResistorGraph()
        clone._graph = self._graph.copy()
        clone._order = dict(self._order)
        clone._label_counter = self._label_counter
        return clone

    def __repr__(self):
        return f"ResistorGraph({self._graph.number_of_nodes()} nodes, {self._graph.number_of_edges()} resistors)"
