"""
Series/parallel reduction of resistor networks.

A network is collapsed onto a single resistor between two terminals by
repeatedly applying three rules until one edge is left:

* dead ends: a non-terminal junction with at most one resistor carries no
  current and is dropped together with that resistor,
* parallel: resistors joining the same two junctions combine as
  ``1 / (1/R1 + 1/R2 + ...)``,
* series: a non-terminal junction with exactly two resistors to two
  different neighbours is removed and the resistors combine as ``R1 + R2``.

Bridge networks (Wheatstone and friends) get stuck under these rules and
fail with ``NotSeriesParallelReducible``. When enabled, delta-wye
transforms unlock bridges that still contain a triangle, such as the
Wheatstone bridge or the complete graph on four nodes. They are not a
general solver: networks such as K5, the cube graph or a 4x4 grid stall
again once no usable triangle is left and still raise. Use
``nodal_resistance`` for those.
"""

import logging
import math
from itertools import combinations

from .exceptions import NotSeriesParallelReducible, ResistanceOutOfRange
from .graph import ResistorGraph

logger = logging.getLogger(__name__)

SERIES = "+"
PARALLEL = "||"


def _top_level_ops(label):
    """Operators appearing outside any parentheses in a label expression."""
    ops = set()
    depth = 0
    i = 0
    while i < len(label):
        ch = label[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif depth == 0:
            if label.startswith(PARALLEL, i):
                ops.add(PARALLEL)
                i += len(PARALLEL)
                continue
            if ch == SERIES:
                ops.add(SERIES)
        i += 1
    return ops


def _combine_labels(labels, op):
    parts = []
    for label in labels:
        if _top_level_ops(label) - {op}:
            label = f"({label})"
        parts.append(label)
    return op.join(parts)


class StarNode:
    """Centre junction introduced by a delta-wye transform."""

    def __init__(self, index):
        self.index = index

    def __str__(self):
        return f"Y{self.index}"

    def __repr__(self):
        return f"StarNode({self.index})"


class ReductionStep:
    """
    One applied reduction rule.

    Attributes:
        kind: "prune", "parallel", "series" or "delta-wye"
        nodes: junctions involved (the removed node first for series/prune)
        consumed: resistances that were replaced
        produced: resistances that replaced them (empty for prune)
    """

    def __init__(self, kind, nodes, consumed, produced):
        self.kind = kind
        self.nodes = tuple(nodes)
        self.consumed = tuple(consumed)
        self.produced = tuple(produced)

    def __repr__(self):
        return f"ReductionStep({self.kind}, nodes={self.nodes}, {list(self.consumed)} -> {list(self.produced)})"


class GraphReducer:
    """
    Collapses a resistor network into its equivalent resistance.

    The reducer owns a ``ResistorGraph``; ``reduce`` works on a copy of it,
    so the same reducer can be queried for several terminal pairs.

    Args:
        resistors: Optional iterable of ``(node_a, node_b, resistance)`` triples
        allow_delta_wye: Apply delta-wye transforms when series/parallel rules stall.
            This only helps while a triangle is available; some bridge
            networks still raise NotSeriesParallelReducible.
        max_transforms: Upper bound on delta-wye transforms per reduction
            (default: number of resistors in the network being reduced)

    Example:
        >>> reducer = GraphReducer([("A", "B", 10), ("B", "C", 20)])
        >>> reducer.reduce("A", "C")
        30.0
    """

    def __init__(self, resistors=None, allow_delta_wye=False, max_transforms=None):
        if max_transforms is not None and max_transforms < 0:
            raise ValueError(f"max_transforms must be non-negative, got {max_transforms}")
        self.graph = ResistorGraph()
        self.allow_delta_wye = allow_delta_wye
        self.max_transforms = max_transforms
        self.steps = []
        self.expression = None
        self._star_counter = 0

        for resistor in resistors or ():
            self.add_resistor(*resistor)

    def add_resistor(self, node_a, node_b, resistance, label=None):
        """
        Add a resistor between two junctions.

        Raises:
            InvalidResistance: if resistance is not a positive finite number
            ValueError: if both ends are the same junction
        """
        return self.graph.add_resistor(node_a, node_b, resistance, label=label)

    def reduce(self, terminal_a, terminal_b):
        """
        Reduce the network to a single resistor between the two terminals.

        Args:
            terminal_a: First terminal junction
            terminal_b: Second terminal junction

        Returns:
            float: Equivalent resistance between the terminals in ohms

        Raises:
            ValueError: if a terminal is unknown, the terminals coincide, or
                they are not connected through any resistor
            NotSeriesParallelReducible: if no rule applies and more than one
                resistor remains
            ResistanceOutOfRange: if a combined resistance overflows to
                infinity or underflows to zero. Infinity is never returned.
        """
        for terminal in (terminal_a, terminal_b):
            if terminal not in self.graph:
                raise ValueError(f"Terminal {terminal!r} is not a node of the network")
        if terminal_a == terminal_b:
            raise ValueError(f"Terminals must be distinct, got {terminal_a!r} twice")

        work = self.graph.copy()
        terminals = (terminal_a, terminal_b)
        self.steps = []
        self.expression = None
        self._star_counter = 0

        component = work.connected_component(terminal_a)
        if terminal_b not in component:
            raise ValueError(f"Terminals {terminal_a!r} and {terminal_b!r} are not connected")
        self._prune_islands(work, component)

        budget = self.max_transforms
        if budget is None:
            budget = work.number_of_edges()
        transforms = 0

        while work.number_of_edges() > 1:
            changed = self._prune_dead_ends(work, terminals)
            changed = self._reduce_parallel(work) or changed
            changed = self._reduce_series(work, terminals) or changed
            if changed:
                continue

            if self.allow_delta_wye and transforms < budget and self._delta_wye(work, terminals):
                transforms += 1
                continue

            raise NotSeriesParallelReducible(work.number_of_edges())

        (_, _, resistance, label), = work.edges()
        self.expression = label
        logger.info("Reduced %s-%s to %g ohm in %d steps", terminal_a, terminal_b, resistance, len(self.steps))
        return resistance

    @staticmethod
    def _check_derived(kind, nodes, value):
        # inputs are validated at insertion; combined values can still overflow or underflow
        if not math.isfinite(value) or value <= 0.0:
            raise ResistanceOutOfRange(kind, nodes, value)

    def _record(self, kind, nodes, consumed, produced):
        step = ReductionStep(kind, nodes, consumed, produced)
        self.steps.append(step)
        logger.debug("%r", step)

    def _prune_islands(self, work, component):
        """Drop every junction that cannot carry current between the terminals."""
        for node in work.ordered_nodes():
            if node not in component:
                consumed = [r for _, _, r, _ in work.incident(node)]
                work.remove_node(node)
                self._record("prune", [node], consumed, [])

    def _prune_dead_ends(self, work, terminals):
        changed = False
        pending = work.ordered_nodes()
        while pending:
            node = pending.pop(0)
            if node in terminals or node not in work or work.degree(node) > 1:
                continue
            incident = work.incident(node)
            work.remove_node(node)
            self._record("prune", [node], [r for _, _, r, _ in incident], [])
            # the neighbour may have become a dead end in turn
            pending.extend(neighbor for neighbor, _, _, _ in incident)
            changed = True
        return changed

    def _reduce_parallel(self, work):
        groups = work.parallel_groups()
        for node_a, node_b, bundle in groups:
            resistances = [r for _, r, _ in bundle]
            combined = 1.0 / sum(1.0 / r for r in resistances)
            label = _combine_labels([lbl for _, _, lbl in bundle], PARALLEL)
            self._check_derived("parallel", [node_a, node_b], combined)
            for key, _, _ in bundle:
                work.remove_edge(node_a, node_b, key)
            work._add_edge(node_a, node_b, combined, label)
            self._record("parallel", [node_a, node_b], resistances, [combined])
        return bool(groups)

    def _reduce_series(self, work, terminals):
        changed = False
        for node in work.ordered_nodes():
            if node in terminals or node not in work or work.degree(node) != 2:
                continue
            (left, _, r_left, l_left), (right, _, r_right, l_right) = work.incident(node)
            if left == right:
                # both resistors lead back to one junction; left for the parallel rule
                continue
            combined = r_left + r_right
            self._check_derived("series", [node, left, right], combined)
            work.remove_node(node)
            work._add_edge(left, right, combined, _combine_labels([l_left, l_right], SERIES))
            self._record("series", [node, left, right], [r_left, r_right], [combined])
            changed = True
        return changed

    def _find_triangle(self, work, terminals):
        """
        Pick a triangle for delta-wye, preferring one with a non-terminal
        corner of degree 3 (that corner becomes a series junction afterwards).
        """
        ordered = work.ordered_nodes()
        rank = {node: i for i, node in enumerate(ordered)}
        adjacency = {node: {n for n, _, _, _ in work.incident(node)} for node in ordered}

        first = None
        for u in ordered:
            later = sorted((n for n in adjacency[u] if rank[n] > rank[u]), key=rank.__getitem__)
            for v, w in combinations(later, 2):
                if w not in adjacency[v]:
                    continue
                triangle = (u, v, w)
                if any(n not in terminals and work.degree(n) == 3 for n in triangle):
                    return triangle
                if first is None:
                    first = triangle
        return first

    def _delta_wye(self, work, terminals):
        triangle = self._find_triangle(work, terminals)
        if triangle is None:
            return False
        u, v, w = triangle

        def side(a, b):
            # after a stalled pass there are no parallel bundles left
            for neighbor, key, resistance, label in work.incident(a):
                if neighbor == b:
                    return key, resistance, label
            raise KeyError((a, b))

        (k_uv, r_uv, l_uv), (k_vw, r_vw, l_vw), (k_wu, r_wu, l_wu) = side(u, v), side(v, w), side(w, u)
        total = r_uv + r_vw + r_wu
        arms = {
            u: r_uv * r_wu / total,
            v: r_uv * r_vw / total,
            w: r_vw * r_wu / total,
        }
        for corner in triangle:
            self._check_derived("delta-wye", triangle, arms[corner])

        work.remove_edge(u, v, k_uv)
        work.remove_edge(v, w, k_vw)
        work.remove_edge(w, u, k_wu)

        self._star_counter += 1
        star = StarNode(self._star_counter)
        for suffix, corner in zip("abc", triangle):
            work._add_edge(star, corner, arms[corner], f"{star}{suffix}")

        self._record("delta-wye", [star, u, v, w], [r_uv, r_vw, r_wu], [arms[u], arms[v], arms[w]])
        return True

    def __repr__(self):
        return f"GraphReducer({self.graph!r}, allow_delta_wye={self.allow_delta_wye})"


def equivalent_resistance(resistors, terminals, **options):
    """
    Equivalent resistance of a network given as resistor triples.

    Args:
        resistors: Iterable of ``(node_a, node_b, resistance)`` triples
        terminals: ``(terminal_a, terminal_b)`` pair
        **options: Passed to ``GraphReducer`` (allow_delta_wye, max_transforms)

    Returns:
        float: Equivalent resistance in ohms
    """
    terminal_a, terminal_b = terminals
    return GraphReducer(resistors, **options).reduce(terminal_a, terminal_b)
