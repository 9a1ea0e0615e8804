#!/usr/bin/env python3
"""
Tests for GraphReducer: series, parallel and delta-wye reductions,
pruning, failure modes and reproducibility.
"""

import unittest
import os
import sys

# Add the parent directory to the path to import ohmnet
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ohmnet import (
    GraphReducer, InvalidResistance, NotSeriesParallelReducible, ReductionError, ResistanceOutOfRange,
    StarNode, equivalent_resistance, nodal_resistance,
)
from network_fixtures import (
    series_chain, nested_network, wheatstone_bridge, complete_graph, complete_graph_k4, cube, ladder,
)


class TestBasicReductions(unittest.TestCase):
    """Series and parallel rules on their own."""

    def test_series_chain(self):
        """A-R1-B-R2-C reduces to R1 + R2."""
        reducer = GraphReducer(series_chain())
        self.assertAlmostEqual(reducer.reduce("A", "C"), 30.0)
        self.assertEqual([step.kind for step in reducer.steps], ["series"])
        self.assertEqual(reducer.expression, "R1+R2")

    def test_parallel_pair(self):
        """Two resistors between A and B combine harmonically."""
        reducer = GraphReducer([("A", "B", 10.0), ("A", "B", 40.0)])
        self.assertAlmostEqual(reducer.reduce("A", "B"), 1.0 / (1.0 / 10.0 + 1.0 / 40.0))
        self.assertEqual([step.kind for step in reducer.steps], ["parallel"])
        self.assertEqual(reducer.expression, "R1||R2")

    def test_many_parallel(self):
        """Any number of parallel resistors merge in one step."""
        reducer = GraphReducer([("A", "B", 30.0)] * 3)
        self.assertAlmostEqual(reducer.reduce("A", "B"), 10.0)
        self.assertEqual(len(reducer.steps), 1)

    def test_single_resistor(self):
        """A lone resistor is already reduced."""
        reducer = GraphReducer([("A", "B", 47.0)])
        self.assertEqual(reducer.reduce("B", "A"), 47.0)
        self.assertEqual(reducer.steps, [])
        self.assertEqual(reducer.expression, "R1")

    def test_terminals_are_never_removed(self):
        """A degree-2 terminal stays put; only the middle node is reduced."""
        reducer = GraphReducer([("A", "B", 1.0), ("B", "C", 2.0), ("C", "D", 4.0)])
        self.assertAlmostEqual(reducer.reduce("B", "D"), 6.0)
        removed = [step.nodes[0] for step in reducer.steps if step.kind == "series"]
        self.assertEqual(removed, ["C"])

    def test_nested_network(self):
        """(10 + 20) || (5 + 15) + 8 = 20 through alternating steps."""
        reducer = GraphReducer(nested_network())
        self.assertAlmostEqual(reducer.reduce("A", "E"), 20.0)

        kinds = [step.kind for step in reducer.steps]
        self.assertEqual(kinds, ["series", "series", "parallel", "series"])
        parallel = reducer.steps[2]
        self.assertEqual(sorted(parallel.consumed), [20.0, 30.0])
        self.assertAlmostEqual(parallel.produced[0], 12.0)
        self.assertIn("(R1+R2)||(R3+R4)", reducer.expression)

    def test_ladder(self):
        """Three-section 1 ohm ladder is 13/8 ohm."""
        reducer = GraphReducer(ladder(3))
        self.assertAlmostEqual(reducer.reduce("in", "gnd"), 13.0 / 8.0)

    def test_module_function(self):
        """equivalent_resistance() wraps construction and reduction."""
        self.assertAlmostEqual(equivalent_resistance(nested_network(), ("A", "E")), 20.0)


class TestOrderIndependence(unittest.TestCase):
    """Insertion order and terminal order must not change the result."""

    def test_insertion_order(self):
        """Every rotation and the reversal of the input agree."""
        resistors = nested_network() + [("E", "F", 3.0), ("E", "F", 6.0), ("F", "G", 1.0)]
        expected = GraphReducer(resistors).reduce("A", "G")
        self.assertAlmostEqual(expected, 20.0 + 2.0 + 1.0)

        orderings = [list(reversed(resistors))]
        orderings += [resistors[i:] + resistors[:i] for i in range(1, len(resistors))]
        for ordering in orderings:
            with self.subTest(ordering=ordering):
                self.assertAlmostEqual(GraphReducer(ordering).reduce("A", "G"), expected)

    def test_terminal_order(self):
        """reduce(a, b) equals reduce(b, a)."""
        reducer = GraphReducer(nested_network())
        self.assertAlmostEqual(reducer.reduce("A", "E"), reducer.reduce("E", "A"))

    def test_reduce_is_repeatable(self):
        """The reducer keeps its network so other terminal pairs can be asked for."""
        reducer = GraphReducer(nested_network())
        edges_before = reducer.graph.number_of_edges()

        self.assertAlmostEqual(reducer.reduce("A", "E"), 20.0)
        self.assertAlmostEqual(reducer.reduce("A", "E"), 20.0)
        self.assertEqual(reducer.graph.number_of_edges(), edges_before)

        # C-E alone: everything else dangles off C
        self.assertAlmostEqual(reducer.reduce("C", "E"), 8.0)

    def test_integer_node_ids(self):
        """Integer junction ids reduce the same as strings."""
        resistors = [(1, 2, 10.0), (2, 3, 20.0), (1, 4, 5.0), (4, 3, 15.0), (3, 5, 8.0)]
        self.assertAlmostEqual(GraphReducer(resistors).reduce(1, 5), 20.0)

    def test_mixed_node_ids(self):
        """Junction ids that can't be sorted still reduce deterministically."""
        resistors = [("A", 1, 10.0), (1, ("x", 2), 20.0), (("x", 2), "A", 30.0), (("x", 2), "out", 5.0)]
        self.assertAlmostEqual(GraphReducer(resistors).reduce("A", "out"), 1.0 / (1 / 30.0 + 1 / 30.0) + 5.0)


class TestPruning(unittest.TestCase):
    """Dead ends and islands carry no current."""

    def test_dead_end_branch(self):
        """A resistor hanging off the chain is ignored."""
        reducer = GraphReducer(series_chain() + [("B", "X", 100.0), ("X", "Y", 50.0)])
        self.assertAlmostEqual(reducer.reduce("A", "C"), 30.0)
        pruned = [step.nodes[0] for step in reducer.steps if step.kind == "prune"]
        self.assertEqual(sorted(pruned), ["X", "Y"])

    def test_island(self):
        """A disconnected island doesn't matter."""
        reducer = GraphReducer(series_chain() + [("P", "Q", 1.0), ("Q", "R", 2.0), ("R", "P", 3.0)])
        self.assertAlmostEqual(reducer.reduce("A", "C"), 30.0)
        pruned = {step.nodes[0] for step in reducer.steps if step.kind == "prune"}
        self.assertEqual(pruned, {"P", "Q", "R"})

    def test_dangling_loop(self):
        """Two parallel resistors hanging off a junction are pruned after merging."""
        reducer = GraphReducer(series_chain() + [("B", "X", 10.0), ("X", "B", 10.0)])
        self.assertAlmostEqual(reducer.reduce("A", "C"), 30.0)


class TestFailures(unittest.TestCase):
    """Invalid input and unreducible topologies."""

    def test_invalid_resistance(self):
        """0 and negative resistances raise at insertion."""
        reducer = GraphReducer()
        with self.assertRaises(InvalidResistance):
            reducer.add_resistor("A", "B", 0)
        with self.assertRaises(InvalidResistance):
            reducer.add_resistor("A", "B", -10)
        with self.assertRaises(InvalidResistance):
            GraphReducer([("A", "B", 10), ("B", "C", -1)])

    def test_wheatstone_not_reducible(self):
        """A bridge stalls the series/parallel rules instead of looping."""
        reducer = GraphReducer(wheatstone_bridge())
        with self.assertRaises(NotSeriesParallelReducible) as ctx:
            reducer.reduce("A", "B")
        self.assertEqual(ctx.exception.remaining_edges, 5)
        self.assertIsInstance(ctx.exception, ReductionError)

    def test_complete_graph_not_reducible(self):
        reducer = GraphReducer(complete_graph_k4())
        with self.assertRaises(NotSeriesParallelReducible):
            reducer.reduce("A", "B")

    def test_unknown_terminal(self):
        reducer = GraphReducer(series_chain())
        with self.assertRaises(ValueError):
            reducer.reduce("A", "Z")

    def test_same_terminal(self):
        reducer = GraphReducer(series_chain())
        with self.assertRaises(ValueError):
            reducer.reduce("A", "A")

    def test_disconnected_terminals(self):
        reducer = GraphReducer([("A", "B", 1.0), ("C", "D", 1.0)])
        with self.assertRaises(ValueError):
            reducer.reduce("A", "D")

    def test_negative_transform_budget(self):
        with self.assertRaises(ValueError):
            GraphReducer(max_transforms=-1)


class TestDerivedResistanceRange(unittest.TestCase):
    """Combined values that leave the float range fail as reduction errors."""

    def test_series_overflow(self):
        """Two accepted resistors whose sum overflows to infinity."""
        reducer = GraphReducer([("A", "B", 1e308), ("B", "C", 1e308)])
        with self.assertRaises(ResistanceOutOfRange) as ctx:
            reducer.reduce("A", "C")

        self.assertIsInstance(ctx.exception, ReductionError)
        self.assertNotIsInstance(ctx.exception, InvalidResistance)
        self.assertEqual(ctx.exception.kind, "series")
        self.assertEqual(ctx.exception.value, float("inf"))

    def test_parallel_underflow(self):
        """Two tiny parallel resistors whose combination underflows to zero."""
        reducer = GraphReducer([("A", "B", 5e-324), ("A", "B", 5e-324)])
        with self.assertRaises(ResistanceOutOfRange) as ctx:
            reducer.reduce("A", "B")

        self.assertNotIsInstance(ctx.exception, InvalidResistance)
        self.assertEqual(ctx.exception.kind, "parallel")
        self.assertEqual(ctx.exception.value, 0.0)

    def test_large_values_in_range(self):
        """Big but representable sums still reduce."""
        reducer = GraphReducer([("A", "B", 1e300), ("B", "C", 1e300)])
        self.assertAlmostEqual(reducer.reduce("A", "C") / 1e300, 2.0)

    def test_network_kept_after_failure(self):
        """A failed reduction leaves the reducer's own network untouched."""
        reducer = GraphReducer([("A", "B", 1e308), ("B", "C", 1e308)])
        with self.assertRaises(ResistanceOutOfRange):
            reducer.reduce("A", "C")
        self.assertEqual(reducer.graph.number_of_edges(), 2)
        self.assertAlmostEqual(reducer.reduce("A", "B"), 1e308)


class TestDeltaWye(unittest.TestCase):
    """Optional delta-wye transform for bridge networks."""

    def test_wheatstone_bridge(self):
        """Unbalanced bridge: 61/21 ohm, matching nodal analysis."""
        reducer = GraphReducer(wheatstone_bridge(), allow_delta_wye=True)
        result = reducer.reduce("A", "B")

        self.assertAlmostEqual(result, 61.0 / 21.0)
        self.assertAlmostEqual(result, nodal_resistance(reducer.graph, "A", "B"))
        transforms = [step for step in reducer.steps if step.kind == "delta-wye"]
        self.assertEqual(len(transforms), 1)
        self.assertIsInstance(transforms[0].nodes[0], StarNode)

    def test_balanced_bridge(self):
        """Balanced bridge carries no current in the bridging resistor."""
        resistors = wheatstone_bridge(r_ac=10.0, r_ad=20.0, r_cd=50.0, r_cb=10.0, r_db=20.0)
        result = GraphReducer(resistors, allow_delta_wye=True).reduce("A", "B")
        self.assertAlmostEqual(result, 40.0 / 3.0)

    def test_complete_graph(self):
        """K4 of 1 ohm resistors is 0.5 ohm between any two corners."""
        reducer = GraphReducer(complete_graph_k4(), allow_delta_wye=True)
        self.assertAlmostEqual(reducer.reduce("A", "B"), 0.5)
        self.assertAlmostEqual(reducer.reduce("C", "D"), 0.5)

    def test_transform_budget(self):
        """A zero budget behaves like the plain reducer."""
        reducer = GraphReducer(wheatstone_bridge(), allow_delta_wye=True, max_transforms=0)
        with self.assertRaises(NotSeriesParallelReducible):
            reducer.reduce("A", "B")

    def test_k5_still_not_reducible(self):
        """Delta-wye alone can't finish K5; it stops with an error instead of looping."""
        for budget in (None, 50):
            with self.subTest(max_transforms=budget):
                reducer = GraphReducer(complete_graph(5), allow_delta_wye=True, max_transforms=budget)
                with self.assertRaises(NotSeriesParallelReducible):
                    reducer.reduce("A", "B")
                self.assertAlmostEqual(nodal_resistance(reducer.graph, "A", "B"), 0.4)

    def test_cube_has_no_triangle(self):
        """Without triangles there is nothing to transform."""
        reducer = GraphReducer(cube(), allow_delta_wye=True)
        with self.assertRaises(NotSeriesParallelReducible):
            reducer.reduce(0, 7)
        self.assertNotIn("delta-wye", [step.kind for step in reducer.steps])
        self.assertAlmostEqual(nodal_resistance(reducer.graph, 0, 7), 5.0 / 6.0)

    def test_reducible_network_unaffected(self):
        """Series/parallel networks never need a transform."""
        reducer = GraphReducer(nested_network(), allow_delta_wye=True)
        self.assertAlmostEqual(reducer.reduce("A", "E"), 20.0)
        self.assertNotIn("delta-wye", [step.kind for step in reducer.steps])


if __name__ == '__main__':
    unittest.main()
