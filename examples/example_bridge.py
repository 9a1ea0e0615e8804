#!/usr/bin/env python3
"""
Equivalent Resistance Example

Reduces a nested series/parallel network step by step, then shows how a
Wheatstone bridge stalls the plain reducer and is solved with delta-wye
or nodal analysis.
"""

from ohmnet import Circuit, GraphReducer, NotSeriesParallelReducible, Resistor, nodal_resistance


def main():
    print("Nested series/parallel network")
    print("=" * 40)

    reducer = GraphReducer([
        ("A", "B", 10.0),
        ("B", "C", 20.0),
        ("A", "D", 5.0),
        ("D", "C", 15.0),
        ("C", "E", 8.0),
    ])
    resistance = reducer.reduce("A", "E")
    for i, step in enumerate(reducer.steps, 1):
        print(f"  Step {i}: {step}")
    print(f"R(A, E) = {resistance:g} ohm = {reducer.expression}")

    print("\nWheatstone bridge")
    print("=" * 40)

    r_ac, r_ad, r_cd, r_cb, r_db = (Resistor(resistance=v) for v in (1, 2, 3, 4, 5))
    circuit = Circuit("Bridge")
    circuit.wire(r_ac.a, r_ad.a)
    circuit.wire(r_ac.b, r_cd.a)
    circuit.wire(r_ac.b, r_cb.a)
    circuit.wire(r_ad.b, r_cd.b)
    circuit.wire(r_ad.b, r_db.a)
    circuit.wire(r_cb.b, r_db.b)
    circuit.add_pin("A", r_ac.a)
    circuit.add_pin("B", r_db.b)
    print(f"Circuit: {circuit}")

    try:
        circuit.equivalent_resistance(r_ac.a, r_db.b)
    except NotSeriesParallelReducible as e:
        print(f"  Series/parallel only: {e}")

    bridge = circuit.to_reducer(allow_delta_wye=True)
    print(f"  With delta-wye: {bridge.reduce('A', 'B'):.6f} ohm")
    print(f"  Nodal analysis: {nodal_resistance(bridge.graph, 'A', 'B'):.6f} ohm")


if __name__ == "__main__":
    main()
