"""
Circuit class for describing resistor networks as wired components.
"""

import logging
import warnings
from typing import Callable, Mapping

from .components import Component, Resistor, Terminal
from .nodal import nodal_resistance
from .reducer import GraphReducer

logger = logging.getLogger(__name__)


class NodeMapper:
    """
    Pure helper that maps Terminal objects (and anything wired to them)
    to deterministic junction names.
    """

    def __init__(
        self,
        connectivity_fn: Callable,
        pin_aliases: Mapping = None,
    ):
        self._connected = connectivity_fn       # injected from Circuit
        self._pin_aliases = dict(pin_aliases or {})
        self._cache = {}  # dict[Terminal, str] = {}
        self._counter = 1                       # for auto N1, N2, …

    def name_for(self, t):
        """Get junction name for terminal t."""
        connected_terminals = self._connected(t)

        # 1. Check if this terminal (or any connected terminal) is an external pin
        for pin_terminal, pin_name in self._pin_aliases.items():
            if pin_terminal in connected_terminals:
                return pin_name

        # 2. if already assigned (by equivalence), reuse
        for k, name in self._cache.items():
            if k in connected_terminals:
                return name

        # 3. Generate generic node name, skipping names taken by pins
        node_name = f"N{self._counter}"
        while node_name in self._pin_aliases.values():
            self._counter += 1
            node_name = f"N{self._counter}"
        self._counter += 1

        self._cache[t] = node_name
        return node_name


class Circuit:
    """
    A resistor network built from components and wires.

    Wires are ideal (zero-resistance) connections: every group of wired
    terminals forms one junction of the resulting network.
    """

    def __init__(self, name="Untitled Circuit"):
        self.name = name
        self.components = []
        self.wires = []  # List of (terminal1, terminal2) wire connections
        self.pins = {}  # Maps pin name -> Terminal

    def add_component(self, component):
        """Add a component to the circuit."""
        if not isinstance(component, Component):
            raise TypeError(f"component must be a Component, got {type(component)}")
        if component not in self.components:
            self.components.append(component)

    def remove_component(self, component):
        """Remove a component and any wires touching its terminals."""
        if component in self.components:
            self.components.remove(component)
            self.wires = [
                (t1, t2) for t1, t2 in self.wires
                if t1.component is not component and t2.component is not component
            ]
            self.pins = {name: t for name, t in self.pins.items() if t.component is not component}

    def wire(self, terminal1, terminal2):
        """
        Connect two terminals with a wire.

        Args:
            terminal1: First terminal
            terminal2: Second terminal
        """
        # Validate inputs
        if not isinstance(terminal1, Terminal):
            raise ValueError(f"terminal1 must be a Terminal, got {type(terminal1)}")
        if not isinstance(terminal2, Terminal):
            raise ValueError(f"terminal2 must be a Terminal, got {type(terminal2)}")

        # Register components with the circuit
        self.add_component(terminal1.component)
        self.add_component(terminal2.component)

        # Add wire connection - prevent duplicate wires between same endpoints
        wire = (terminal1, terminal2)
        reverse_wire = (terminal2, terminal1)

        if wire not in self.wires and reverse_wire not in self.wires:
            self.wires.append(wire)

    def add_pin(self, name, terminal):
        """
        Give the junction of a terminal a fixed name.

        Args:
            name: Junction name (e.g., "A", "in", "out")
            terminal: Terminal of a component in this circuit
        """
        if not isinstance(terminal, Terminal):
            raise TypeError(f"Pin must be connected to a Terminal, not {type(terminal)}.")
        if terminal.component not in self.components:
            raise ValueError("Cannot add a pin to a terminal of a component that is not in this circuit.")

        self.pins[name] = terminal

    def _assign_component_names(self):
        """
        Assign names to components without mutating them.
        Returns dict mapping component -> assigned name.
        """
        name_table = {}
        type_counts = {}

        for component in self.components:
            # Use requested name if provided, otherwise auto-generate
            prefix = component.get_component_type_prefix()
            if component._requested_name:
                name_table[component] = f"{prefix}{component._requested_name}"
            else:
                type_counts[prefix] = type_counts.get(prefix, 0) + 1
                name_table[component] = f"{prefix}{type_counts[prefix]}"

        return name_table

    def get_component_name(self, component):
        """Get the final assigned name for a component."""
        return self._assign_component_names()[component]

    def _find_connected_terminals(self, start_terminal):
        """
        Find all terminals connected to start_terminal through wires.

        Args:
            start_terminal: Starting terminal

        Returns:
            set: Set of all connected terminals (including start_terminal)
        """
        visited = set()
        to_visit = [start_terminal]

        while to_visit:
            current = to_visit.pop()
            if current in visited:
                continue

            visited.add(current)

            # Find all directly connected terminals
            for terminal1, terminal2 in self.wires:
                if terminal1 == current and terminal2 not in visited:
                    to_visit.append(terminal2)
                elif terminal2 == current and terminal1 not in visited:
                    to_visit.append(terminal1)

        return visited

    def _build(self, **options):
        """
        Convert the circuit into a reducer.

        Returns:
            tuple: (reducer, mapper); the mapper names terminals the same way
            the reducer's junctions are named
        """
        name_table = self._assign_component_names()
        mapper = NodeMapper(
            connectivity_fn=self._find_connected_terminals,
            pin_aliases={term: pin for pin, term in self.pins.items()},
        )
        reducer = GraphReducer(**options)

        for component in self.components:
            if not isinstance(component, Resistor):
                raise TypeError(f"Only resistors can be reduced, got {component!r}")
            node_a = mapper.name_for(component.n1)
            node_b = mapper.name_for(component.n2)
            if node_a == node_b:
                warnings.warn(
                    f"{name_table[component]} is shorted at junction {node_a} and carries no current; skipping it.",
                    UserWarning,
                    stacklevel=3
                )
                continue
            reducer.add_resistor(node_a, node_b, component.resistance, label=name_table[component])

        logger.debug("Built %r from %s", reducer, self)
        return reducer, mapper

    def to_reducer(self, **options):
        """
        Build a GraphReducer for this circuit.

        Args:
            **options: Passed to GraphReducer (allow_delta_wye, max_transforms)
        """
        reducer, _ = self._build(**options)
        return reducer

    def node_name(self, terminal):
        """Junction name a terminal maps to in ``to_reducer()``."""
        _, mapper = self._build()
        return mapper.name_for(terminal)

    def equivalent_resistance(self, terminal1, terminal2, method="reduce", **options):
        """
        Equivalent resistance seen between two terminals.

        Args:
            terminal1: First terminal
            terminal2: Second terminal
            method: "reduce" for series/parallel reduction, "nodal" for an
                exact nodal solve (works for bridge networks too)
            **options: Passed to GraphReducer (allow_delta_wye, max_transforms)

        Returns:
            float: Resistance in ohms (0.0 when the terminals are wired together)
        """
        if method not in ("reduce", "nodal"):
            raise ValueError(f"method must be 'reduce' or 'nodal', got {method!r}")
        for terminal in (terminal1, terminal2):
            if not isinstance(terminal, Terminal):
                raise ValueError(f"Expected a Terminal, got {type(terminal)}")
            if terminal.component not in self.components:
                raise ValueError(f"{terminal} belongs to a component that is not in this circuit")

        if terminal2 in self._find_connected_terminals(terminal1):
            return 0.0

        reducer, mapper = self._build(**options)
        node_a = mapper.name_for(terminal1)
        node_b = mapper.name_for(terminal2)

        if method == "nodal":
            return nodal_resistance(reducer.graph, node_a, node_b)
        return reducer.reduce(node_a, node_b)

    def __repr__(self):
        return f"Circuit('{self.name}', {len(self.components)} components, {len(self.wires)} wires)"
