"""
Component classes for resistor network elements.
"""

from .graph import check_resistance


class Terminal:
    """Represents a connection terminal of a component."""

    def __init__(self, component, terminal_name):
        self.component = component
        self.terminal_name = terminal_name

    def __str__(self):
        if self.component.name != "UNNAMED":
            return f"{self.component.name}.{self.terminal_name}"
        return f"{self.component.__class__.__name__}_{id(self.component) % 10000}.{self.terminal_name}"

    def __repr__(self):
        return f"Terminal({self})"


class Component:
    """Base class for all network components."""

    def __init__(self, name=None):
        # Store the requested name (or None for auto-generation by circuit)
        self._requested_name = name
        self.name = name or "UNNAMED"  # Temporary name until circuit assigns proper one

    def get_component_type_prefix(self):
        """Get the naming prefix for this component type."""
        return "X"

    def get_terminals(self):
        """Get list of (terminal_name, terminal) tuples for this component."""
        raise NotImplementedError("Subclasses must implement get_terminals()")

    def terminals(self):
        """Get all terminals for this component as an iterable."""
        for terminal_name, terminal in self.get_terminals():
            yield terminal

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name})"


class Resistor(Component):
    """Resistor component."""

    def __init__(self, resistance=1000.0, name=None):
        self.resistance = check_resistance(resistance)
        super().__init__(name)

        # Create terminals - these become junctions once wired
        self.n1 = Terminal(self, "n1")
        self.n2 = Terminal(self, "n2")

        # Aliases for convenience
        self.a = self.n1
        self.b = self.n2

    def get_component_type_prefix(self):
        return "R"

    def get_terminals(self):
        return [('n1', self.n1), ('n2', self.n2)]

    def __repr__(self):
        return f"Resistor({self.name}, {self.resistance:g} ohm)"
