# tests/conftest.py
import pytest

from gridsim_core import (
    ElectricalNetwork, SolverConfig, NetworkRegistry, SimulationSpaces,
    FreeNode, SourceNode, CurrentSourceNode, CouplingNode, Wire, SwitchedWire,
)


class NetworkHarness:
    """
    Small helper for building a single network by hand. Every node created
    through it is added to the network immediately; wires likewise.
    """
    def __init__(self, network: ElectricalNetwork):
        self.network = network

    def free(self) -> FreeNode:
        node = FreeNode()
        self.network.add_node(node)
        return node

    def source(self, potential: float) -> SourceNode:
        node = SourceNode(potential)
        self.network.add_node(node)
        return node

    def current_source(self, current: float) -> CurrentSourceNode:
        node = CurrentSourceNode(current)
        self.network.add_node(node)
        return node

    def wire(self, resistance: float, node_a, node_b=None) -> Wire:
        wire = Wire(resistance, node_a, node_b)
        self.network.add_wire(wire)
        return wire

    def switch(self, resistance: float, node_a, node_b=None, closed: bool = True) -> SwitchedWire:
        wire = SwitchedWire(resistance, node_a, node_b, closed)
        self.network.add_wire(wire)
        return wire

    def transformer(self, ratio: float, *terminals, resistance: float = 0.0) -> CouplingNode:
        coupling = CouplingNode.create(ratio, *terminals, resistance=resistance)
        self.network.add_node(coupling)
        return coupling

    def solve(self, passes: int = 3):
        """Runs a few calculations, as a registry tick does for a freshly built network."""
        result = None
        for _ in range(passes):
            result = self.network.calculate()
        return result


@pytest.fixture
def solver_config():
    return SolverConfig(seed=1234)


@pytest.fixture
def network(solver_config):
    return ElectricalNetwork(solver_config)


@pytest.fixture
def harness(network):
    return NetworkHarness(network)


@pytest.fixture
def divider(harness):
    """10 V source feeding two 10 ohm resistors in series to the reference."""
    source = harness.source(10.0)
    middle = harness.free()
    upper = harness.wire(10.0, source, middle)
    lower = harness.wire(10.0, middle)
    return harness, source, middle, upper, lower


@pytest.fixture
def registry(solver_config):
    return NetworkRegistry("overworld", solver_config)


@pytest.fixture
def spaces(solver_config):
    arena = SimulationSpaces(solver_config)
    yield arena
    arena.unload_all()
