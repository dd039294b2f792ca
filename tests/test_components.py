# tests/test_components.py
import math

import pint
import pytest

from gridsim_core import (
    NodeKind, FreeNode, SourceNode, CurrentSourceNode, CouplingNode, Wire, SwitchedWire,
    ElectricalNetwork, to_magnitude,
)
from gridsim_core.components import InvalidResistanceError


class TestNodes:

    def test_kinds(self):
        assert FreeNode.kind is NodeKind.FREE
        assert SourceNode.kind is NodeKind.SOURCE
        assert CurrentSourceNode.kind is NodeKind.CURRENT_SOURCE
        assert CouplingNode.kind is NodeKind.COUPLING

    def test_identity_semantics(self):
        a, b = FreeNode(), FreeNode()
        assert a != b
        assert len({a, b}) == 2

    def test_fresh_node_is_unassigned(self):
        node = FreeNode()
        assert node.index == -1
        assert node.network is None
        assert node.potential == 0.0
        assert node.current == 0.0

    def test_free_node_receives_potential(self):
        node = FreeNode()
        node.receive_result(3.5)
        assert node.potential == 3.5

    def test_source_keeps_its_potential(self):
        node = SourceNode(12.0)
        node.receive_result(11.999)
        assert node.potential == 12.0
        node.set_potential(6.0)
        assert node.potential == 6.0

    def test_current_source(self):
        node = CurrentSourceNode(0.25)
        assert node.current == 0.25
        node.set_current(-1.0)
        assert node.current == -1.0
        node.receive_result(4.0)
        assert node.potential == 4.0


class TestWires:

    @pytest.mark.parametrize("resistance", [0.0, -1.0, float('nan'), float('inf')])
    def test_invalid_resistance(self, resistance):
        with pytest.raises(InvalidResistanceError) as excinfo:
            Wire(resistance, FreeNode(), FreeNode())
        report = excinfo.value.get_diagnostic_report()
        assert "Invalid Resistance" in report
        assert "Wire" in report

    def test_conductance(self):
        assert Wire(4.0, FreeNode()).conductance() == 0.25

    def test_grounded_wire_is_normalized(self):
        node = FreeNode()
        wire = Wire(1.0, None, node)
        assert wire.node_a is node
        assert wire.node_b is None
        assert wire.is_grounded()
        assert wire.nodes == (node,)

    def test_wire_needs_a_node(self):
        with pytest.raises(ValueError):
            Wire(1.0, None, None)

    def test_derived_quantities(self):
        a, b = FreeNode(), FreeNode()
        a.receive_result(10.0)
        b.receive_result(4.0)
        wire = Wire(2.0, a, b)

        assert wire.potential_difference() == 6.0
        assert wire.current() == 3.0
        assert wire.power() == pytest.approx(18.0)
        assert wire.touches(a) and wire.touches(b)
        assert not wire.touches(FreeNode())

    def test_remove_detaches_from_network(self):
        network = ElectricalNetwork()
        node = FreeNode()
        network.add_node(node)
        wire = Wire(1.0, node)
        network.add_wire(wire)

        wire.remove()

        assert wire.network is None
        assert network.is_empty()


class TestSwitchedWire:

    def test_open_switch_conducts_nothing(self):
        a, b = FreeNode(), FreeNode()
        a.receive_result(5.0)
        switch = SwitchedWire(1.0, a, b, closed=False)

        assert switch.conductance() == 0.0
        assert switch.current() == 0.0
        assert switch.power() == 0.0

    def test_toggling_marks_network_dirty(self):
        network = ElectricalNetwork()
        a, b = FreeNode(), FreeNode()
        network.add_nodes([a, b])
        switch = SwitchedWire(1.0, a, b)
        network.add_wire(switch)
        network.clear_dirty()

        switch.set_state(True)
        assert not network.is_dirty()

        switch.set_state(False)
        assert not switch.closed
        assert network.is_dirty()


class TestUnits:

    @pytest.mark.parametrize("value, unit, expected", [
        ("10 ohm", "ohm", 10.0),
        ("1 kohm", "ohm", 1000.0),
        ("2.5 kV", "V", 2500.0),
        ("100 mA", "A", 0.1),
        ("7", "ohm", 7.0),
        (3, "V", 3.0),
    ])
    def test_to_magnitude(self, value, unit, expected):
        assert math.isclose(to_magnitude(value, unit), expected)

    def test_dimension_mismatch(self):
        with pytest.raises(pint.DimensionalityError):
            to_magnitude("5 V", "ohm")
