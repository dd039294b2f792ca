# tests/test_transformer.py
import numpy as np
import pytest

from gridsim_core import CouplingNode, FreeNode
from gridsim_core.components import CouplingDefinitionError
from gridsim_core.analysis import current_imbalance


class TestCouplingStamp:

    def test_one_to_one_overwrites_its_entries(self):
        primary, secondary = FreeNode(), FreeNode()
        primary.set_index(0)
        secondary.set_index(1)
        coupling = CouplingNode.create(2.0, primary, secondary, resistance=3.0)
        matrix = np.ones((3, 3))

        coupling.couple(matrix, 2)

        assert matrix[2, 2] == 3.0
        assert matrix[2, 0] == 2.0 and matrix[0, 2] == -2.0
        assert matrix[2, 1] == -1.0 and matrix[1, 2] == 1.0
        # Entries outside the coupling row and column are untouched.
        assert matrix[0, 0] == 1.0 and matrix[0, 1] == 1.0 and matrix[1, 1] == 1.0

    def test_two_to_two_alternates_signs(self):
        nodes = [FreeNode() for _ in range(4)]
        for i, node in enumerate(nodes):
            node.set_index(i)
        coupling = CouplingNode.create(0.5, *nodes)
        matrix = np.zeros((5, 5))

        coupling.couple(matrix, 4)

        np.testing.assert_array_equal(matrix[4, :4], [0.5, -0.5, -1.0, 1.0])
        np.testing.assert_array_equal(matrix[:4, 4], [-0.5, 0.5, 1.0, -1.0])
        assert matrix[4, 4] == 0.0

    @pytest.mark.parametrize("count, split", [(2, (1, 1)), (3, (1, 2)), (4, (2, 2))])
    def test_terminal_split_by_arity(self, count, split):
        terminals = [FreeNode() for _ in range(count)]
        coupling = CouplingNode.create(1.0, *terminals)
        assert (len(coupling.primaries), len(coupling.secondaries)) == split
        assert coupling.terminals == tuple(terminals)

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_unsupported_arity(self, count):
        with pytest.raises(CouplingDefinitionError) as excinfo:
            CouplingNode.create(1.0, *[FreeNode() for _ in range(count)])
        assert "Actionable Diagnostic Report" in excinfo.value.get_diagnostic_report()

    @pytest.mark.parametrize("ratio", [0.0, float('nan'), float('inf')])
    def test_unusable_ratio(self, ratio):
        with pytest.raises(CouplingDefinitionError):
            CouplingNode.create(ratio, FreeNode(), FreeNode())

    def test_terminals_must_be_electric_nodes(self):
        other = CouplingNode.create(1.0, FreeNode(), FreeNode())
        with pytest.raises(CouplingDefinitionError):
            CouplingNode.create(1.0, FreeNode(), other)

    def test_non_finite_resistance_is_rejected(self):
        coupling = CouplingNode.create(1.0, FreeNode(), FreeNode())
        with pytest.raises(CouplingDefinitionError):
            coupling.set_resistance(float('nan'))


class TestTransformerCircuits:

    def test_step_up(self, harness):
        primary = harness.source(5.0)
        secondary = harness.free()
        harness.wire(10.0, secondary)
        coupling = harness.transformer(2.0, primary, secondary)

        harness.solve()

        assert secondary.potential == pytest.approx(10.0, abs=1e-4)
        assert coupling.current == pytest.approx(-1.0, abs=1e-4)
        assert primary.current == pytest.approx(2.0, abs=1e-4)

    def test_series_resistance_drops_voltage(self, harness):
        primary = harness.source(5.0)
        secondary = harness.free()
        harness.wire(10.0, secondary)
        harness.transformer(2.0, primary, secondary, resistance=10.0)

        harness.solve()

        assert 2.0 * primary.potential - secondary.potential == pytest.approx(5.0, abs=1e-4)
        assert primary.current == pytest.approx(1.0, abs=1e-4)

    def test_split_secondary(self, harness):
        primary = harness.source(10.0)
        upper, lower = harness.free(), harness.free()
        harness.wire(10.0, upper)
        harness.wire(10.0, lower)
        harness.transformer(1.0, primary, upper, lower)

        harness.solve()

        assert upper.potential - lower.potential == pytest.approx(10.0, abs=1e-4)
        assert upper.potential == pytest.approx(5.0, abs=1e-4)
        assert lower.potential == pytest.approx(-5.0, abs=1e-4)

    def test_four_terminal_isolation(self, harness):
        live, neutral = harness.source(10.0), harness.source(0.0)
        out_a, out_b = harness.free(), harness.free()
        harness.wire(10.0, out_a, out_b)
        harness.wire(10.0, out_b)
        harness.transformer(1.0, live, neutral, out_a, out_b)

        result = harness.solve()

        assert result.converged
        assert out_a.potential - out_b.potential == pytest.approx(10.0, abs=1e-4)
        assert out_b.potential == pytest.approx(0.0, abs=1e-4)
        assert live.current == pytest.approx(1.0, abs=1e-4)
        assert neutral.current == pytest.approx(-1.0, abs=1e-4)

    def test_secondary_currents_balance(self, harness):
        primary = harness.source(5.0)
        secondary = harness.free()
        harness.wire(10.0, secondary)
        harness.transformer(2.0, primary, secondary)
        harness.solve()

        imbalance = current_imbalance(harness.network)

        assert imbalance[secondary] == pytest.approx(0.0, abs=1e-4)

    def test_series_resistance_can_change_between_steps(self, harness):
        primary = harness.source(5.0)
        secondary = harness.free()
        harness.wire(10.0, secondary)
        coupling = harness.transformer(2.0, primary, secondary)
        harness.solve()

        coupling.set_resistance(10.0)
        harness.solve()

        assert secondary.potential == pytest.approx(5.0, abs=1e-4)
