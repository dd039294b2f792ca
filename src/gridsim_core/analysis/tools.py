# src/gridsim_core/analysis/tools.py
"""
Post-solve diagnostics for electrical networks. Everything here reads the
values written back into nodes by the last `calculate()`; nothing is re-solved.
"""
import logging
from typing import Dict

import numpy as np

from ..components.base_enums import NodeKind
from ..components.nodes import ElectricNode
from ..components.wires import Wire
from ..simulation.network import ElectricalNetwork
from .results import NetworkReport

logger = logging.getLogger(__name__)

_UNKNOWN_POTENTIAL_KINDS = (NodeKind.FREE, NodeKind.CURRENT_SOURCE)


def wire_currents(network: ElectricalNetwork) -> Dict[Wire, float]:
    return {wire: wire.current() for wire in network.wires}


def dissipated_power(network: ElectricalNetwork) -> float:
    return float(sum(wire.power() for wire in network.wires))


def current_imbalance(network: ElectricalNetwork) -> Dict[ElectricNode, float]:
    """
    Net current leaving each free or current-source node, minus its injected
    current. A converged solve keeps every entry near zero.

    The unreduced nodal rows are rebuilt from the wires and couplings, then
    applied to the solved potentials and coupling currents.
    """
    n = network.size
    nodes = network.nodes
    A = np.zeros((n, n))
    for wire in network.wires:
        g = wire.conductance()
        i = wire.node_a.index
        A[i, i] += g
        if wire.node_b is not None:
            j = wire.node_b.index
            A[j, j] += g
            A[i, j] -= g
            A[j, i] -= g
    for node in nodes:
        if node.kind is NodeKind.COUPLING:
            node.couple(A, node.index)

    x = np.array([node.current if node.kind is NodeKind.COUPLING else node.potential for node in nodes], dtype=float)
    flows = A @ x if n else np.zeros(0)

    imbalance: Dict[ElectricNode, float] = {}
    for node in nodes:
        if node.kind not in _UNKNOWN_POTENTIAL_KINDS:
            continue
        injected = node.current if node.kind is NodeKind.CURRENT_SOURCE else 0.0
        imbalance[node] = float(flows[node.index] - injected)
    return imbalance


class NetworkAnalyzer:
    """Builds a `NetworkReport` for a network that has been calculated."""

    def __init__(self, network: ElectricalNetwork):
        if not isinstance(network, ElectricalNetwork):
            raise TypeError("NetworkAnalyzer requires an ElectricalNetwork.")
        self.network = network

    def analyze(self) -> NetworkReport:
        if self.network.last_result is None:
            logger.warning(f"Analyzing {self.network!r} before its first calculation; values are initial values.")
        imbalance = current_imbalance(self.network)
        report = NetworkReport(
            node_potentials={
                node: node.potential for node in self.network.nodes if node.kind is not NodeKind.COUPLING
            },
            wire_currents=wire_currents(self.network),
            current_imbalance=imbalance,
            dissipated_power=dissipated_power(self.network),
        )
        logger.debug(f"Analyzed {self.network!r}: max current imbalance {report.max_imbalance:.3e} A.")
        return report
