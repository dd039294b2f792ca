# src/gridsim_core/analysis/results.py
"""
Defines the formal, immutable result contracts for post-solve analysis.
"""
from dataclasses import dataclass
from typing import Dict

from ..components.nodes import ElectricNode
from ..components.wires import Wire


@dataclass(frozen=True)
class NetworkReport:
    """A snapshot of a solved network, taken after `calculate()`."""
    #: Potential of every electric node, in volts.
    node_potentials: Dict[ElectricNode, float]
    #: Current through every wire from `node_a` towards `node_b`, in amperes.
    wire_currents: Dict[Wire, float]
    #: Kirchhoff current-law residual of every unknown-potential node, in amperes.
    current_imbalance: Dict[ElectricNode, float]
    #: Total power dissipated in the wires, in watts.
    dissipated_power: float

    @property
    def max_imbalance(self) -> float:
        return max((abs(v) for v in self.current_imbalance.values()), default=0.0)
