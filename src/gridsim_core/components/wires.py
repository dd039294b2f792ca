# src/gridsim_core/components/wires.py
"""
Resistive wires: the edges of an electrical network.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple, TYPE_CHECKING

from .nodes import ElectricNode
from .exceptions import InvalidResistanceError

if TYPE_CHECKING:
    from ..simulation.network import ElectricalNetwork

logger = logging.getLogger(__name__)


def _validate_resistance(element: str, resistance: float) -> float:
    resistance = float(resistance)
    if not math.isfinite(resistance) or resistance <= 0:
        raise InvalidResistanceError(element=element, resistance=resistance)
    return resistance


class Wire:
    """
    A conductance between two electric nodes, or between one node and the
    implicit zero-potential reference when `node_b` is None.

    Endpoints and resistance are fixed at construction. Parallel wires between
    the same pair of nodes are valid and simply add their conductances.
    """
    def __init__(self, resistance: float, node_a: Optional[ElectricNode], node_b: Optional[ElectricNode] = None):
        if node_a is None:
            node_a, node_b = node_b, node_a
        if node_a is None:
            raise ValueError("A wire needs at least one node endpoint.")
        self._resistance: float = _validate_resistance(type(self).__name__, resistance)
        self.node_a: ElectricNode = node_a
        self.node_b: Optional[ElectricNode] = node_b
        self.network: Optional[ElectricalNetwork] = None

    @property
    def resistance(self) -> float:
        return self._resistance

    @property
    def nodes(self) -> Tuple[ElectricNode, ...]:
        """The endpoints that are real nodes (one for a grounded wire, two otherwise)."""
        if self.node_b is None:
            return (self.node_a,)
        return (self.node_a, self.node_b)

    def is_grounded(self) -> bool:
        return self.node_b is None

    def touches(self, node: ElectricNode) -> bool:
        return node is self.node_a or node is self.node_b

    def conductance(self) -> float:
        return 1.0 / self._resistance

    def potential_difference(self) -> float:
        """Potential of `node_a` minus potential of `node_b` (or the reference)."""
        if self.node_b is None:
            return self.node_a.potential
        return self.node_a.potential - self.node_b.potential

    def current(self) -> float:
        """Current flowing from `node_a` towards `node_b`."""
        return self.potential_difference() * self.conductance()

    def power(self) -> float:
        current = self.current()
        return current * current * self._resistance

    def remove(self):
        """Removes the wire from its owning network, if any."""
        if self.network is not None:
            self.network.remove_wire(self)

    def __repr__(self):
        return f"{type(self).__name__}(R={self._resistance}, {self.node_a!r} -> {self.node_b!r})"


class SwitchedWire(Wire):
    """
    A wire that can be opened and closed between steps. An open switch keeps its
    place in the network but carries no conductance and no current.
    """
    def __init__(self, resistance: float, node_a: Optional[ElectricNode], node_b: Optional[ElectricNode] = None, closed: bool = True):
        super().__init__(resistance, node_a, node_b)
        self._closed: bool = closed

    @property
    def closed(self) -> bool:
        return self._closed

    def set_state(self, closed: bool):
        if self._closed == closed:
            return
        self._closed = closed
        logger.debug(f"{self!r} switched {'closed' if closed else 'open'}.")
        if self.network is not None:
            self.network.mark_dirty()

    def conductance(self) -> float:
        return super().conductance() if self._closed else 0.0
