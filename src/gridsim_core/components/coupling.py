# src/gridsim_core/components/coupling.py
"""
Coupling nodes: virtual nodes that replace an Ohmic row with the linear relation
of an ideal transformer between a primary and a secondary group of terminals.

For a coupling at row `c` with ratio `r`, primary terminals `p_i` and secondary
terminals `s_j`, the written system is

    row c:    sum_i(+-r * V[p_i]) - sum_j(+-1 * V[s_j]) + R_series * I_c = 0
    row p_i:  ... -+r * I_c ...
    row s_j:  ... +-1 * I_c ...

where the sign alternates between the first and second terminal of a group and
`I_c`, the solved unknown of the coupling row, is the current through the coupling.
"""
import logging
import math
from typing import Dict, Iterator, Sequence, Tuple

import numpy as np

from .nodes import ElectricNode, Node
from .base_enums import NodeKind
from .exceptions import CouplingDefinitionError

logger = logging.getLogger(__name__)

#: Number of terminals -> (number of primaries, number of secondaries).
TERMINAL_SPLITS: Dict[int, Tuple[int, int]] = {
    2: (1, 1),
    3: (1, 2),
    4: (2, 2),
}


def _alternating_signs() -> Iterator[float]:
    sign = 1.0
    while True:
        yield sign
        sign = -sign


class CouplingNode(Node):
    """
    An ideal-transformer coupling between 1-2 primary and 1-2 secondary terminals.

    The coupling owns its own row unconditionally: `couple` overwrites any wire
    contribution at its row and at the terminal/coupling cross entries.
    """
    kind = NodeKind.COUPLING

    def __init__(
        self,
        ratio: float,
        primaries: Sequence[ElectricNode],
        secondaries: Sequence[ElectricNode],
        resistance: float = 0.0,
    ):
        super().__init__()
        if not (1 <= len(primaries) <= 2 and 1 <= len(secondaries) <= 2):
            raise CouplingDefinitionError(
                element=type(self).__name__,
                details=f"Expected 1-2 primary and 1-2 secondary terminals, got {len(primaries)} and {len(secondaries)}."
            )
        for terminal in (*primaries, *secondaries):
            if not isinstance(terminal, ElectricNode):
                raise CouplingDefinitionError(
                    element=type(self).__name__,
                    details=f"Terminal {terminal!r} is not an electric node."
                )
        self._check_value("ratio", ratio, allow_zero=False)
        self._check_value("resistance", resistance, allow_zero=True)

        self.ratio: float = float(ratio)
        self.resistance: float = float(resistance)
        self.primaries: Tuple[ElectricNode, ...] = tuple(primaries)
        self.secondaries: Tuple[ElectricNode, ...] = tuple(secondaries)
        self._current: float = 0.0

    @classmethod
    def create(cls, ratio: float, *terminals: ElectricNode, resistance: float = 0.0) -> "CouplingNode":
        """
        Creates a coupling from a flat terminal list, split by arity:
        (primary, secondary), (primary, secondary1, secondary2) or
        (primary1, primary2, secondary1, secondary2).
        """
        split = TERMINAL_SPLITS.get(len(terminals))
        if split is None:
            raise CouplingDefinitionError(
                element=cls.__name__,
                details=f"A coupling takes 2, 3 or 4 terminals, got {len(terminals)}."
            )
        n_primary, _ = split
        return cls(ratio, terminals[:n_primary], terminals[n_primary:], resistance=resistance)

    def _check_value(self, name: str, value: float, allow_zero: bool):
        if not math.isfinite(value) or (not allow_zero and value == 0):
            raise CouplingDefinitionError(
                element=type(self).__name__,
                details=f"Coupling {name} must be finite{'' if allow_zero else ' and non-zero'}, got {value}."
            )

    @property
    def terminals(self) -> Tuple[ElectricNode, ...]:
        return self.primaries + self.secondaries

    @property
    def current(self) -> float:
        """The current through the coupling, as solved on the last calculation."""
        return self._current

    def set_resistance(self, resistance: float):
        self._check_value("resistance", resistance, allow_zero=True)
        self.resistance = float(resistance)

    def couple(self, matrix: np.ndarray, own_row: int):
        """Writes the coupling relation into `matrix`, overwriting prior entries."""
        matrix[own_row, own_row] = self.resistance
        for sign, primary in zip(_alternating_signs(), self.primaries):
            matrix[own_row, primary.index] = sign * self.ratio
            matrix[primary.index, own_row] = -sign * self.ratio
        for sign, secondary in zip(_alternating_signs(), self.secondaries):
            matrix[own_row, secondary.index] = -sign
            matrix[secondary.index, own_row] = sign

    def receive_result(self, value: float):
        self._current = value

    def __repr__(self):
        return (
            f"CouplingNode(index={self._index}, ratio={self.ratio}, "
            f"arity={len(self.primaries)}P{len(self.secondaries)}S)"
        )
