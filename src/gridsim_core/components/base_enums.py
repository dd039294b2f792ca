# src/gridsim_core/components/base_enums.py
from enum import Enum, auto


class NodeKind(Enum):
    """
    The closed set of node variants. Network assembly branches on this tag to
    decide how a node's row of the nodal system is built.
    """
    FREE = auto()            # Ordinary unknown potential.
    SOURCE = auto()          # Fixed potential, folded in as a Dirichlet row.
    CURRENT_SOURCE = auto()  # Unknown potential with a fixed injected current.
    COUPLING = auto()        # Virtual node enforcing an ideal-transformer relation.
