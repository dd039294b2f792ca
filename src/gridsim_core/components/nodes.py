# src/gridsim_core/components/nodes.py
"""
The node variant model. A node is one row/column of its network's nodal system;
its identity is the object itself, and its `index` is owned by the network it
currently belongs to.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Optional, TYPE_CHECKING

from .base_enums import NodeKind

if TYPE_CHECKING:
    from ..simulation.network import ElectricalNetwork

logger = logging.getLogger(__name__)

UNASSIGNED_INDEX = -1


class Node(ABC):
    """
    The abstract base of every node variant.

    Nodes compare and hash by identity. The owning network assigns `index` when
    the node joins, and reassigns it when the node is moved by a merge or a
    removal elsewhere in the network.
    """
    kind: ClassVar[NodeKind]

    def __init__(self):
        self._index: int = UNASSIGNED_INDEX
        self.network: Optional[ElectricalNetwork] = None

    @property
    def index(self) -> int:
        return self._index

    def set_index(self, index: int):
        self._index = index

    @abstractmethod
    def receive_result(self, value: float):
        """Receives this node's entry of the solution vector after a solve."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(index={self._index})"


class ElectricNode(Node):
    """
    A node with a physical potential. Terminals of wires and couplings are
    always electric nodes.
    """
    def __init__(self):
        super().__init__()
        self._potential: float = 0.0

    @property
    def potential(self) -> float:
        return self._potential

    @property
    def current(self) -> float:
        """Current delivered into the network by this node. Zero for passive nodes."""
        return 0.0

    def receive_result(self, value: float):
        self._potential = value


class FreeNode(ElectricNode):
    """An ordinary unknown-potential node."""
    kind = NodeKind.FREE


class SourceNode(ElectricNode):
    """
    A node held at a fixed potential. Its row is replaced by an identity
    constraint during assembly; the current it delivers is reconstructed from
    the row it had before elimination and handed over via `receive_current`.
    """
    kind = NodeKind.SOURCE

    def __init__(self, potential: float = 0.0):
        super().__init__()
        self._potential = float(potential)
        self._current: float = 0.0

    @property
    def current(self) -> float:
        return self._current

    def set_potential(self, potential: float):
        self._potential = float(potential)

    def receive_result(self, value: float):
        # The solved entry reproduces the fixed potential; nothing to store.
        pass

    def receive_current(self, current: float):
        self._current = current

    def __repr__(self):
        return f"SourceNode(index={self._index}, potential={self._potential})"


class CurrentSourceNode(ElectricNode):
    """
    A node with a fixed current injected into it. Its potential is solved for
    like a free node.
    """
    kind = NodeKind.CURRENT_SOURCE

    def __init__(self, current: float = 0.0):
        super().__init__()
        self._injected: float = float(current)

    @property
    def current(self) -> float:
        return self._injected

    def set_current(self, current: float):
        self._injected = float(current)

    def __repr__(self):
        return f"CurrentSourceNode(index={self._index}, current={self._injected})"
