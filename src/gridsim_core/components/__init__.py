# src/gridsim_core/components/__init__.py
from .base_enums import NodeKind
from .nodes import Node, ElectricNode, FreeNode, SourceNode, CurrentSourceNode
from .coupling import CouplingNode, TERMINAL_SPLITS
from .wires import Wire, SwitchedWire
from .exceptions import CouplingDefinitionError, InvalidResistanceError

__all__ = [
    "NodeKind",
    "Node",
    "ElectricNode",
    "FreeNode",
    "SourceNode",
    "CurrentSourceNode",
    "CouplingNode",
    "TERMINAL_SPLITS",
    "Wire",
    "SwitchedWire",
    "CouplingDefinitionError",
    "InvalidResistanceError",
]
