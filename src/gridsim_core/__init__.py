# src/gridsim_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("GridSim Core package initialized.")

from .units import ureg, pint, Quantity, to_magnitude
from .components import (
    NodeKind, Node, ElectricNode, FreeNode, SourceNode, CurrentSourceNode, CouplingNode,
    Wire, SwitchedWire,
)
from .simulation import (
    BiCGSTABSolver, SolveResult, SolverConfig, parse_solver_config, load_solver_config,
    ElectricalNetwork, ConnectionGraph, WireEndpoint, NodeEndpoint, NetworkRegistry, SimulationSpaces,
)
from .circuit_builder import CircuitBuilder, DeviceCircuit, TerminalEndpoint
from .analysis import NetworkAnalyzer, NetworkReport
from .errors import GridSimError, CircuitBuildError, FrameworkLogicError

__all__ = [
    # Units
    "ureg", "pint", "Quantity", "to_magnitude",
    # Node model
    "NodeKind", "Node", "ElectricNode", "FreeNode", "SourceNode", "CurrentSourceNode", "CouplingNode",
    "Wire", "SwitchedWire",
    # Simulation
    "BiCGSTABSolver", "SolveResult", "SolverConfig", "parse_solver_config", "load_solver_config",
    "ElectricalNetwork", "ConnectionGraph", "WireEndpoint", "NodeEndpoint", "NetworkRegistry", "SimulationSpaces",
    # Builder
    "CircuitBuilder", "DeviceCircuit", "TerminalEndpoint",
    # Analysis
    "NetworkAnalyzer", "NetworkReport",
    # Top-Level Errors (Actionable Diagnostics)
    "GridSimError", "CircuitBuildError", "FrameworkLogicError",
]
