# src/gridsim_core/simulation/__init__.py
from .solver import BiCGSTABSolver, SolveResult
from .config import SolverConfig, ConfigParsingError, parse_solver_config, load_solver_config
from .network import ElectricalNetwork
from .graph import ConnectionGraph
from .endpoints import WireEndpoint, NodeEndpoint
from .registry import NetworkRegistry
from .spaces import SimulationSpaces
from .exceptions import UnknownSimulationSpaceError

__all__ = [
    "BiCGSTABSolver",
    "SolveResult",
    "SolverConfig",
    "ConfigParsingError",
    "parse_solver_config",
    "load_solver_config",
    "ElectricalNetwork",
    "ConnectionGraph",
    "WireEndpoint",
    "NodeEndpoint",
    "NetworkRegistry",
    "SimulationSpaces",
    "UnknownSimulationSpaceError",
]
