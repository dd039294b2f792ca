# src/gridsim_core/simulation/exceptions.py
"""
Defines the custom, diagnosable exceptions for the simulation layer.
"""
from dataclasses import dataclass, field
from typing import Any, List

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class UnknownSimulationSpaceError(DiagnosableError):
    """Raised when a registry is requested for a simulation space that was never loaded."""
    space_id: Any
    loaded_spaces: List[Any] = field(default_factory=list)

    def __str__(self):
        return f"Simulation space '{self.space_id}' is not loaded."

    def get_diagnostic_report(self) -> str:
        loaded = ", ".join(repr(s) for s in self.loaded_spaces) or "(none)"
        return format_diagnostic_report(
            error_type="Unknown Simulation Space",
            details=f"No network registry exists for this space.\nLoaded spaces: {loaded}",
            suggestion="Call SimulationSpaces.load(space_id) before connecting wires in a space.",
            context={'space': repr(self.space_id)}
        )
