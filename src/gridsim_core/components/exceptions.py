# src/gridsim_core/components/exceptions.py
"""
Defines the custom, diagnosable exceptions for the node model.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class CouplingDefinitionError(DiagnosableError):
    """
    Raised when a coupling node is declared with an unsupported number of
    terminals, an unusable ratio, or a terminal that is not an electric node.
    """
    element: str
    details: str

    def __str__(self):
        return f"Invalid coupling '{self.element}': {self.details}"

    def get_diagnostic_report(self) -> str:
        """Generates the diagnostic report for a malformed coupling declaration."""
        return format_diagnostic_report(
            error_type="Invalid Coupling Definition",
            details=self.details,
            suggestion="A coupling takes 2 (1 primary, 1 secondary), 3 (1 primary, 2 secondaries) or 4 (2 primaries, 2 secondaries) electric terminals and a finite, non-zero ratio.",
            context={'element': self.element}
        )


@dataclass()
class InvalidResistanceError(DiagnosableError):
    """
    Raised when a wire is declared with a resistance that has no finite, positive
    conductance (zero, negative, NaN or infinite).
    """
    element: str
    resistance: float

    def __str__(self):
        return f"Invalid resistance for '{self.element}': {self.resistance}"

    def get_diagnostic_report(self) -> str:
        """Generates the diagnostic report for an invalid wire resistance."""
        return format_diagnostic_report(
            error_type="Invalid Resistance",
            details=f"Wire resistance must be finite and strictly positive, got {self.resistance}.",
            suggestion="Model an ideal short as a small positive resistance and an open circuit as an open SwitchedWire or by removing the wire.",
            context={'element': self.element, 'user_input': str(self.resistance)}
        )
