# src/gridsim_core/analysis/__init__.py
"""
Public interface of the post-solve analysis tools.
"""
from .results import NetworkReport
from .tools import NetworkAnalyzer, current_imbalance, wire_currents, dissipated_power

__all__ = [
    "NetworkReport",
    "NetworkAnalyzer",
    "current_imbalance",
    "wire_currents",
    "dissipated_power",
]
