# src/gridsim_core/simulation/spaces.py
import logging
from typing import Any, Dict, Optional

from ..errors import FrameworkLogicError
from .config import SolverConfig
from .exceptions import UnknownSimulationSpaceError
from .registry import NetworkRegistry

logger = logging.getLogger(__name__)


class SimulationSpaces:
    """
    Arena of network registries keyed by simulation space. Spaces are loaded
    and unloaded explicitly; nothing is created on first access.
    """
    def __init__(self, default_config: Optional[SolverConfig] = None):
        self.default_config: SolverConfig = default_config or SolverConfig()
        self._registries: Dict[Any, NetworkRegistry] = {}

    def load(self, space_id: Any, config: Optional[SolverConfig] = None) -> NetworkRegistry:
        if space_id in self._registries:
            raise FrameworkLogicError(f"Simulation space '{space_id}' is already loaded.")
        registry = NetworkRegistry(space_id, config or self.default_config)
        self._registries[space_id] = registry
        logger.info(f"Loaded simulation space '{space_id}'.")
        return registry

    def get(self, space_id: Any) -> NetworkRegistry:
        try:
            return self._registries[space_id]
        except KeyError:
            raise UnknownSimulationSpaceError(space_id, list(self._registries)) from None

    def tick(self, space_id: Any):
        """Runs one step of a space. Ticking a space that is not loaded does nothing."""
        registry = self._registries.get(space_id)
        if registry is None:
            return
        registry.tick()

    def tick_all(self):
        for registry in self._registries.values():
            registry.tick()

    def unload(self, space_id: Any):
        registry = self._registries.pop(space_id, None)
        if registry is None:
            return
        registry.teardown()
        logger.info(f"Unloaded simulation space '{space_id}'.")

    def unload_all(self):
        for space_id in list(self._registries):
            self.unload(space_id)

    def __contains__(self, space_id: Any) -> bool:
        return space_id in self._registries

    def __len__(self) -> int:
        return len(self._registries)
