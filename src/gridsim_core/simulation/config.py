# src/gridsim_core/simulation/config.py
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

import cerberus
import yaml

from ..constants import (
    DEFAULT_TOLERANCE,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_NORM_ORDER,
    DEFAULT_SETTLE_PASSES,
)

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during solver configuration parsing."""
    pass


@dataclass(frozen=True)
class SolverConfig:
    """Numerical settings shared by every network of a simulation space."""
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    settle_passes: int = DEFAULT_SETTLE_PASSES
    random_shadow: bool = True
    seed: Optional[int] = None
    norm_order: int = DEFAULT_NORM_ORDER

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SOLVER_CONFIG_SCHEMA = {
    'tolerance': {'type': 'float', 'coerce': float, 'min': 0.0},
    'max_iterations': {'type': 'integer', 'min': 1},
    'settle_passes': {'type': 'integer', 'min': 0},
    'random_shadow': {'type': 'boolean'},
    'seed': {'type': 'integer', 'nullable': True, 'min': 0},
    'norm_order': {'type': 'integer', 'allowed': [1, 2]},
}


def parse_solver_config(raw_config: Optional[Dict[str, Any]]) -> SolverConfig:
    """
    Validates a raw configuration mapping and builds a `SolverConfig`.
    Missing keys take their defaults; unknown keys are rejected.
    """
    if raw_config is None:
        return SolverConfig()
    if not isinstance(raw_config, dict):
        raise ConfigParsingError(f"Solver configuration must be a mapping, got {type(raw_config).__name__}.")

    validator = cerberus.Validator(SOLVER_CONFIG_SCHEMA)
    validator.allow_unknown = False
    if not validator.validate(raw_config):
        raise ConfigParsingError(f"Invalid solver configuration: {validator.errors}")

    document = validator.document
    if 'tolerance' in document and document['tolerance'] == 0.0:
        raise ConfigParsingError("Invalid solver configuration: tolerance must be strictly positive.")
    config = SolverConfig(**document)
    logger.debug(f"Parsed solver configuration: {config}")
    return config


def load_solver_config(path: Union[str, Path]) -> SolverConfig:
    """
    Reads a solver configuration from a YAML file. The settings may sit at the
    top level or under a `solver:` key.
    """
    config_path = Path(path)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            content = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigParsingError(f"Solver configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Invalid YAML in solver configuration '{config_path}': {e}") from e

    if isinstance(content, dict) and 'solver' in content:
        content = content['solver']
    logger.info(f"Loading solver configuration from '{config_path}'.")
    return parse_solver_config(content)
