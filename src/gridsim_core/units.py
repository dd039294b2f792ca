# --- src/gridsim_core/units.py ---
import logging
from typing import Union

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")

QuantityLike = Union[float, int, str, Quantity]


def to_magnitude(value: QuantityLike, unit: str) -> float:
    """
    Converts a plain number, a quantity string (e.g. "10 ohm", "2.5 kV") or a
    pint Quantity to a float magnitude in `unit`.

    Plain numbers are taken to already be expressed in `unit`.

    Raises:
        pint.DimensionalityError: If the quantity is not compatible with `unit`.
        pint.UndefinedUnitError: If a string names an unknown unit.
    """
    if isinstance(value, str):
        value = ureg.Quantity(value)
    if isinstance(value, Quantity):
        if value.dimensionless:
            # Bare numbers such as "10" carry no unit of their own.
            return float(value.magnitude)
        return float(value.to(unit).magnitude)
    return float(value)
