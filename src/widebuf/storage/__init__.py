"""Code-unit storage primitives and raw memory ingestion."""

from .raw import address_of, read_units
from .units import (
    MIN_NON_ZERO_CAPACITY,
    TYPECODES,
    UnitStorage,
    grown_capacity,
    unit_array,
)

__all__ = [
    "MIN_NON_ZERO_CAPACITY",
    "TYPECODES",
    "UnitStorage",
    "address_of",
    "grown_capacity",
    "read_units",
    "unit_array",
]
