"""Protocols for exchanging units with collaborators outside this package."""

from __future__ import annotations

from array import array
from typing import Any, Protocol, Sequence, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class SupportsWideUnits(Protocol):
    """Anything that can lend its code units, such as a nul-aware string."""

    @property
    def unit_bits(self) -> int:
        ...

    def as_units(self) -> Sequence[int]:
        ...


class NulAwareFactory(Protocol[T_co]):
    """Builds the nul-terminated sibling type from units moved out of a buffer.

    ``from_units`` validates that no interior nul unit exists;
    ``from_units_truncate`` cuts the units at the first nul instead.
    """

    def from_units(self, units: array) -> T_co:
        ...

    def from_units_truncate(self, units: array) -> T_co:
        ...


def units_of(value: Any, bits: int) -> Sequence[int]:
    """Return the units of a same-width wide value or raise ``TypeError``."""

    if not isinstance(value, SupportsWideUnits):
        raise TypeError(f"{type(value).__name__} does not provide wide code units")
    if value.unit_bits != bits:
        raise TypeError(
            f"cannot mix {value.unit_bits}-bit units into a {bits}-bit sequence"
        )
    return value.as_units()


def is_wide_like(value: Any, bits: int) -> bool:
    return isinstance(value, SupportsWideUnits) and value.unit_bits == bits


__all__ = ["NulAwareFactory", "SupportsWideUnits", "is_wide_like", "units_of"]
