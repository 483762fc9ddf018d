"""Growable code-unit storage with explicit capacity and generation tracking."""

from __future__ import annotations

from array import array
from typing import Iterable, Optional, Sequence

from widebuf.errors import BufferConsumedError, RepresentationError
from widebuf.runtime import telemetry

MIN_NON_ZERO_CAPACITY = 4

_CANDIDATE_TYPECODES = "HILQ"


def typecode_for(bits: int) -> str:
    """Return the unsigned ``array`` typecode whose items are exactly ``bits`` wide."""

    size = bits // 8
    for code in _CANDIDATE_TYPECODES:
        if array(code).itemsize == size:
            return code
    raise RepresentationError(f"no unsigned array type holds exactly {bits} bits")


TYPECODES = {16: typecode_for(16), 32: typecode_for(32)}


def unit_array(typecode: str, units: Iterable[int]) -> array:
    """Copy ``units`` into a fresh array, reading every item as one unit value.

    ``bytes`` and ``bytearray`` are iterated as integers rather than handed to
    ``array`` as raw machine bytes.
    """

    if isinstance(units, array) and units.typecode == typecode:
        return array(typecode, units)
    result = array(typecode)
    result.fromlist(list(units))
    return result


def grown_capacity(capacity: int, required: int) -> int:
    """Amortized growth target: at least double, never below the minimum."""

    return max(capacity * 2, required, MIN_NON_ZERO_CAPACITY)


class UnitStorage:
    """Owns an ``array.array`` of code units plus its logical capacity.

    ``array`` does not expose its allocation, so capacity is tracked here and
    follows the same rules as a growable vector: it only grows (amortized on
    implicit growth, exact through ``reserve_exact``) until ``shrink_to_fit``.

    ``generation`` changes whenever the length or capacity changes, or when the
    units are moved out. Views remember the generation they were created at and
    refuse to read once it moved.
    """

    __slots__ = ("bits", "typecode", "_units", "_capacity", "_generation")

    def __init__(
        self, bits: int, units: Iterable[int] = (), *, capacity: int = 0
    ) -> None:
        self.bits = bits
        self.typecode = TYPECODES[bits]
        self._units: Optional[array] = unit_array(self.typecode, units)
        self._capacity = max(capacity, len(self._units))
        self._generation = 0

    @classmethod
    def adopt(cls, bits: int, units: array) -> "UnitStorage":
        """Wrap an existing array without copying it."""

        storage = cls(bits)
        if units.typecode != storage.typecode:
            raise TypeError(
                f"expected array typecode '{storage.typecode}', got '{units.typecode}'"
            )
        storage._units = units
        storage._capacity = len(units)
        return storage

    @property
    def units(self) -> array:
        self._check_live()
        return self._units  # type: ignore[return-value]

    @property
    def released(self) -> bool:
        return self._units is None

    @property
    def capacity(self) -> int:
        self._check_live()
        return self._capacity

    @property
    def generation(self) -> int:
        return self._generation

    def _check_live(self) -> None:
        if self._units is None:
            raise BufferConsumedError("buffer storage has been moved out")

    def __len__(self) -> int:
        return len(self.units)

    def _touch(self) -> None:
        self._generation += 1

    def _grow_to(self, capacity: int, *, reason: str) -> None:
        telemetry.record_event(
            "storage::grow",
            level="debug",
            data={
                "bits": self.bits,
                "from": self._capacity,
                "to": capacity,
                "reason": reason,
            },
        )
        self._capacity = capacity

    def _ensure_additional(self, additional: int) -> None:
        required = len(self.units) + additional
        if required > self._capacity:
            self._grow_to(grown_capacity(self._capacity, required), reason="push")

    def reserve(self, additional: int) -> None:
        required = len(self.units) + additional
        if required <= self._capacity:
            return
        self._grow_to(grown_capacity(self._capacity, required), reason="reserve")
        self._touch()

    def reserve_exact(self, additional: int) -> None:
        required = len(self.units) + additional
        if required <= self._capacity:
            return
        self._grow_to(required, reason="reserve_exact")
        self._touch()

    def shrink_to_fit(self) -> None:
        length = len(self.units)
        if self._capacity != length:
            self._capacity = length
            self._touch()

    def extend(self, units: Iterable[int]) -> None:
        incoming = unit_array(self.typecode, units)
        if not incoming:
            return
        self._ensure_additional(len(incoming))
        self.units.extend(incoming)
        self._touch()

    def extend_bytes(self, data: bytes) -> None:
        """Append native-order unit bytes as produced by a codec."""

        incoming = array(self.typecode)
        incoming.frombytes(data)
        if not incoming:
            return
        self._ensure_additional(len(incoming))
        self.units.extend(incoming)
        self._touch()

    def splice(self, index: int, units: Sequence[int]) -> None:
        incoming = unit_array(self.typecode, units)
        if not incoming:
            return
        self._ensure_additional(len(incoming))
        self.units[index:index] = incoming
        self._touch()

    def delete(self, start: int, stop: int) -> None:
        if start >= stop:
            return
        del self.units[start:stop]
        self._touch()

    def truncate(self, length: int) -> None:
        if length < len(self.units):
            del self.units[length:]
            self._touch()

    def split_off(self, at: int) -> array:
        tail = self.units[at:]
        del self.units[at:]
        self._touch()
        return tail

    def assign(self, index: int, value: int) -> None:
        self.units[index] = value

    def assign_range(self, start: int, units: Sequence[int]) -> None:
        incoming = unit_array(self.typecode, units)
        self.units[start : start + len(incoming)] = incoming

    def release(self) -> array:
        """Move the units out; the storage is unusable afterwards."""

        units = self.units
        self._units = None
        self._capacity = 0
        self._touch()
        return units

    def to_bytes(self, start: int = 0, stop: Optional[int] = None) -> bytes:
        units = self.units
        if start == 0 and (stop is None or stop == len(units)):
            return units.tobytes()
        return units[start:stop].tobytes()


__all__ = [
    "MIN_NON_ZERO_CAPACITY",
    "TYPECODES",
    "UnitStorage",
    "grown_capacity",
    "typecode_for",
    "unit_array",
]
