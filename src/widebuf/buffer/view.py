"""Read-side behavior shared by buffers, views and boxed strings."""

from __future__ import annotations

from abc import abstractmethod
from array import array
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Iterator, overload

from widebuf.codec import DecodedUnit, UnitCodec
from widebuf.codec.surrogates import REPLACEMENT_CHARACTER
from widebuf.errors import ReadOnlyViewError, StaleViewError
from widebuf.storage import UnitStorage, unit_array

from .interop import is_wide_like, units_of
from .platform import wide_to_os
from .validation import normalize_slice, normalize_subscript

if TYPE_CHECKING:
    from .buffer import WideBuffer


class WideSequence(Sequence):
    """Immutable-ish sequence of code units with decoding helpers.

    Subclasses only describe where their units live (``_span``) and how to
    hand out a sub-window (``_make_view``).
    """

    __slots__ = ()

    codec: UnitCodec

    @abstractmethod
    def _span(self) -> tuple[UnitStorage, int, int]:
        """Return ``(storage, start, stop)`` after checking the sequence is usable."""

    @abstractmethod
    def _make_view(self, start: int, stop: int) -> "WideView":
        ...

    def _units(self) -> array:
        storage, start, stop = self._span()
        units = storage.units
        if start == 0 and stop == len(units):
            return units
        return units[start:stop]

    @property
    def unit_bits(self) -> int:
        return self.codec.bits

    def __len__(self) -> int:
        _, start, stop = self._span()
        return stop - start

    @overload
    def __getitem__(self, key: int) -> int:
        ...

    @overload
    def __getitem__(self, key: slice) -> "WideView":
        ...

    def __getitem__(self, key):
        storage, start, stop = self._span()
        if isinstance(key, slice):
            lo, hi = normalize_slice(key, stop - start)
            return self._make_view(lo, hi)
        return storage.units[start + normalize_subscript(key, stop - start)]

    def __iter__(self) -> Iterator[int]:
        return iter(self._units().tolist())

    def as_units(self) -> array:
        """Return a copy of the units as an ``array.array``."""

        units = self._units()
        return array(units.typecode, units)

    def to_units(self) -> list[int]:
        return self._units().tolist()

    def to_bytes(self) -> bytes:
        """Native-order bytes, ready for a ``wchar_t``-style foreign call."""

        return self._units().tobytes()

    def to_string(self) -> str:
        """Decode strictly; ill-formed content raises ``WideDecodeError``."""

        return self.codec.decode(self.to_bytes())

    def to_string_lossy(self) -> str:
        """Decode, replacing each invalid unit with U+FFFD."""

        return self.codec.decode_lossy(self.to_bytes())

    def to_os_string(self) -> str:
        return wide_to_os(self.codec, self.to_bytes())

    def decoded(self) -> Iterator[DecodedUnit]:
        return self.codec.iter_decode(self._units())

    def chars(self) -> Iterator[str]:
        for decoded in self.decoded():
            yield decoded.char

    def chars_lossy(self) -> Iterator[str]:
        for decoded in self.decoded():
            yield chr(decoded.value) if decoded.valid else REPLACEMENT_CHARACTER

    def to_buffer(self) -> "WideBuffer":
        """Copy the units into a new owned buffer of the same width."""

        from .buffer import buffer_type

        return buffer_type(self.codec.bits).from_units(self._units())

    def _comparable(self, other: Any) -> array | None:
        if isinstance(other, WideSequence):
            if other.codec.bits != self.codec.bits:
                return None
            return other._units()
        if is_wide_like(other, self.codec.bits):
            return unit_array(self._units().typecode, units_of(other, self.codec.bits))
        return None

    def __eq__(self, other: object) -> bool:
        units = self._comparable(other)
        if units is None:
            return NotImplemented
        return self._units() == units

    def __lt__(self, other: object) -> bool:
        units = self._comparable(other)
        if units is None:
            return NotImplemented
        return self._units() < units

    def __le__(self, other: object) -> bool:
        units = self._comparable(other)
        if units is None:
            return NotImplemented
        return self._units() <= units

    def __gt__(self, other: object) -> bool:
        units = self._comparable(other)
        if units is None:
            return NotImplemented
        return self._units() > units

    def __ge__(self, other: object) -> bool:
        units = self._comparable(other)
        if units is None:
            return NotImplemented
        return self._units() >= units

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.codec.debug_repr(self._units())})"


class WideView(WideSequence):
    """Borrowed window ``[start, stop)`` over another sequence's storage.

    The view records the storage generation at creation. Any later change to
    the owner's length or capacity (push, insert, truncate, reserve, a
    consuming conversion...) invalidates it and every access then raises
    ``StaleViewError``. Writes through a mutable view keep the generation.
    """

    __slots__ = (
        "_owner",
        "_storage",
        "_start",
        "_stop",
        "_generation",
        "_writable",
        "codec",
    )

    def __init__(
        self,
        owner: WideSequence,
        storage: UnitStorage,
        codec: UnitCodec,
        start: int,
        stop: int,
        *,
        writable: bool = False,
    ) -> None:
        self._owner = owner
        self._storage = storage
        self.codec = codec
        self._start = start
        self._stop = stop
        self._generation = storage.generation
        self._writable = writable

    @property
    def writable(self) -> bool:
        return self._writable

    @property
    def owner(self) -> WideSequence:
        return self._owner

    def _span(self) -> tuple[UnitStorage, int, int]:
        actual = self._storage.generation
        if actual != self._generation:
            raise StaleViewError(
                "view used after its buffer was resized, reallocated or consumed",
                expected=self._generation,
                actual=actual,
            )
        return self._storage, self._start, self._stop

    def _make_view(self, start: int, stop: int) -> "WideView":
        return WideView(
            self._owner,
            self._storage,
            self.codec,
            self._start + start,
            self._start + stop,
            writable=self._writable,
        )

    def __setitem__(self, key: int | slice, value: Any) -> None:
        if not self._writable:
            raise ReadOnlyViewError("view was borrowed read-only")
        storage, start, stop = self._span()
        assign_units(storage, start, stop, key, value)


def assign_units(
    storage: UnitStorage, start: int, stop: int, key: int | slice, value: Any
) -> None:
    """Overwrite units in place; the length of the window never changes."""

    if isinstance(key, slice):
        lo, hi = normalize_slice(key, stop - start)
        incoming = list(value)
        if len(incoming) != hi - lo:
            raise ValueError(
                f"slice assignment must keep length {hi - lo}, got {len(incoming)}"
            )
        storage.assign_range(start + lo, incoming)
        return
    storage.assign(start + normalize_subscript(key, stop - start), value)


__all__ = ["WideSequence", "WideView"]
