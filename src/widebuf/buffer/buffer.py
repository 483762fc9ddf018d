"""Owned, growable wide-character buffers.

``WideBuffer`` holds everything both widths share: construction, growth,
splicing, splitting and the consuming conversions. The width-specific work
(how many units a character takes, what the last element is) is delegated to
the class-level ``codec`` strategy, so ``U16Buffer`` and ``U32Buffer`` are
thin subclasses.
"""

from __future__ import annotations

from array import array
from typing import Any, ClassVar, Dict, Iterable, Optional, Type, TypeVar

from widebuf.codec import UnitCodec
from widebuf.errors import NullPointerError
from widebuf.runtime import telemetry
from widebuf.storage import (
    TYPECODES,
    UnitStorage,
    address_of,
    read_units,
    unit_array,
)

from .boxed import WideStr
from .interop import NulAwareFactory, is_wide_like, units_of
from .platform import OsText, os_to_wide
from .validation import ensure_count, ensure_element, ensure_position
from .view import WideSequence, WideView, assign_units

B = TypeVar("B", bound="WideBuffer")
T = TypeVar("T")

_BUFFER_TYPES: Dict[int, Type["WideBuffer"]] = {}


def buffer_type(bits: int) -> Type["WideBuffer"]:
    """Return the concrete buffer class for a code-unit width."""

    try:
        return _BUFFER_TYPES[bits]
    except KeyError as exc:
        raise ValueError(f"no buffer type for {bits}-bit code units") from exc


class WideBuffer(WideSequence):
    """Exclusively owned, growable sequence of wide code units.

    No content validation is performed: buffers happily hold embedded nul
    units, unpaired surrogates or values that are not scalar values. Only the
    text entry points (``from_str``, ``push_str``, ``push_char``, ``insert``)
    guarantee well-formed output.

    Index arguments of mutating operations are never clamped and never count
    from the end; an out-of-range value raises ``BufferBoundsError`` before
    anything changes.
    """

    __slots__ = ("_storage",)

    codec: ClassVar[UnitCodec]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        codec = cls.__dict__.get("codec")
        if codec is not None:
            _BUFFER_TYPES[codec.bits] = cls

    def __init__(self, units: Iterable[int] = (), *, capacity: int = 0) -> None:
        if not hasattr(type(self), "codec"):
            raise TypeError("WideBuffer is generic; use U16Buffer or U32Buffer")
        self._storage = UnitStorage(
            self.codec.bits,
            units,
            capacity=ensure_count(capacity, operation="with_capacity"),
        )

    @classmethod
    def _adopt(cls: Type[B], units: array) -> B:
        buffer = cls.__new__(cls)
        buffer._storage = UnitStorage.adopt(cls.codec.bits, units)
        return buffer

    @classmethod
    def _from_bytes(cls: Type[B], data: bytes) -> B:
        units = array(TYPECODES[cls.codec.bits])
        units.frombytes(data)
        return cls._adopt(units)

    @classmethod
    def from_units(cls: Type[B], units: Iterable[int]) -> B:
        """Copy raw code units; the contents are not checked."""

        return cls(units)

    @classmethod
    def with_capacity(cls: Type[B], capacity: int) -> B:
        return cls(capacity=capacity)

    @classmethod
    def from_str(cls: Type[B], text: str) -> B:
        return cls._from_bytes(cls.codec.encode(text))

    @classmethod
    def from_os_str(cls: Type[B], value: OsText) -> B:
        return cls._from_bytes(os_to_wide(cls.codec, value))

    @classmethod
    def from_iterable(cls: Type[B], pieces: Iterable[Any]) -> B:
        buffer = cls()
        buffer.extend(pieces)
        return buffer

    @classmethod
    def from_ptr(cls: Type[B], pointer: Any, length: int) -> B:
        """Copy ``length`` code units (not bytes) starting at ``pointer``.

        A zero ``length`` always yields an empty buffer, even for a null
        pointer. A null pointer with a non-zero length raises
        ``NullPointerError``. Nothing can check that the memory is readable:
        the caller guarantees ``pointer`` is valid for ``length`` units.
        """

        length = ensure_count(length, operation="from_ptr")
        if length == 0:
            return cls()
        address = address_of(pointer)
        if address == 0:
            telemetry.record_event(
                "buffer::null_pointer",
                level="error",
                data={"bits": cls.codec.bits, "length": length},
            )
            raise NullPointerError(
                f"null pointer with non-zero length {length}", length=length
            )
        with telemetry.operation_span("from_ptr", owner=cls, length=length):
            return cls._from_bytes(read_units(address, length, cls.codec.bits))

    @property
    def capacity(self) -> int:
        return self._storage.capacity

    def reserve(self, additional: int) -> None:
        """Ensure room for at least ``additional`` more units (may over-allocate)."""

        self._storage.reserve(ensure_count(additional, operation="reserve"))

    def reserve_exact(self, additional: int) -> None:
        self._storage.reserve_exact(
            ensure_count(additional, operation="reserve_exact")
        )

    def shrink_to_fit(self) -> None:
        self._storage.shrink_to_fit()

    def clear(self) -> None:
        self._storage.truncate(0)

    def truncate(self, new_len: int) -> None:
        """Drop trailing units past ``new_len``; longer values are a no-op."""

        self._storage.truncate(ensure_count(new_len, operation="truncate"))

    def push(self, other: Any) -> None:
        """Append another same-width wide sequence verbatim.

        No checks are made at the seam: joining can create an embedded nul or
        split a surrogate pair.
        """

        self._storage.extend(units_of(other, self.codec.bits))

    def push_slice(self, units: Iterable[int]) -> None:
        self._storage.extend(units)

    def push_str(self, text: str) -> None:
        self._storage.extend_bytes(self.codec.encode(text))

    def push_os_str(self, value: OsText) -> None:
        self._storage.extend_bytes(os_to_wide(self.codec, value))

    def push_char(self, char: str) -> None:
        self._storage.extend(self.codec.encode_char(char))

    def extend(self, pieces: Iterable[Any]) -> None:
        for piece in pieces:
            if isinstance(piece, str):
                self.push_str(piece)
            else:
                self.push(piece)

    def write(self, text: str) -> int:
        """File-like hook so ``print(..., file=buffer)`` appends encoded text."""

        self.push_str(text)
        return len(text)

    def __iadd__(self: B, other: Any) -> B:
        if isinstance(other, str):
            self.push_str(other)
        elif is_wide_like(other, self.codec.bits):
            self.push(other)
        else:
            return NotImplemented
        return self

    def __add__(self: B, other: Any) -> B:
        if not (isinstance(other, str) or is_wide_like(other, self.codec.bits)):
            return NotImplemented
        result = self.copy()
        result += other
        return result

    def pop(self) -> Optional[int]:
        """Remove the last element and return it as an integer.

        A trailing surrogate pair comes back combined. A trailing surrogate
        that has no valid partner comes back as its raw unit value.
        """

        units = self._storage.units
        if not units:
            return None
        decoded = self.codec.decode_last(units)
        self._storage.delete(decoded.index, len(units))
        return decoded.value

    def remove(self, idx: int) -> int:
        """Remove and return the element starting at ``idx``.

        Removes a whole surrogate pair when ``idx`` addresses a validly paired
        high surrogate, otherwise exactly one unit.
        """

        units = self._storage.units
        idx = ensure_element(idx, len(units), operation="remove")
        decoded = self.codec.decode_at(units, idx)
        self._storage.delete(idx, idx + decoded.width)
        return decoded.value

    def insert(self, idx: int, char: str) -> None:
        idx = ensure_position(idx, len(self._storage), operation="insert")
        self._storage.splice(idx, self.codec.encode_char(char))

    def insert_view(self, idx: int, other: Any) -> None:
        """Splice another same-width sequence at ``idx``. O(n)."""

        idx = ensure_position(idx, len(self._storage), operation="insert_view")
        units = unit_array(self._storage.typecode, units_of(other, self.codec.bits))
        with telemetry.operation_span("insert_view", owner=self, length=len(units)):
            self._storage.splice(idx, units)

    def split_off(self: B, at: int) -> B:
        """Move ``[at, len)`` into a new buffer and keep ``[0, at)``.

        ``at == len`` is valid and returns an empty buffer. The capacity of
        ``self`` is unchanged.
        """

        at = ensure_position(at, len(self._storage), operation="split_off")
        length = len(self._storage)
        with telemetry.operation_span("split_off", owner=self, length=length) as handle:
            tail = self._storage.split_off(at)
            handle.add_metadata("tail", len(tail))
            return type(self)._adopt(tail)

    def __setitem__(self, key: int | slice, value: Any) -> None:
        storage, start, stop = self._span()
        assign_units(storage, start, stop, key, value)

    def _span(self) -> tuple[UnitStorage, int, int]:
        return self._storage, 0, len(self._storage.units)

    def _make_view(self, start: int, stop: int) -> WideView:
        return WideView(self, self._storage, self.codec, start, stop)

    def as_view(self) -> WideView:
        return self._make_view(0, len(self._storage))

    def as_mut_view(self) -> WideView:
        return WideView(
            self, self._storage, self.codec, 0, len(self._storage), writable=True
        )

    def copy(self: B) -> B:
        return type(self)(self._storage.units)

    __copy__ = copy

    def into_units(self) -> array:
        """Consume the buffer and return its units."""

        return self._storage.release()

    def into_boxed(self) -> WideStr:
        """Consume the buffer into an immutable string with no spare capacity."""

        storage = UnitStorage.adopt(self.codec.bits, self._storage.release())
        return WideStr(storage, self.codec)

    def into_view(self) -> WideView:
        """Consume the buffer into a read-only view that owns the units."""

        return self.into_boxed().as_view()

    def into_nul_aware(
        self, factory: NulAwareFactory[T], *, truncate: bool = False
    ) -> T:
        """Hand the units to the nul-terminated sibling type.

        The buffer is only consumed if ``factory`` accepts the units; a
        validation error leaves the buffer untouched.
        """

        units = self._storage.units
        with telemetry.operation_span(
            "into_nul_aware", owner=self, length=len(units)
        ) as handle:
            handle.add_metadata("truncate", truncate)
            if truncate:
                result = factory.from_units_truncate(units)
            else:
                result = factory.from_units(units)
        self._storage.release()
        return result


__all__ = ["WideBuffer", "buffer_type"]
