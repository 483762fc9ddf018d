"""Width-specific encode/decode strategies shared by every wide buffer.

A ``WideBuffer`` never inspects surrogates itself. It asks its codec how many
units a character occupies, how to decode the element at an index, and how to
decode the trailing element. ``Utf16Codec`` is surrogate-pair aware;
``Utf32Codec`` maps one unit to one element.
"""

from __future__ import annotations

import re
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Sequence

from widebuf.errors import WideDecodeError, WideEncodeError

from .surrogates import (
    REPLACEMENT_CHARACTER,
    combine_pair,
    is_high_surrogate,
    is_low_surrogate,
    is_scalar_value,
    is_surrogate,
    split_pair,
)

BYTE_ORDER = "le" if sys.byteorder == "little" else "be"

_LONE_SURROGATES = re.compile("[\ud800-\udfff]")


@dataclass(frozen=True, slots=True)
class DecodedUnit:
    """One logical element decoded from a unit sequence."""

    index: int
    value: int
    width: int
    valid: bool

    @property
    def char(self) -> str:
        if not self.valid:
            raise WideDecodeError(
                f"unit 0x{self.value:X} at index {self.index} is not a scalar value",
                index=self.index,
                unit=self.value,
            )
        return chr(self.value)


class UnitCodec(ABC):
    bits: int
    name: str

    @property
    def unit_size(self) -> int:
        return self.bits // 8

    @property
    def max_unit(self) -> int:
        return (1 << self.bits) - 1

    @property
    def codec_name(self) -> str:
        return f"utf-{self.bits}-{BYTE_ORDER}"

    def code_point(self, char: str) -> int:
        if not isinstance(char, str) or len(char) != 1:
            raise TypeError(f"expected a single character, got {char!r}")
        value = ord(char)
        if is_surrogate(value):
            raise WideEncodeError(
                f"lone surrogate U+{value:04X} cannot be encoded",
                position=0,
                code_point=value,
            )
        return value

    def encode_char(self, char: str) -> tuple[int, ...]:
        return self.encode_code_point(self.code_point(char))

    @abstractmethod
    def encode_code_point(self, code_point: int) -> tuple[int, ...]:
        ...

    def encode(self, text: str) -> bytes:
        """Encode well-formed text to native-order unit bytes."""

        try:
            return text.encode(self.codec_name)
        except UnicodeEncodeError as exc:
            raise WideEncodeError(
                f"lone surrogate at position {exc.start} cannot be encoded",
                position=exc.start,
                code_point=ord(text[exc.start]),
            ) from exc

    @abstractmethod
    def encode_os(self, text: str) -> bytes:
        ...

    @abstractmethod
    def decode_os(self, data: bytes) -> str:
        ...

    def decode(self, data: bytes) -> str:
        try:
            return data.decode(self.codec_name)
        except UnicodeDecodeError as exc:
            index = exc.start // self.unit_size
            unit = int.from_bytes(
                data[index * self.unit_size : (index + 1) * self.unit_size],
                "little" if BYTE_ORDER == "le" else "big",
            )
            raise WideDecodeError(
                f"invalid {self.name} unit 0x{unit:X} at index {index}",
                index=index,
                unit=unit,
            ) from exc

    def decode_lossy(self, data: bytes) -> str:
        return data.decode(self.codec_name, "replace")

    @abstractmethod
    def decode_at(self, units: Sequence[int], index: int) -> DecodedUnit:
        """Decode the element starting at ``index``; never fails."""

    @abstractmethod
    def decode_last(self, units: Sequence[int]) -> DecodedUnit:
        """Decode the trailing element of a non-empty sequence."""

    def iter_decode(self, units: Sequence[int]) -> Iterator[DecodedUnit]:
        index = 0
        length = len(units)
        while index < length:
            decoded = self.decode_at(units, index)
            yield decoded
            index += decoded.width

    def debug_repr(self, units: Sequence[int]) -> str:
        pieces = []
        for decoded in self.iter_decode(units):
            if decoded.valid:
                pieces.append(_escape(chr(decoded.value)))
            elif decoded.value <= 0xFFFF:
                pieces.append(f"\\u{decoded.value:04x}")
            else:
                pieces.append(f"\\U{decoded.value:08x}")
        return "'" + "".join(pieces) + "'"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Utf16Codec(UnitCodec):
    bits = 16
    name = "UTF-16"

    def encode_code_point(self, code_point: int) -> tuple[int, ...]:
        if code_point <= 0xFFFF:
            return (code_point,)
        return split_pair(code_point)

    def encode_os(self, text: str) -> bytes:
        return text.encode(self.codec_name, "surrogatepass")

    def decode_os(self, data: bytes) -> str:
        return data.decode(self.codec_name, "surrogatepass")

    def decode_at(self, units: Sequence[int], index: int) -> DecodedUnit:
        unit = units[index]
        if not is_surrogate(unit):
            return DecodedUnit(index, unit, 1, True)
        if is_high_surrogate(unit) and index + 1 < len(units):
            low = units[index + 1]
            if is_low_surrogate(low):
                return DecodedUnit(index, combine_pair(unit, low), 2, True)
        return DecodedUnit(index, unit, 1, False)

    def decode_last(self, units: Sequence[int]) -> DecodedUnit:
        last = len(units) - 1
        low = units[last]
        if not is_surrogate(low):
            return DecodedUnit(last, low, 1, True)
        if is_low_surrogate(low) and last > 0:
            high = units[last - 1]
            if is_high_surrogate(high):
                return DecodedUnit(last - 1, combine_pair(high, low), 2, True)
        return DecodedUnit(last, low, 1, False)


class Utf32Codec(UnitCodec):
    bits = 32
    name = "UTF-32"

    def encode_code_point(self, code_point: int) -> tuple[int, ...]:
        return (code_point,)

    def encode_os(self, text: str) -> bytes:
        return self.encode(_LONE_SURROGATES.sub(REPLACEMENT_CHARACTER, text))

    def decode_os(self, data: bytes) -> str:
        return self.decode_lossy(data)

    def decode_at(self, units: Sequence[int], index: int) -> DecodedUnit:
        unit = units[index]
        return DecodedUnit(index, unit, 1, is_scalar_value(unit))

    def decode_last(self, units: Sequence[int]) -> DecodedUnit:
        return self.decode_at(units, len(units) - 1)


def _escape(char: str) -> str:
    if char == "'":
        return "\\'"
    if char == "\\":
        return "\\\\"
    if char.isprintable():
        return char
    return repr(char)[1:-1]


UTF16 = Utf16Codec()
UTF32 = Utf32Codec()

_BY_BITS = {codec.bits: codec for codec in (UTF16, UTF32)}


def codec_for_bits(bits: int) -> UnitCodec:
    try:
        return _BY_BITS[bits]
    except KeyError as exc:
        raise ValueError(f"no codec for {bits}-bit code units") from exc


__all__ = [
    "BYTE_ORDER",
    "DecodedUnit",
    "UnitCodec",
    "Utf16Codec",
    "Utf32Codec",
    "UTF16",
    "UTF32",
    "codec_for_bits",
]
