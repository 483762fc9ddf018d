"""UTF-16 surrogate arithmetic."""

from __future__ import annotations

HIGH_SURROGATE_MIN = 0xD800
HIGH_SURROGATE_MAX = 0xDBFF
LOW_SURROGATE_MIN = 0xDC00
LOW_SURROGATE_MAX = 0xDFFF
SUPPLEMENTARY_OFFSET = 0x10000
MAX_SCALAR = 0x10FFFF
REPLACEMENT_CHARACTER = "\ufffd"


def is_surrogate(unit: int) -> bool:
    return HIGH_SURROGATE_MIN <= unit <= LOW_SURROGATE_MAX


def is_high_surrogate(unit: int) -> bool:
    return HIGH_SURROGATE_MIN <= unit <= HIGH_SURROGATE_MAX


def is_low_surrogate(unit: int) -> bool:
    return LOW_SURROGATE_MIN <= unit <= LOW_SURROGATE_MAX


def is_scalar_value(value: int) -> bool:
    """Return whether ``value`` is a Unicode scalar value (no surrogates)."""

    return 0 <= value <= MAX_SCALAR and not is_surrogate(value)


def split_pair(code_point: int) -> tuple[int, int]:
    """Encode a supplementary code point as ``(high, low)`` surrogates."""

    if not SUPPLEMENTARY_OFFSET <= code_point <= MAX_SCALAR:
        raise ValueError(f"U+{code_point:04X} does not need a surrogate pair")
    shifted = code_point - SUPPLEMENTARY_OFFSET
    return (
        HIGH_SURROGATE_MIN + (shifted >> 10),
        LOW_SURROGATE_MIN + (shifted & 0x3FF),
    )


def combine_pair(high: int, low: int) -> int:
    """Decode a high/low surrogate pair into its code point."""

    if not (is_high_surrogate(high) and is_low_surrogate(low)):
        raise ValueError(f"0x{high:04X} 0x{low:04X} is not a surrogate pair")
    return SUPPLEMENTARY_OFFSET + (
        ((high - HIGH_SURROGATE_MIN) << 10) | (low - LOW_SURROGATE_MIN)
    )


__all__ = [
    "HIGH_SURROGATE_MIN",
    "HIGH_SURROGATE_MAX",
    "LOW_SURROGATE_MIN",
    "LOW_SURROGATE_MAX",
    "MAX_SCALAR",
    "REPLACEMENT_CHARACTER",
    "is_surrogate",
    "is_high_surrogate",
    "is_low_surrogate",
    "is_scalar_value",
    "split_pair",
    "combine_pair",
]
