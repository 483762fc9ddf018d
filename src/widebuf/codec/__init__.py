"""Encode/decode strategies between native text and wide code units."""

from .strategy import (
    BYTE_ORDER,
    UTF16,
    UTF32,
    DecodedUnit,
    UnitCodec,
    Utf16Codec,
    Utf32Codec,
    codec_for_bits,
)
from .surrogates import (
    combine_pair,
    is_high_surrogate,
    is_low_surrogate,
    is_scalar_value,
    is_surrogate,
    split_pair,
)

__all__ = [
    "BYTE_ORDER",
    "UTF16",
    "UTF32",
    "DecodedUnit",
    "UnitCodec",
    "Utf16Codec",
    "Utf32Codec",
    "codec_for_bits",
    "combine_pair",
    "is_high_surrogate",
    "is_low_surrogate",
    "is_scalar_value",
    "is_surrogate",
    "split_pair",
]
