"""Owned, growable UTF-16 and UTF-32 code-unit buffers for foreign interfaces."""

from .buffer import (
    U16Buffer,
    U32Buffer,
    WideBuffer,
    WideStr,
    WideString,
    WideView,
)
from .errors import (
    BufferBoundsError,
    BufferConsumedError,
    NullPointerError,
    ReadOnlyViewError,
    StaleViewError,
    WideBufferError,
    WideDecodeError,
    WideEncodeError,
)

__all__ = [
    "BufferBoundsError",
    "BufferConsumedError",
    "NullPointerError",
    "ReadOnlyViewError",
    "StaleViewError",
    "U16Buffer",
    "U32Buffer",
    "WideBuffer",
    "WideBufferError",
    "WideDecodeError",
    "WideEncodeError",
    "WideStr",
    "WideString",
    "WideView",
]

__version__ = "0.1.0"
