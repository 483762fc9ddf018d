"""Owned wide buffers, borrowed views and boxed wide strings."""

from .boxed import WideStr
from .buffer import WideBuffer, buffer_type
from .interop import NulAwareFactory, SupportsWideUnits
from .platform import os_to_wide, wide_to_os
from .validation import ensure_element, ensure_position
from .variants import U16Buffer, U32Buffer, WideString
from .view import WideSequence, WideView

__all__ = [
    "NulAwareFactory",
    "SupportsWideUnits",
    "U16Buffer",
    "U32Buffer",
    "WideBuffer",
    "WideSequence",
    "WideStr",
    "WideString",
    "WideView",
    "buffer_type",
    "ensure_element",
    "ensure_position",
    "os_to_wide",
    "wide_to_os",
]
