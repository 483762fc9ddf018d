"""Concrete 16-bit and 32-bit buffers and the platform ``wchar_t`` alias."""

from __future__ import annotations

import sys
from typing import Any, Iterable, Type

from widebuf.codec import UTF16, UTF32

from .buffer import WideBuffer


class U16Buffer(WideBuffer):
    """Owned UTF-16 code units.

    Characters outside the Basic Multilingual Plane occupy a surrogate pair;
    ``pop``, ``remove`` and ``insert`` treat a valid pair as one element.
    """

    __slots__ = ()

    codec = UTF16


class U32Buffer(WideBuffer):
    """Owned UTF-32 code units; every operation touches exactly one unit."""

    __slots__ = ()

    codec = UTF32

    @classmethod
    def from_chars(cls, chars: Iterable[str]) -> "U32Buffer":
        """Build a buffer from single characters, one unit per character.

        Each character is converted explicitly; the buffer never shares
        storage with ``chars``.
        """

        return cls(cls.codec.code_point(char) for char in chars)

    @classmethod
    def from_char_ptr(cls, pointer: Any, length: int) -> "U32Buffer":
        return cls.from_ptr(pointer, length)


WideString: Type[WideBuffer] = U16Buffer if sys.platform == "win32" else U32Buffer

__all__ = ["U16Buffer", "U32Buffer", "WideString"]
