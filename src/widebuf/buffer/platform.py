"""Bridge between OS strings and wide code units.

Python already represents OS text as ``str`` (with surrogate escapes for
undecodable bytes), so the bridge only decides how lone surrogates travel:
16-bit units carry them through unchanged, 32-bit units replace them.
"""

from __future__ import annotations

import os
from typing import Union

from widebuf.codec import UnitCodec

OsText = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]


def os_to_wide(codec: UnitCodec, value: OsText) -> bytes:
    return codec.encode_os(os.fsdecode(value))


def wide_to_os(codec: UnitCodec, data: bytes) -> str:
    return codec.decode_os(data)


__all__ = ["OsText", "os_to_wide", "wide_to_os"]
