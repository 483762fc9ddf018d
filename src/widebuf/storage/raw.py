"""Copying code units out of foreign memory through ctypes.

Nothing here can verify that an address is readable. Callers vouch that
``address`` is valid for ``length`` units, exactly like handing a pointer and
length to a C function.
"""

from __future__ import annotations

import ctypes
from typing import Any

UNIT_CTYPES = {16: ctypes.c_uint16, 32: ctypes.c_uint32}

_BYREF_TYPE = type(ctypes.byref(ctypes.c_int()))
_POINTER_LIKE = (
    ctypes._Pointer,
    ctypes.Array,
    ctypes.c_char_p,
    ctypes.c_wchar_p,
    _BYREF_TYPE,
)


def address_of(pointer: Any) -> int:
    """Resolve ``pointer`` to an integer address; ``0`` means null.

    Accepts ``None``, a plain integer, a ``ctypes.c_void_p``, any ctypes
    pointer instance, ``c_char_p`` and ``c_wchar_p``, a ``ctypes.byref``
    result, or a ctypes array (whose first element is addressed). Python
    ``str`` and ``bytes`` objects are not pointers and are rejected.
    """

    if pointer is None:
        return 0
    if isinstance(pointer, bool):
        raise TypeError("a bool is not a pointer")
    if isinstance(pointer, int):
        return pointer
    if isinstance(pointer, ctypes.c_void_p):
        return pointer.value or 0
    if isinstance(pointer, _POINTER_LIKE):
        return ctypes.cast(pointer, ctypes.c_void_p).value or 0
    raise TypeError(f"cannot take the address of {type(pointer).__name__}")


def read_units(address: int, length: int, bits: int) -> bytes:
    """Copy ``length`` native-order units of ``bits`` width starting at ``address``."""

    unit_type = UNIT_CTYPES[bits]
    return ctypes.string_at(address, length * ctypes.sizeof(unit_type))


__all__ = ["UNIT_CTYPES", "address_of", "read_units"]
