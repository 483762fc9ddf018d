"""Bounds checks shared by buffers and views.

Every check reports the violation through telemetry before raising, so a
failed precondition leaves a trace even when the caller swallows the error.
"""

from __future__ import annotations

import operator

from widebuf.errors import BufferBoundsError
from widebuf.runtime import telemetry


def _violation(message: str, *, index: int, length: int, operation: str) -> None:
    telemetry.record_event(
        "buffer::precondition_violation",
        level="error",
        data={"operation": operation, "index": index, "length": length},
    )
    raise BufferBoundsError(message, index=index, length=length, operation=operation)


def ensure_position(index: int, length: int, *, operation: str) -> int:
    """Insertion points and split offsets: ``0 <= index <= length``."""

    index = operator.index(index)
    if index < 0 or index > length:
        _violation(
            f"{operation}: position {index} outside [0, {length}]",
            index=index,
            length=length,
            operation=operation,
        )
    return index


def ensure_element(index: int, length: int, *, operation: str) -> int:
    """Existing elements: ``0 <= index < length``."""

    index = operator.index(index)
    if index < 0 or index >= length:
        _violation(
            f"{operation}: index {index} outside [0, {length})",
            index=index,
            length=length,
            operation=operation,
        )
    return index


def ensure_count(count: int, *, operation: str) -> int:
    count = operator.index(count)
    if count < 0:
        _violation(
            f"{operation}: count {count} is negative",
            index=count,
            length=0,
            operation=operation,
        )
    return count


def normalize_subscript(index: int, length: int) -> int:
    """Sequence-protocol indexing: negative values count from the end."""

    index = operator.index(index)
    if index < 0:
        index += length
    if index < 0 or index >= length:
        raise BufferBoundsError(
            f"index {index} out of range for length {length}",
            index=index,
            length=length,
            operation="subscript",
        )
    return index


def normalize_slice(key: slice, length: int) -> tuple[int, int]:
    start, stop, step = key.indices(length)
    if step != 1:
        raise ValueError("wide sequences only support contiguous slices")
    return start, max(start, stop)


__all__ = [
    "ensure_count",
    "ensure_element",
    "ensure_position",
    "normalize_slice",
    "normalize_subscript",
]
