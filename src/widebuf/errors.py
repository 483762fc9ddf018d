"""Exception types raised by wide buffers, views and codecs."""

from __future__ import annotations


class WideBufferError(RuntimeError):
    """Base class for every precondition violation raised by widebuf."""


class BufferBoundsError(WideBufferError, IndexError):
    """Raised when an index or offset lies outside the documented range."""

    def __init__(
        self, message: str, *, index: int, length: int, operation: str
    ) -> None:
        super().__init__(message)
        self.index = index
        self.length = length
        self.operation = operation


class NullPointerError(WideBufferError, ValueError):
    """Raised when raw ingestion is given a null pointer with a non-zero length."""

    def __init__(self, message: str, *, length: int) -> None:
        super().__init__(message)
        self.length = length


class StaleViewError(WideBufferError):
    """Raised when a view is used after its storage changed shape."""

    def __init__(self, message: str, *, expected: int, actual: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class BufferConsumedError(WideBufferError):
    """Raised when a buffer is used after a consuming conversion."""


class ReadOnlyViewError(WideBufferError, TypeError):
    """Raised when writing through a view obtained with ``as_view``."""


class WideDecodeError(WideBufferError, ValueError):
    """Raised by strict decoding when a unit does not form a valid scalar."""

    def __init__(self, message: str, *, index: int, unit: int) -> None:
        super().__init__(message)
        self.index = index
        self.unit = unit


class WideEncodeError(WideBufferError, ValueError):
    """Raised when native text carries a lone surrogate code point."""

    def __init__(self, message: str, *, position: int, code_point: int) -> None:
        super().__init__(message)
        self.position = position
        self.code_point = code_point


class RepresentationError(WideBufferError):
    """Raised when no native array type matches a code-unit width."""


__all__ = [
    "WideBufferError",
    "BufferBoundsError",
    "NullPointerError",
    "StaleViewError",
    "BufferConsumedError",
    "ReadOnlyViewError",
    "WideDecodeError",
    "WideEncodeError",
    "RepresentationError",
]
