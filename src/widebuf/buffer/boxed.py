"""Immutable, minimal-capacity wide strings produced by consuming a buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from widebuf.codec import UnitCodec
from widebuf.storage import UnitStorage

from .view import WideSequence, WideView

if TYPE_CHECKING:
    from .buffer import WideBuffer


class WideStr(WideSequence):
    """Frozen code units whose capacity equals their length.

    Unlike buffers, boxed strings are hashable and their views never go
    stale.
    """

    __slots__ = ("_storage", "codec")

    def __init__(self, storage: UnitStorage, codec: UnitCodec) -> None:
        storage.shrink_to_fit()
        self._storage = storage
        self.codec = codec

    @property
    def capacity(self) -> int:
        return self._storage.capacity

    def _span(self) -> tuple[UnitStorage, int, int]:
        return self._storage, 0, len(self._storage.units)

    def _make_view(self, start: int, stop: int) -> WideView:
        return WideView(self, self._storage, self.codec, start, stop)

    def as_view(self) -> WideView:
        return self._make_view(0, len(self))

    def into_buffer(self) -> "WideBuffer":
        return self.to_buffer()

    def __hash__(self) -> int:
        return hash((self.codec.bits, self.to_bytes()))


__all__ = ["WideStr"]
