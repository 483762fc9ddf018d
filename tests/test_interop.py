from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from widebuf import BufferConsumedError, U16Buffer, U32Buffer
from widebuf.buffer import SupportsWideUnits


class FakeNulString:
    """Minimal nul-terminated sibling that lends its units back."""

    def __init__(self, units, bits: int = 16) -> None:
        self._units = list(units)
        self._bits = bits

    @property
    def unit_bits(self) -> int:
        return self._bits

    def as_units(self) -> list[int]:
        return list(self._units)


class FakeNulFactory:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def from_units(self, units) -> FakeNulString:
        self.calls.append("from_units")
        if 0 in units:
            raise ValueError(f"interior nul at {list(units).index(0)}")
        return FakeNulString(units)

    def from_units_truncate(self, units) -> FakeNulString:
        self.calls.append("from_units_truncate")
        values = list(units)
        if 0 in values:
            values = values[: values.index(0)]
        return FakeNulString(values)


def test_into_nul_aware_consumes_on_success() -> None:
    factory = FakeNulFactory()
    buf = U16Buffer.from_str("path")

    result = buf.into_nul_aware(factory)

    assert result.as_units() == [ord(c) for c in "path"]
    assert factory.calls == ["from_units"]
    with pytest.raises(BufferConsumedError):
        buf.to_string()


def test_into_nul_aware_failure_keeps_buffer() -> None:
    buf = U16Buffer.from_str("pa\x00th")

    with pytest.raises(ValueError):
        buf.into_nul_aware(FakeNulFactory())

    assert buf.to_string() == "pa\x00th"


def test_into_nul_aware_truncate_policy() -> None:
    factory = FakeNulFactory()
    buf = U16Buffer.from_str("pa\x00th")

    result = buf.into_nul_aware(factory, truncate=True)

    assert result.as_units() == [ord("p"), ord("a")]
    assert factory.calls == ["from_units_truncate"]


def test_sibling_satisfies_protocol() -> None:
    assert isinstance(FakeNulString([]), SupportsWideUnits)
    assert isinstance(U16Buffer(), SupportsWideUnits)
    assert not isinstance("text", SupportsWideUnits)


def test_push_and_compare_with_sibling() -> None:
    sibling = FakeNulString([ord("!"), ord("?")])
    buf = U16Buffer.from_str("hi")

    buf.push(sibling)
    buf.insert_view(0, sibling)

    assert buf.to_string() == "!?hi!?"
    assert U16Buffer.from_str("!?") == sibling


def test_sibling_width_must_match() -> None:
    sibling = FakeNulString([0x61], bits=16)

    with pytest.raises(TypeError):
        U32Buffer().push(sibling)
    assert U32Buffer.from_str("a") != sibling


def test_u16_os_string_keeps_lone_surrogates() -> None:
    buf = U16Buffer.from_os_str("a\udc80")

    assert buf.to_units() == [0x61, 0xDC80]
    assert buf.to_os_string() == "a\udc80"


def test_os_string_accepts_bytes_and_paths() -> None:
    assert U16Buffer.from_os_str(b"abc").to_string() == "abc"
    path = Path("dir") / "file.txt"
    assert U16Buffer.from_os_str(path).to_os_string() == os.fspath(path)

    buf = U32Buffer()
    buf.push_os_str(path)
    assert buf.to_string() == os.fspath(path)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX byte paths")
def test_undecodable_os_bytes_survive_u16_round_trip() -> None:
    raw = b"caf\xff"

    buf = U16Buffer.from_os_str(raw)

    assert os.fsencode(buf.to_os_string()) == raw


def test_os_round_trip_for_well_formed_text() -> None:
    text = "日本/\U0001F600"

    assert U16Buffer.from_os_str(text).to_os_string() == text
    assert U32Buffer.from_os_str(text).to_os_string() == text
