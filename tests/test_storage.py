from array import array

import pytest

from widebuf.errors import BufferConsumedError
from widebuf.runtime import telemetry
from widebuf.storage import TYPECODES, UnitStorage, grown_capacity, unit_array


def test_typecodes_match_unit_widths() -> None:
    assert array(TYPECODES[16]).itemsize == 2
    assert array(TYPECODES[32]).itemsize == 4


def test_grown_capacity_doubles_with_minimum() -> None:
    assert grown_capacity(0, 1) == 4
    assert grown_capacity(4, 5) == 8
    assert grown_capacity(4, 20) == 20


def test_extend_grows_amortized() -> None:
    storage = UnitStorage(16, [1, 2, 3])
    assert storage.capacity == 3

    storage.extend([4])

    assert len(storage) == 4
    assert storage.capacity == 6


def test_generation_moves_on_shape_changes_only() -> None:
    storage = UnitStorage(16, [1, 2, 3], capacity=8)
    start = storage.generation

    storage.reserve(2)
    storage.assign(0, 9)
    assert storage.generation == start

    storage.extend([4])
    assert storage.generation == start + 1

    storage.reserve(100)
    assert storage.generation == start + 2


def test_failed_extend_leaves_storage_untouched() -> None:
    storage = UnitStorage(16, [1])
    generation = storage.generation

    with pytest.raises(OverflowError):
        storage.extend([2, 0x10000])

    assert storage.units.tolist() == [1]
    assert storage.generation == generation


def test_release_moves_units_out() -> None:
    storage = UnitStorage(32, [7, 8])

    units = storage.release()

    assert units.tolist() == [7, 8]
    assert storage.released
    with pytest.raises(BufferConsumedError):
        storage.units
    with pytest.raises(BufferConsumedError):
        storage.capacity


def test_adopt_checks_typecode() -> None:
    with pytest.raises(TypeError):
        UnitStorage.adopt(16, array(TYPECODES[32], [1]))

    adopted = UnitStorage.adopt(16, array(TYPECODES[16], [1, 2]))
    assert adopted.capacity == 2


def test_implicit_growth_reports_reallocation(monkeypatch) -> None:
    events = []
    monkeypatch.setattr(
        telemetry,
        "record_event",
        lambda name, *, level="info", data=None: events.append((name, level, data)),
    )
    storage = UnitStorage(16, [1, 2, 3])

    storage.extend([4])
    storage.extend([5])

    assert events == [
        (
            "storage::grow",
            "debug",
            {"bits": 16, "from": 3, "to": 6, "reason": "push"},
        )
    ]


def test_bytes_are_iterated_as_unit_values() -> None:
    storage = UnitStorage(16, b"ab")
    storage.extend(bytearray(b"c"))
    storage.splice(0, b"z")

    assert storage.units.tolist() == [0x7A, 0x61, 0x62, 0x63]
    assert unit_array(TYPECODES[32], b"\x00\xff").tolist() == [0, 0xFF]
