"""
Shared fixtures: builds GPU-Z regions byte-for-byte with struct.
"""

import struct

import pytest

from gpuz_shm import shm_layout as layout
from gpuz_monitor import state


def encode_text(text: str, size: int) -> bytes:
    """Two bytes per character, low byte first, zero padded."""
    raw = b"".join(bytes([ord(ch), 0]) for ch in text)
    assert len(raw) <= size
    return raw.ljust(size, b"\x00")


def build_region(
    version=0,
    busy=0,
    last_update=0,
    records=(),
    sensors=(),
) -> bytes:
    """
    records: iterable of (slot_index, key, value)
    sensors: iterable of (slot_index, name, unit, digits, value)
    """
    record_slots = [b"\x00" * layout.RECORD_SLOT_SIZE] * layout.RECORD_SLOT_COUNT
    for index, key, value in records:
        record_slots[index] = (
            encode_text(key, layout.RECORD_KEY_SIZE)
            + encode_text(value, layout.RECORD_VALUE_SIZE)
        )

    sensor_slots = [b"\x00" * layout.SENSOR_SLOT_SIZE] * layout.SENSOR_SLOT_COUNT
    for index, name, unit, digits, value in sensors:
        sensor_slots[index] = (
            encode_text(name, layout.SENSOR_NAME_SIZE)
            + encode_text(unit, layout.SENSOR_UNIT_SIZE)
            + struct.pack(">I", digits)
            + struct.pack("<d", value)
            + b"\x00" * layout.SENSOR_PAD_SIZE
        )

    data = (
        struct.pack(">III", version, busy, last_update)
        + b"".join(record_slots)
        + b"".join(sensor_slots)
    )
    assert len(data) == layout.REGION_SIZE
    return data


class RecordingSource:
    """BufferSource stand-in that counts reads and closes."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.bytes_read = 0
        self.close_calls = 0

    def read(self, n):
        chunk = self.data[self.pos:self.pos + n]
        self.pos += len(chunk)
        self.bytes_read += len(chunk)
        return chunk

    def close(self):
        self.close_calls += 1


class RecordingOpener:
    """Opener returning a fresh RecordingSource per call."""

    def __init__(self, *regions):
        self.regions = list(regions)
        self.calls = []
        self.sources = []

    def __call__(self, size):
        self.calls.append(size)
        data = self.regions[min(len(self.calls), len(self.regions)) - 1]
        source = RecordingSource(data)
        self.sources.append(source)
        return source


@pytest.fixture
def sample_region():
    return build_region(
        version=2,
        busy=0,
        last_update=123456,
        records=[
            (0, "CardName", "NVIDIA GeForce RTX 3080"),
            (1, "GPUClock", "1440"),
        ],
        sensors=[
            (0, "GPU Temperature", "°C", 1, 54.5),
            (1, "GPU Load", "%", 0, 37.0),
        ],
    )


@pytest.fixture(autouse=True)
def clean_state():
    state.reset()
    yield
    state.reset()
