"""
GPU-Z shared memory decoder.

decode() is a pure function from a byte source to a Stat:
- Opens the source exactly once
- Reads the header, 128 record slots and 128 sensor slots in fixed order
- Rejects a region with neither records nor sensors (NoData)
- Always releases the source, whatever happens

No state is kept between calls, so independent callers may poll freely.
"""

from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from gpuz_shm.cursor import ByteCursor
from gpuz_shm.errors import NoData, SourceUnavailable
from gpuz_shm.shm_layout import (
    RECORD_KEY_SIZE,
    RECORD_SLOT_COUNT,
    RECORD_VALUE_SIZE,
    REGION_NAME,
    REGION_SIZE,
    SENSOR_NAME_SIZE,
    SENSOR_PAD_SIZE,
    SENSOR_SLOT_COUNT,
    SENSOR_UNIT_SIZE,
    SHM_BASE_PATH,
)
from gpuz_shm.source import open_region


# ---------------------------------------------------------------------------
# Data Structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SensorRecord:
    name: str
    unit: str
    digits: int
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "unit": self.unit,
            "digits": self.digits,
            "value": self.value,
        }


@dataclass(frozen=True)
class Stat:
    """
    One decoded snapshot of the region.

    Mappings hold the last slot for a repeated key; the available_* tuples
    keep every non-empty slot in order, duplicates included.
    """
    version: int
    busy: int
    last_update: int
    records: Mapping[str, str] = field(default_factory=dict)
    available_records: Tuple[str, ...] = ()
    sensor_records: Mapping[str, SensorRecord] = field(default_factory=dict)
    available_sensors: Tuple[str, ...] = ()

    @property
    def is_busy(self) -> bool:
        return self.busy != 0

    def get_record(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def get_sensor(self, name: str) -> Optional[SensorRecord]:
        return self.sensor_records.get(name)

    def get_sensor_value(self, name: str) -> Optional[float]:
        sensor = self.get_sensor(name)
        if sensor is None:
            return None
        return sensor.value

    def get_available_records(self) -> Tuple[str, ...]:
        return self.available_records

    def get_available_sensors(self) -> Tuple[str, ...]:
        return self.available_sensors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "busy": self.busy,
            "last_update": self.last_update,
            "records": dict(self.records),
            "available_records": list(self.available_records),
            "sensors": {
                name: sensor.to_dict()
                for name, sensor in self.sensor_records.items()
            },
            "available_sensors": list(self.available_sensors),
        }


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _read_records(cursor: ByteCursor) -> Tuple[Dict[str, str], List[str]]:
    records: Dict[str, str] = {}
    available: List[str] = []

    for _ in range(RECORD_SLOT_COUNT):
        key = cursor.read_fixed_text(RECORD_KEY_SIZE)
        value = cursor.read_fixed_text(RECORD_VALUE_SIZE)

        if key:
            records[key] = value
            available.append(key)

    return records, available


def _read_sensors(cursor: ByteCursor) -> Tuple[Dict[str, SensorRecord], List[str]]:
    sensors: Dict[str, SensorRecord] = {}
    available: List[str] = []

    for _ in range(SENSOR_SLOT_COUNT):
        name = cursor.read_fixed_text(SENSOR_NAME_SIZE)
        unit = cursor.read_fixed_text(SENSOR_UNIT_SIZE)
        digits = cursor.read_u32_be()
        value = cursor.read_f64_le()
        cursor.skip(SENSOR_PAD_SIZE)

        if name:
            sensors[name] = SensorRecord(name=name, unit=unit, digits=digits, value=value)
            available.append(name)

    return sensors, available


def _opener_name(opener) -> str:
    if isinstance(opener, partial) and opener.args:
        return str(opener.args[0])
    return getattr(opener, "__name__", repr(opener))


def decode(opener: Callable[[int], Any], region_size: int = REGION_SIZE) -> Stat:
    """
    Decode one snapshot of the region.

    `opener(region_size)` must return a byte source with read(n) and close().
    Raises SourceUnavailable, ShortRead or NoData. An OSError from the
    opener is reported as SourceUnavailable.
    """
    try:
        source = opener(region_size)
    except OSError as e:
        raise SourceUnavailable(_opener_name(opener), str(e)) from e

    try:
        cursor = ByteCursor(source, region_size)

        version = cursor.read_u32_be()
        busy = cursor.read_u32_be()
        last_update = cursor.read_u32_be()

        records, available_records = _read_records(cursor)
        sensors, available_sensors = _read_sensors(cursor)
    finally:
        source.close()

    if not records and not sensors:
        raise NoData()

    return Stat(
        version=version,
        busy=busy,
        last_update=last_update,
        records=MappingProxyType(records),
        available_records=tuple(available_records),
        sensor_records=MappingProxyType(sensors),
        available_sensors=tuple(available_sensors),
    )


def read_stat(name: str = REGION_NAME, base_path: str = SHM_BASE_PATH) -> Stat:
    """Attach to the named GPU-Z region and decode it."""
    return decode(partial(open_region, name, base_path=base_path), REGION_SIZE)
