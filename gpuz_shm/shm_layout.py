"""
Shared Memory Layout Definition for GPU-Z

This module defines the authoritative layout of the region GPU-Z publishes.
It contains NO logic and performs NO side effects.

All readers must import this file to discover:
- Region name
- Slot sizes and counts
- Total region size

The layout is fixed by the producer. Field widths are in BYTES.
"""

# Default name of the mapping created by GPU-Z
REGION_NAME = "GPUZShMem"


# Base directory for POSIX shared memory regions
SHM_BASE_PATH = "/dev/shm"


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
#
# uint32 version     (big-endian)
# uint32 busy        (big-endian, nonzero while producer updates)
# uint32 lastUpdate  (big-endian, producer tick)

U32_SIZE = 4
F64_SIZE = 8

HEADER_FIELDS = ("version", "busy", "last_update")
HEADER_SIZE = U32_SIZE * len(HEADER_FIELDS)


# ---------------------------------------------------------------------------
# Record slots (key/value text pairs)
# ---------------------------------------------------------------------------
#
# Text fields hold two bytes per character; only the low byte is used.

RECORD_KEY_SIZE = 512
RECORD_VALUE_SIZE = 512
RECORD_SLOT_SIZE = RECORD_KEY_SIZE + RECORD_VALUE_SIZE
RECORD_SLOT_COUNT = 128


# ---------------------------------------------------------------------------
# Sensor slots
# ---------------------------------------------------------------------------
#
# text   name    (512)
# text   unit    (16)
# uint32 digits  (big-endian)
# double value   (little-endian)
# bytes  reserved (84, never interpreted)

SENSOR_NAME_SIZE = 512
SENSOR_UNIT_SIZE = 16
SENSOR_FIELDS_SIZE = SENSOR_NAME_SIZE + SENSOR_UNIT_SIZE + U32_SIZE + F64_SIZE
SENSOR_PAD_SIZE = 84
SENSOR_SLOT_SIZE = SENSOR_FIELDS_SIZE + SENSOR_PAD_SIZE
SENSOR_SLOT_COUNT = 128


# Convenience: total region size (derived, do not edit)
REGION_SIZE = (
    HEADER_SIZE
    + RECORD_SLOT_COUNT * RECORD_SLOT_SIZE
    + SENSOR_SLOT_COUNT * SENSOR_SLOT_SIZE
)


# Sanity checks (import-time, no side effects)
assert HEADER_SIZE == 12, "Header must be three uint32 fields"
assert RECORD_SLOT_SIZE == 1024, f"Record slot has invalid size {RECORD_SLOT_SIZE}"
assert SENSOR_SLOT_SIZE == 624, f"Sensor slot has invalid size {SENSOR_SLOT_SIZE}"
assert REGION_SIZE == 210956, f"Region size mismatch: {REGION_SIZE}"
