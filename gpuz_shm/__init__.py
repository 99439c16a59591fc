"""Decoder for the GPU-Z shared memory region."""

from gpuz_shm.decoder import SensorRecord, Stat, decode, read_stat
from gpuz_shm.errors import GpuzShmError, NoData, ShortRead, SourceUnavailable
from gpuz_shm.shm_layout import REGION_NAME, REGION_SIZE
from gpuz_shm.source import BufferSource, open_region

__version__ = "0.1.0"

__all__ = [
    "BufferSource",
    "GpuzShmError",
    "NoData",
    "REGION_NAME",
    "REGION_SIZE",
    "SensorRecord",
    "ShortRead",
    "SourceUnavailable",
    "Stat",
    "decode",
    "open_region",
    "read_stat",
]
