"""
Sequential, bounds-checked reads over a fixed-length byte source.

The cursor only moves forward. Every read either consumes exactly the
requested width or raises ShortRead.
"""

import struct

from gpuz_shm.errors import ShortRead
from gpuz_shm.shm_layout import F64_SIZE, U32_SIZE

U32_BE = struct.Struct(">I")
F64_LE = struct.Struct("<d")


class ByteCursor:
    def __init__(self, source, total_size: int):
        self.source = source
        self.total_size = total_size
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return self.total_size - self._offset

    # ---------------------------
    # Raw access
    # ---------------------------

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise ShortRead(size, self.remaining, self._offset)

        data = self.source.read(size)
        if len(data) != size:
            # source is smaller than the declared length
            raise ShortRead(size, len(data), self._offset)

        self._offset += size
        return data

    def skip(self, size: int):
        """Consume reserved bytes without interpreting them."""
        self._take(size)

    # ---------------------------
    # Typed reads
    # ---------------------------

    def read_fixed_text(self, slot_size: int) -> str:
        """
        Read a fixed-width text slot of two-byte units.

        Only the low byte of each unit is kept and accumulation stops at the
        first zero low byte. The cursor still advances by the whole slot.
        """
        raw = self._take(slot_size)

        low = raw[0:slot_size - slot_size % 2:2]
        end = low.find(0)
        if end != -1:
            low = low[:end]

        return low.decode("latin-1")

    def read_u32_be(self) -> int:
        return U32_BE.unpack(self._take(U32_SIZE))[0]

    def read_f64_le(self) -> float:
        return F64_LE.unpack(self._take(F64_SIZE))[0]
