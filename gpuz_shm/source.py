"""
Byte sources for the decoder.

A byte source supports:
- read(n): the next n bytes (fewer only when exhausted)
- close(): release, safe to call more than once

open_region() attaches to a named OS mapping read-only. It NEVER creates
or resizes the region; that belongs to the producer.
"""

import ctypes
import mmap
import os
import platform
import logging
from pathlib import Path

from gpuz_shm.errors import SourceUnavailable
from gpuz_shm.shm_layout import SHM_BASE_PATH

log = logging.getLogger(__name__)

FILE_MAP_READ = 0x0004


# ---------------------------------------------------------------------------
# In-memory source
# ---------------------------------------------------------------------------

class BufferSource:
    """Byte source over an in-memory buffer (snapshots, fixtures)."""

    def __init__(self, data: bytes):
        self._view = memoryview(bytes(data))
        self._pos = 0
        self.closed = False

    def read(self, n: int) -> bytes:
        if self.closed:
            raise ValueError("read from closed source")

        chunk = self._view[self._pos:self._pos + n].tobytes()
        self._pos += len(chunk)
        return chunk

    def close(self):
        if self.closed:
            return
        self._view.release()
        self.closed = True


# ---------------------------------------------------------------------------
# POSIX: file under /dev/shm
# ---------------------------------------------------------------------------

class MmapSource:
    """Read-only mmap of a named region file."""

    def __init__(self, name: str, path: Path, size: int):
        self.name = name
        self.closed = False

        with open(path, "rb") as f:
            self._mm = mmap.mmap(f.fileno(), size, access=mmap.ACCESS_READ)

        log.debug(f"[Source] Mapped '{name}' ({size} bytes)")

    def read(self, n: int) -> bytes:
        return self._mm.read(n)

    def close(self):
        if self.closed:
            return
        self._mm.close()
        self.closed = True
        log.debug(f"[Source] Released '{self.name}'")


# ---------------------------------------------------------------------------
# Windows: named file mapping
# ---------------------------------------------------------------------------

class WindowsMappingSource:
    """
    Read-only view of an existing named file mapping.

    mmap's tagname would silently create a missing mapping, so the mapping
    is opened through kernel32 instead.
    """

    def __init__(self, name: str, size: int):
        self.name = name
        self.size = size
        self.closed = False
        self._pos = 0

        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        kernel32.OpenFileMappingW.argtypes = [ctypes.c_uint32, ctypes.c_bool, ctypes.c_wchar_p]
        kernel32.OpenFileMappingW.restype = ctypes.c_void_p
        kernel32.MapViewOfFile.argtypes = [
            ctypes.c_void_p, ctypes.c_uint32, ctypes.c_uint32, ctypes.c_uint32, ctypes.c_size_t,
        ]
        kernel32.MapViewOfFile.restype = ctypes.c_void_p
        kernel32.UnmapViewOfFile.argtypes = [ctypes.c_void_p]
        kernel32.UnmapViewOfFile.restype = ctypes.c_bool
        kernel32.CloseHandle.argtypes = [ctypes.c_void_p]
        kernel32.CloseHandle.restype = ctypes.c_bool
        self._kernel32 = kernel32

        self._handle = kernel32.OpenFileMappingW(FILE_MAP_READ, False, name)
        if not self._handle:
            raise OSError(ctypes.get_last_error(), "OpenFileMappingW failed")

        self._view = kernel32.MapViewOfFile(self._handle, FILE_MAP_READ, 0, 0, size)
        if not self._view:
            err = ctypes.get_last_error()
            kernel32.CloseHandle(self._handle)
            raise OSError(err, "MapViewOfFile failed")

        log.debug(f"[Source] Mapped '{name}' ({size} bytes)")

    def read(self, n: int) -> bytes:
        n = max(0, min(n, self.size - self._pos))
        data = ctypes.string_at(self._view + self._pos, n)
        self._pos += n
        return data

    def close(self):
        if self.closed:
            return
        self._kernel32.UnmapViewOfFile(self._view)
        self._kernel32.CloseHandle(self._handle)
        self.closed = True
        log.debug(f"[Source] Released '{self.name}'")


# ---------------------------------------------------------------------------
# Opener
# ---------------------------------------------------------------------------

def open_region(name: str, size: int, base_path: str = SHM_BASE_PATH):
    """
    Attach to the named region, which must be exactly `size` bytes.

    Raises SourceUnavailable if it is missing, unreadable or mis-sized.
    """
    if platform.system() == "Windows":
        try:
            return WindowsMappingSource(name, size)
        except OSError as e:
            raise SourceUnavailable(name, str(e)) from e

    path = Path(base_path) / name
    try:
        actual_size = os.stat(path).st_size
    except OSError as e:
        raise SourceUnavailable(name, str(e)) from e

    if actual_size != size:
        raise SourceUnavailable(name, f"size mismatch: {actual_size} != {size}")

    try:
        return MmapSource(name, path, size)
    except (OSError, ValueError) as e:
        raise SourceUnavailable(name, str(e)) from e
