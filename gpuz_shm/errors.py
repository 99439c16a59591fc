"""
Errors raised while attaching to or decoding the GPU-Z region.

All three propagate straight out of decode(); callers decide whether to
poll again.
"""


class GpuzShmError(Exception):
    """Base class for every decode failure."""


class SourceUnavailable(GpuzShmError):
    """The named region could not be opened or attached."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Shared memory region '{name}' unavailable: {reason}")


class ShortRead(GpuzShmError):
    """Fewer bytes remained than a field required."""

    def __init__(self, needed: int, remaining: int, offset: int):
        self.needed = needed
        self.remaining = remaining
        self.offset = offset
        super().__init__(
            f"Short read at offset {offset}: needed {needed} bytes, "
            f"{remaining} remaining"
        )


class NoData(GpuzShmError):
    """The region was read fully but holds no records and no sensors."""

    def __init__(self, message: str = None):
        super().__init__(
            message
            or "initialization failed: empty data and sensors, "
            "producer likely not running"
        )
