"""Parsing of size threshold expressions such as ``100``, ``500M`` or ``1.5GB``."""

import math
import re

from bigfiles.models import ScanThreshold, SizeUnit

DEFAULT_THRESHOLD = "100"

SIZE_GRAMMAR = "<number>[MB|M|GB|G], e.g. 100, 50MB, 500M, 1GB, 0.5G"

_SIZE_RE = re.compile(
    r"^(?P<number>\d+(?:\.\d*)?|\.\d+)\s*(?P<unit>mb|m|gb|g)?$",
    re.IGNORECASE,
)

_UNITS = {
    "mb": SizeUnit.MB,
    "m": SizeUnit.MB,
    "gb": SizeUnit.GB,
    "g": SizeUnit.GB,
}


class InvalidSizeError(ValueError):
    """Raised when a size expression cannot be parsed."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid size {value!r}: expected {SIZE_GRAMMAR}")


def parse_threshold(value: str) -> ScanThreshold:
    """
    Parse a size expression into a byte threshold.

    A bare number is read as megabytes. Units are binary: 1 MB is
    1,048,576 bytes and 1 GB is 1,073,741,824 bytes.

    Args:
        value: Size expression such as "100", "50MB", "2G" or "0.5gb"

    Returns:
        ScanThreshold with the byte count and the unit it was written in

    Raises:
        InvalidSizeError: If the number is malformed or negative, or the unit is unknown
    """
    match = _SIZE_RE.match(value.strip())
    if not match:
        raise InvalidSizeError(value)

    unit = _UNITS[(match.group("unit") or "mb").lower()]
    size_bytes = float(match.group("number")) * unit.bytes_per_unit
    # Digit strings past the float range come out as inf
    if not math.isfinite(size_bytes):
        raise InvalidSizeError(value)

    return ScanThreshold(
        min_size_bytes=int(size_bytes),
        unit=unit,
    )
