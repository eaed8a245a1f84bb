"""Data models for list-big-files."""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SizeUnit(str, Enum):
    """Unit a size threshold was written in (binary multiples)."""

    MB = "MB"
    GB = "GB"

    @property
    def bytes_per_unit(self) -> int:
        """Number of bytes in one unit."""
        return 1024**3 if self is SizeUnit.GB else 1024**2


class ScanThreshold(BaseModel):
    """Minimum file size for inclusion in a scan."""

    model_config = ConfigDict(frozen=True)

    min_size_bytes: int = Field(..., ge=0, description="Minimum size in bytes")
    unit: SizeUnit = Field(SizeUnit.MB, description="Unit used for display")

    @property
    def size_in_unit(self) -> float:
        """Threshold expressed in its display unit."""
        return self.min_size_bytes / self.unit.bytes_per_unit


class FileEntry(BaseModel):
    """A regular file that met the threshold."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path of the file as found during the walk")
    size_bytes: int = Field(..., ge=0, description="Size in bytes")

    @property
    def size_mb(self) -> float:
        """Size in megabytes (binary)."""
        return self.size_bytes / (1024**2)

    @property
    def size_gb(self) -> float:
        """Size in gigabytes (binary)."""
        return self.size_bytes / (1024**3)

    def size_in(self, unit: SizeUnit) -> float:
        """Size expressed in the given unit."""
        return self.size_bytes / unit.bytes_per_unit


class ScanResult(BaseModel):
    """Outcome of scanning a directory tree."""

    model_config = ConfigDict(frozen=True)

    root: str = Field(..., description="Directory that was scanned")
    threshold: ScanThreshold
    entries: list[FileEntry] = Field(
        default_factory=list,
        description="Qualifying files, largest first",
    )
    scanned_count: int = Field(0, ge=0, description="Regular files examined")
    skipped_count: int = Field(0, ge=0, description="Entries skipped on I/O errors")
    elapsed_seconds: float = Field(0.0, ge=0, description="Wall-clock scan time")

    @property
    def count(self) -> int:
        """Number of qualifying files."""
        return len(self.entries)

    @property
    def total_bytes(self) -> int:
        """Combined size of all qualifying files."""
        return sum(e.size_bytes for e in self.entries)


def default_workers() -> int:
    """Worker count used when none is configured."""
    return min(32, (os.cpu_count() or 1) + 4)


class ScanConfig(BaseModel):
    """Tunables for a scan."""

    model_config = ConfigDict(frozen=True)

    workers: Optional[int] = Field(
        None,
        ge=1,
        description="Threads used to stat files (None picks a default from the CPU count)",
    )
    follow_symlinks: bool = Field(
        False,
        description="Descend into linked directories and report linked files",
    )

    @property
    def resolved_workers(self) -> int:
        """Configured worker count, or the default."""
        return self.workers if self.workers is not None else default_workers()
