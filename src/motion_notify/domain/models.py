"""Domain models for queued picture uploads."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from datetime import datetime


@dataclass(frozen=True)
class Job:
    """A single upload request handed from a client to the worker."""

    timestamp: datetime
    sequence_tag: str
    source_path: Path
    delete_after_upload: bool = True

    def __post_init__(self):
        if not self.sequence_tag:
            raise ValueError("Sequence tag must not be empty")
        # Second resolution only
        if self.timestamp.microsecond:
            object.__setattr__(self, "timestamp", self.timestamp.replace(microsecond=0))
        if not isinstance(self.source_path, Path):
            object.__setattr__(self, "source_path", Path(self.source_path))

    @property
    def date_title(self) -> str:
        """Title of the per-day destination container."""
        return self.timestamp.strftime("%Y-%m-%d")

    @property
    def blob_name(self) -> str:
        """Name the artifact is stored under inside its container."""
        return f"{self.timestamp.strftime('%H:%M:%S')}-{self.sequence_tag}"


@dataclass
class UploadResult:
    """Result of a file upload operation."""

    success: bool
    url: Optional[str] = None
    bucket: str = ""
    key: str = ""
    size_bytes: int = 0
    duration_seconds: float = 0.0
    error: Optional[str] = None


@dataclass
class WorkerStats:
    """Snapshot of worker counters."""

    pid: int
    queued: int = 0
    delivered: int = 0
    failed: int = 0
    pending: int = 0
    avg_delivery_seconds: float = 0.0
    uptime_seconds: float = 0.0
