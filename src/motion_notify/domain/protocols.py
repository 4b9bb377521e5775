"""Protocol definitions for dependency inversion."""

from typing import Protocol, List
from pathlib import Path
from .models import Job, UploadResult, WorkerStats


class IUploadSink(Protocol):
    """Interface for the storage service artifacts are delivered to."""

    def ensure_container(self, parent_id: str, title: str) -> str:
        """Find or create a container named title under parent_id."""
        ...

    def upload_blob(self, container_id: str, name: str, source_path: Path) -> UploadResult:
        """Store the file at source_path as name inside container_id."""
        ...


class IWorkerStub(Protocol):
    """Interface for submitting jobs to a running worker."""

    def enqueue(self, job: Job) -> int:
        """Hand a job to the worker and return its queue depth."""
        ...


class IJobReceiver(Protocol):
    """Interface the remote surface uses to reach the queue owner."""

    unlink: bool

    def enqueue(self, job: Job) -> int:
        """Append a job to the queue and return the queue depth."""
        ...

    def stats(self) -> WorkerStats:
        """Return current counters."""
        ...


class IProcessSpawner(Protocol):
    """Interface for starting detached processes."""

    def spawn(self, args: List[str]) -> int:
        """Start a detached process and return its PID."""
        ...
