"""Domain layer package."""

from .models import Job, UploadResult, WorkerStats
from .exceptions import (
    DomainException,
    ConfigurationError,
    ConnectivityError,
    RemoteCallError,
    WorkerUnavailableError,
    SpawnError,
    UploadError,
)
from .protocols import (
    IUploadSink,
    IWorkerStub,
    IJobReceiver,
    IProcessSpawner,
)

__all__ = [
    # Models
    "Job",
    "UploadResult",
    "WorkerStats",
    # Exceptions
    "DomainException",
    "ConfigurationError",
    "ConnectivityError",
    "RemoteCallError",
    "WorkerUnavailableError",
    "SpawnError",
    "UploadError",
    # Protocols
    "IUploadSink",
    "IWorkerStub",
    "IJobReceiver",
    "IProcessSpawner",
]
