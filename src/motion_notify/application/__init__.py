"""Application layer package."""

from motion_notify.application.job_queue import JobQueue
from motion_notify.application.worker import Worker
from motion_notify.application.launcher import Launcher
from motion_notify.application.client import UploadClient
from motion_notify.application.service import WorkerService, build_worker_service

__all__ = [
    "JobQueue",
    "Worker",
    "Launcher",
    "UploadClient",
    "WorkerService",
    "build_worker_service",
]
