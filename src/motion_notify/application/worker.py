"""Queue owner and drain loop of the background worker."""

import os
import threading
from typing import Dict, Optional

from motion_notify.domain.models import Job, WorkerStats
from motion_notify.domain.protocols import IUploadSink
from motion_notify.application.job_queue import JobQueue
from motion_notify.shared.logging import get_logger
from motion_notify.shared.metrics import MetricsCollector

logger = get_logger(__name__)


class Worker:
    """
    Owns the job queue and delivers jobs to the sink one at a time.

    ``enqueue`` may be called from any number of threads. A single drain
    thread pops jobs under the queue lock and delivers them outside it, so
    a slow upload never blocks new enqueues. Delivery is at-most-once: a
    job whose delivery fails is logged and dropped.
    """

    def __init__(
        self,
        sink: IUploadSink,
        folder_id: str,
        unlink: bool = True,
        poll_interval: float = 1.0,
        queue: Optional[JobQueue] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        """
        Initialize worker.

        Args:
            sink: Storage the jobs are delivered to
            folder_id: Parent container for the per-day containers
            unlink: Delete source files after a successful upload
            poll_interval: Idle wait between queue checks, in seconds
            queue: Queue instance (a fresh one by default)
            metrics: Metrics collector (a fresh one by default)
        """
        self.sink = sink
        self.folder_id = folder_id
        self.unlink = unlink
        self.poll_interval = poll_interval

        self._queue = queue if queue is not None else JobQueue()
        self._metrics = metrics or MetricsCollector()
        self._containers: Dict[str, str] = {}
        self._containers_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._logger = get_logger(__name__)

    def enqueue(self, job: Job) -> int:
        """
        Append a job to the queue.

        Returns:
            Queue depth after the push
        """
        depth = self._queue.push(job)
        self._metrics.increment_counter("queued")
        self._logger.info(
            f"queued {job.date_title} {job.blob_name} from {job.source_path} (depth {depth})"
        )
        return depth

    def container_for(self, date_title: str) -> str:
        """Get or create the container for a date, cached for the worker's lifetime."""
        with self._containers_lock:
            container_id = self._containers.get(date_title)
            if container_id is None:
                container_id = self.sink.ensure_container(self.folder_id, date_title)
                self._containers[date_title] = container_id
            return container_id

    def process_next(self) -> bool:
        """
        Run one drain iteration.

        Returns:
            False if the queue was empty, True if a job was taken
        """
        job = self._queue.pop()
        if job is None:
            return False

        self._metrics.start_timer("delivery")
        try:
            self._deliver(job)
        except Exception:
            self._metrics.increment_counter("failed")
            self._logger.critical(
                f"Failed to upload {job.source_path} as {job.date_title}/{job.blob_name}, dropping job",
                exc_info=True
            )
        else:
            self._metrics.increment_counter("delivered")
        finally:
            self._metrics.stop_timer("delivery")
        return True

    def _deliver(self, job: Job) -> None:
        container_id = self.container_for(job.date_title)
        result = self.sink.upload_blob(container_id, job.blob_name, job.source_path)
        self._logger.info(
            f"Uploaded {job.source_path} -> {result.key or job.blob_name} ({result.size_bytes} bytes)"
        )
        if job.delete_after_upload:
            try:
                job.source_path.unlink()
            except OSError as e:
                self._logger.warning(f"Uploaded but could not remove {job.source_path}: {e}")
            else:
                self._logger.debug(f"Removed {job.source_path}")

    def run(self) -> None:
        """Drain the queue until ``stop()`` is called."""
        self._logger.info(f"Drain loop started (poll every {self.poll_interval}s)")
        while not self._stop_event.is_set():
            if not self.process_next():
                self._stop_event.wait(self.poll_interval)
        self._logger.info("Drain loop stopped")

    def start(self) -> None:
        """Start the drain loop on a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="drain-loop", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the drain loop.

        Waits at most ``timeout`` seconds for an in-flight delivery; the
        thread is a daemon, so an unfinished one dies with the process.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                self._logger.warning(
                    f"Drain loop still busy after {timeout}s, {len(self._queue)} job(s) left unsent"
                )
            self._thread = None

    @property
    def pending(self) -> int:
        return len(self._queue)

    def stats(self) -> WorkerStats:
        """Return current counters."""
        return WorkerStats(
            pid=os.getpid(),
            queued=self._metrics.get_counter("queued"),
            delivered=self._metrics.get_counter("delivered"),
            failed=self._metrics.get_counter("failed"),
            pending=self.pending,
            avg_delivery_seconds=self._metrics.average_duration("delivery"),
            uptime_seconds=self._metrics.elapsed_time(),
        )
