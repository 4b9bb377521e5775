"""Client side of the upload queue."""

from typing import Optional

from motion_notify.domain.models import Job
from motion_notify.domain.protocols import IWorkerStub
from motion_notify.domain.exceptions import ConnectivityError, WorkerUnavailableError
from motion_notify.application.launcher import Launcher
from motion_notify.shared.logging import get_logger
from motion_notify.shared.retry import RetryStrategy

logger = get_logger(__name__)


class UploadClient:
    """
    Delivers one job to the worker, booting the worker if needed.

    Only connectivity failures are retried, each preceded by a spawn
    attempt and a fixed wait. Other remote errors propagate at once.
    """

    def __init__(
        self,
        stub: IWorkerStub,
        launcher: Launcher,
        retry: Optional[RetryStrategy] = None
    ):
        self.stub = stub
        self.launcher = launcher
        self.retry = retry or RetryStrategy(max_attempts=5, backoff_seconds=1.0)
        self._logger = get_logger(__name__)

    def submit(self, job: Job) -> int:
        """
        Enqueue a job on the worker.

        Returns:
            Queue depth reported by the worker

        Raises:
            WorkerUnavailableError: If the worker stayed unreachable for every attempt
            RemoteCallError: If the worker was reached but rejected the call
        """
        try:
            depth = self.retry.execute(
                self.stub.enqueue,
                job,
                retry_on=(ConnectivityError,),
                before_retry=self._on_unreachable,
            )
        except ConnectivityError as e:
            raise WorkerUnavailableError(
                f"Could not reach or start worker at {self.launcher.settings.endpoint} "
                f"after {self.retry.max_attempts} attempts"
            ) from e

        self._logger.debug(f"Submitted {job.blob_name} (queue depth {depth})")
        return depth

    def _on_unreachable(self, attempt: int, error: Exception) -> None:
        self._logger.debug(f"Worker unreachable on attempt {attempt}: {error}")
        if self.launcher.ensure_worker():
            self._logger.info("No worker was running, started one")
