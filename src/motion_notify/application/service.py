"""Assembly and lifecycle of the worker process."""

import signal
import threading
from typing import Optional, Protocol

from motion_notify.application.worker import Worker
from motion_notify.infrastructure.config.loader import SinkCredentials, UploaderSettings
from motion_notify.infrastructure.ipc.endpoint import RemoteEndpoint
from motion_notify.infrastructure.ipc.server import create_app, create_server
from motion_notify.infrastructure.storage.b2_sink import create_sink
from motion_notify.infrastructure.storage.pid_marker import PidMarker
from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)


class IServer(Protocol):
    """Blocking server whose ``run()`` returns on shutdown."""

    def run(self) -> None:
        ...


class WorkerService:
    """Runs the drain loop and the remote surface, then releases the marker."""

    def __init__(
        self,
        worker: Worker,
        server: IServer,
        marker: Optional[PidMarker] = None,
        shutdown_timeout: float = 5.0
    ):
        self.worker = worker
        self.server = server
        self.marker = marker
        self.shutdown_timeout = shutdown_timeout
        self._logger = get_logger(__name__)

    def run(self) -> None:
        """
        Serve until the server stops.

        The marker is removed on every exit path, including signal-driven
        shutdown and exceptions raised while serving.
        """
        self._logger.info("Worker starting")
        previous = self._install_sigterm_handler()
        try:
            self.worker.start()
            self.server.run()
        finally:
            self.worker.stop(self.shutdown_timeout)
            if self.marker is not None:
                self.marker.remove()
            self._logger.info("Worker stopped")
            if previous is not None:
                signal.signal(signal.SIGTERM, previous)

    def _install_sigterm_handler(self):
        """
        Turn SIGTERM into SystemExit so ``finally`` blocks run.

        uvicorn restores the previous handler and re-raises the signal
        after its graceful shutdown; with the default handler the process
        would die before the marker is removed.
        """
        if threading.current_thread() is not threading.main_thread():
            return None

        def _terminate(signum, frame):
            raise SystemExit(128 + signum)

        return signal.signal(signal.SIGTERM, _terminate)


def build_worker_service(
    settings: UploaderSettings,
    credentials: SinkCredentials
) -> WorkerService:
    """Wire sink, worker, HTTP surface and marker from configuration."""
    endpoint = RemoteEndpoint.parse(settings.endpoint)
    worker = Worker(
        sink=create_sink(credentials),
        folder_id=settings.folder_id,
        unlink=settings.unlink,
        poll_interval=settings.poll_interval,
    )
    server = create_server(create_app(worker), endpoint)
    marker = PidMarker(settings.pid_path) if settings.pid_path else None
    logger.info(f"Worker for folder {settings.folder_id} listening on {endpoint}")
    return WorkerService(worker, server, marker, settings.shutdown_timeout)
