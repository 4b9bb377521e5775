"""On-demand spawning of the single background worker."""

import sys
from typing import List, Optional

from motion_notify.domain.protocols import IProcessSpawner
from motion_notify.infrastructure.config.loader import UploaderSettings
from motion_notify.infrastructure.process.spawner import SubprocessSpawner
from motion_notify.infrastructure.storage.pid_marker import PidMarker
from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)


class Launcher:
    """
    Starts a worker when none is reachable, at most once per PID marker.

    The marker's existence alone decides whether to spawn; whether a live
    process stands behind it is only checked for the stale-marker warning
    and, when enabled, to reclaim it.
    """

    def __init__(
        self,
        settings: UploaderSettings,
        marker: PidMarker,
        spawner: Optional[IProcessSpawner] = None,
        python: Optional[str] = None
    ):
        self.settings = settings
        self.marker = marker
        self.spawner = spawner or SubprocessSpawner()
        self.python = python or sys.executable
        self._logger = get_logger(__name__)

    def worker_command(self) -> List[str]:
        """Command line that starts a worker with this client's configuration."""
        settings = self.settings
        args = [
            self.python, "-m", "motion_notify", "--start",
            "--folder-id", settings.folder_id,
            "--config", str(settings.config_path.resolve()),
            "--endpoint", settings.endpoint,
            "--pid", str(self.marker.marker_path.resolve()),
        ]
        if not settings.unlink:
            args.append("--no-unlink")
        if settings.log_path is not None:
            args.extend(["--log", str(settings.log_path.resolve())])
        return args

    def ensure_worker(self) -> bool:
        """
        Spawn a worker unless another client already claimed the marker.

        Returns:
            True if this call spawned the worker

        Raises:
            SpawnError: If the claim succeeded but the process failed to start
        """
        if self.marker.exists():
            if not self._reclaim_if_stale():
                self._logger.debug(f"Worker spawn already claimed ({self.marker.marker_path})")
                return False
        elif not self.marker.claim():
            self._logger.debug("Lost the spawn race, another client is starting the worker")
            return False

        try:
            pid = self.spawner.spawn(self.worker_command())
        except Exception:
            self.marker.remove()
            raise

        self.marker.record_pid(pid)
        self._logger.info(f"Started worker pid={pid} on {self.settings.endpoint}")
        return True

    def _reclaim_if_stale(self) -> bool:
        """Return True if a stale marker was replaced by this launcher's claim."""
        pid = self.marker.read_pid()
        if not self.marker.is_stale():
            return False

        if not self.settings.reclaim_stale_marker:
            self._logger.warning(
                f"Marker {self.marker.marker_path} names pid {pid}, which is not running; "
                f"remove the file to allow a new worker to start"
            )
            return False

        if not self.marker.reclaim_if_stale():
            self._logger.debug(f"Stale marker {self.marker.marker_path} already reclaimed by another client")
            return False

        self._logger.warning(f"Reclaimed stale marker {self.marker.marker_path} (pid {pid} is gone)")
        return True
