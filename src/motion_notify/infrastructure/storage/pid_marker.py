"""PID marker file guarding worker spawns."""

import os
from pathlib import Path
from typing import Optional, Union

from filelock import FileLock

from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)


class PidMarker:
    """
    Marker file whose presence means a worker spawn has been claimed.

    The file is created with an exclusive create, so out of any number of
    processes calling ``claim()`` on the same path only one succeeds.
    """

    def __init__(self, marker_path: Union[str, Path]):
        """
        Initialize PID marker.

        Args:
            marker_path: Path to marker file
        """
        self.marker_path = Path(marker_path)
        self._logger = get_logger(__name__)

    def claim(self) -> bool:
        """
        Atomically create the marker.

        Returns:
            True if this call created it, False if it already existed
        """
        self.marker_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(self.marker_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            self._logger.debug(f"Marker already claimed: {self.marker_path}")
            return False
        os.close(fd)
        self._logger.info(f"Claimed worker marker: {self.marker_path}")
        return True

    def record_pid(self, pid: int) -> None:
        """Write the worker PID into the marker (best effort, for diagnostics)."""
        try:
            self.marker_path.write_text(f"{pid}\n")
        except OSError as e:
            self._logger.warning(f"Failed to record pid {pid} in {self.marker_path}: {e}")

    def read_pid(self) -> Optional[int]:
        """Return the recorded PID, or None if absent or unreadable."""
        try:
            content = self.marker_path.read_text().strip()
        except OSError:
            return None
        try:
            return int(content)
        except ValueError:
            return None

    def exists(self) -> bool:
        """Check if marker exists."""
        return self.marker_path.exists()

    def remove(self) -> None:
        """Remove the marker if present."""
        try:
            self.marker_path.unlink()
            self._logger.info(f"Removed worker marker: {self.marker_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            self._logger.error(f"Failed to remove marker {self.marker_path}: {e}")

    def is_stale(self) -> bool:
        """
        Check whether the marker points at a process that no longer runs.

        A marker without a recorded PID is never stale: its claimant may
        still be between claiming it and recording the spawned PID.
        """
        pid = self.read_pid()
        if pid is None or os.name == "nt":
            return False
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return True
        except PermissionError:
            # Alive, owned by another user
            return False
        return False

    @property
    def lock_path(self) -> Path:
        """Sidecar lock file serializing stale-marker reclaims."""
        return self.marker_path.with_name(self.marker_path.name + ".lock")

    def reclaim_if_stale(self) -> bool:
        """
        Replace a stale marker with a fresh claim.

        The staleness check, removal and new claim run under a file lock
        shared by every reclaimer, so a marker freshly claimed by another
        reclaimer is never removed as stale.

        Returns:
            True if this call removed a stale marker and claimed it anew
        """
        self.marker_path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(self.lock_path)):
            if not self.is_stale():
                return False
            self.remove()
            return self.claim()
