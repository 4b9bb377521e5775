"""Detached process spawning."""

import os
import subprocess
from typing import List

from motion_notify.domain.exceptions import SpawnError
from motion_notify.shared.logging import get_logger

logger = get_logger(__name__)


class SubprocessSpawner:
    """
    Starts processes that outlive the caller.
    Implements IProcessSpawner protocol.

    The child gets its own session and no inherited stdio, so the short
    lived client can exit (and its terminal close) without taking the
    worker down.
    """

    def spawn(self, args: List[str]) -> int:
        """
        Start a detached process.

        Args:
            args: Program and arguments

        Returns:
            PID of the started process

        Raises:
            SpawnError: If the process cannot be started
        """
        kwargs = {
            'stdin': subprocess.DEVNULL,
            'stdout': subprocess.DEVNULL,
            'stderr': subprocess.DEVNULL,
            'close_fds': True,
        }
        if os.name == 'nt':
            kwargs['creationflags'] = (
                subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
            )
        else:
            kwargs['start_new_session'] = True

        try:
            proc = subprocess.Popen(args, **kwargs)
        except OSError as e:
            raise SpawnError(f"Failed to start {args[0]}: {e}") from e

        logger.info(f"Spawned detached process pid={proc.pid}")
        return proc.pid
