"""In-process FIFO of pending jobs."""

import threading
from collections import deque
from typing import Deque, Optional

from motion_notify.domain.models import Job


class JobQueue:
    """Unbounded FIFO whose push and pop share one lock."""

    def __init__(self):
        self._jobs: Deque[Job] = deque()
        self._lock = threading.Lock()

    def push(self, job: Job) -> int:
        """Append a job at the tail and return the new depth."""
        with self._lock:
            self._jobs.append(job)
            return len(self._jobs)

    def pop(self) -> Optional[Job]:
        """Remove and return the head job, or None when empty."""
        with self._lock:
            if not self._jobs:
                return None
            return self._jobs.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
