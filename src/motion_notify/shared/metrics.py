"""Metrics collection for the worker."""

import threading
import time
from typing import Dict, List
from collections import defaultdict


class MetricsCollector:
    """
    Thread-safe counters and timers.

    Counters are bumped from request threads and the drain thread alike.
    """

    def __init__(self):
        self._start_time = time.time()
        self._lock = threading.Lock()
        self._timers: Dict[str, float] = {}
        self._durations: Dict[str, List[float]] = defaultdict(list)
        self._counters: Dict[str, int] = defaultdict(int)

    def start_timer(self, name: str) -> None:
        """Start a named timer."""
        with self._lock:
            self._timers[name] = time.time()

    def stop_timer(self, name: str) -> float:
        """
        Stop a named timer and return elapsed time.

        Raises:
            KeyError: If timer was not started
        """
        with self._lock:
            if name not in self._timers:
                raise KeyError(f"Timer '{name}' was not started")
            elapsed = time.time() - self._timers.pop(name)
            self._durations[name].append(elapsed)
        return elapsed

    def average_duration(self, name: str) -> float:
        """Mean of the recorded durations of a timer, 0.0 if it never stopped."""
        with self._lock:
            durations = self._durations.get(name)
            if not durations:
                return 0.0
            return sum(durations) / len(durations)

    def increment_counter(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        with self._lock:
            self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        with self._lock:
            return self._counters.get(name, 0)

    def elapsed_time(self) -> float:
        """Get total elapsed time since initialization."""
        return time.time() - self._start_time
