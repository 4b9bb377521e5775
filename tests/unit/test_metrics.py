"""Test metrics collector."""

import threading
import time
from unittest.mock import patch

import pytest

from motion_notify.shared.metrics import MetricsCollector


def test_metrics_timer():
    """Test timer functionality."""
    metrics = MetricsCollector()

    metrics.start_timer('delivery')
    time.sleep(0.05)
    elapsed = metrics.stop_timer('delivery')

    assert elapsed >= 0.05
    assert metrics.average_duration('delivery') == elapsed


def test_stop_unknown_timer():
    with pytest.raises(KeyError):
        MetricsCollector().stop_timer('missing')


def test_average_duration():
    """Test the mean over several timed runs."""
    with patch('motion_notify.shared.metrics.time') as clock:
        clock.time.side_effect = [100.0, 101.0, 102.0, 110.0, 113.0]
        metrics = MetricsCollector()
        metrics.start_timer('delivery')
        metrics.stop_timer('delivery')
        metrics.start_timer('delivery')
        metrics.stop_timer('delivery')

    assert metrics.average_duration('delivery') == 2.0


def test_average_duration_without_runs():
    assert MetricsCollector().average_duration('delivery') == 0.0


def test_metrics_counter_across_threads():
    """Test counters stay exact under concurrent increments."""
    metrics = MetricsCollector()

    def bump():
        for _ in range(1000):
            metrics.increment_counter('queued')

    threads = [threading.Thread(target=bump) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert metrics.get_counter('queued') == 8000
