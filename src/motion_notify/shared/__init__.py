"""Shared utilities package."""

from motion_notify.shared.logging import setup_logger, get_logger
from motion_notify.shared.retry import RetryStrategy
from motion_notify.shared.metrics import MetricsCollector

__all__ = [
    "setup_logger",
    "get_logger",
    "RetryStrategy",
    "MetricsCollector",
]
