"""Bounded retry utilities."""

import time
from typing import Callable, TypeVar, Optional, Type, Tuple

from motion_notify.shared.logging import get_logger

T = TypeVar('T')

logger = get_logger(__name__)


class RetryStrategy:
    """
    Bounded retry with a fixed wait between attempts.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates on the attempt that raised it.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    def execute(
        self,
        func: Callable[..., T],
        *args,
        retry_on: Tuple[Type[Exception], ...] = (Exception,),
        before_retry: Optional[Callable[[int, Exception], None]] = None,
        **kwargs
    ) -> T:
        """
        Execute a function with retry logic.

        Args:
            func: Function to execute
            *args: Positional arguments for the function
            retry_on: Exception types that trigger another attempt
            before_retry: Called with (attempt, error) before each wait
            **kwargs: Keyword arguments for the function

        Returns:
            Function result

        Raises:
            The last retryable exception once all attempts are used, or any
            non-retryable exception immediately
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return func(*args, **kwargs)
            except retry_on as e:
                if attempt >= self.max_attempts:
                    logger.debug(f"Giving up after {attempt} attempts: {e}")
                    raise

                if before_retry is not None:
                    before_retry(attempt, e)

                logger.debug(
                    f"Attempt {attempt}/{self.max_attempts} failed ({e}), "
                    f"retrying in {self.backoff_seconds:.2f}s"
                )
                self._sleep(self.backoff_seconds)
