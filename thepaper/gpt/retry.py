"""
Exponential backoff retry shared by every oracle call site
"""

import time

from loguru import logger

from thepaper.errors import OracleError, OracleOverloadedError, RetriesExhaustedError

RATE_LIMIT_MARKERS = ("RESOURCE_EXHAUSTED", "429", "rate limit", "overloaded")


def is_rate_limited(error: Exception) -> bool:
    """True if the error is the oracle's overloaded / rate-limited signal"""
    if isinstance(error, OracleOverloadedError):
        return True
    if isinstance(error, OracleError):
        # already classified by the transport or by response parsing
        return False
    text = str(error).lower()
    return any(marker.lower() in text for marker in RATE_LIMIT_MARKERS)


class RetryPolicy:
    """
    Bounded exponential backoff

    A call gets one first attempt plus up to max_retries retries. Failed
    attempt k (1-based) with a retryable error is followed by a sleep of
    base_delay * 2**(k-1), i.e. 1, 2, 4, 8, 16 with the defaults.
    Non-retryable errors propagate immediately.
    """

    def __init__(self, max_retries=5, base_delay=1.0, is_retryable=is_rate_limited, sleep=time.sleep):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.is_retryable = is_retryable
        self.sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))

    def call(self, func, *args, **kwargs):
        last_error = None
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                delay = self.backoff(attempt - 1)
                logger.warning(f"  Retry attempt {attempt - 1}/{self.max_retries} after {delay:g}s: {last_error}")
                self.sleep(delay)
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if not self.is_retryable(e):
                    raise
                last_error = e

        raise RetriesExhaustedError(self.max_attempts, last_error) from last_error
