import time

from loguru import logger


class RateLimiter:
    """Enforces a minimum spacing between outbound oracle calls.

    Holds the timestamp of the last call. Not thread-safe: one limiter is
    owned by one oracle and used by sequential stages only.
    """

    def __init__(self, min_interval: float, clock=time.monotonic, sleep=time.sleep):
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self.last_call = clock()

    def wait(self):
        elapsed = self.clock() - self.last_call
        remaining = self.min_interval - elapsed
        if remaining > 0:
            logger.debug(f"Rate limit: sleeping {remaining:.3f}s")
            self.sleep(remaining)
        self.last_call = self.clock()
