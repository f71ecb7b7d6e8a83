"""Rate limiter per domain."""
import asyncio
import logging
import random
import time
from collections import defaultdict
from typing import Dict
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class RateLimiter:
    """Spaces out page loads per domain, with random jitter.

    A worker loads one page at a time, so no locking is needed.
    """

    def __init__(self, rate_per_second: float, jitter: float = 0.0):
        self.rate_per_second = rate_per_second
        self.min_interval = 1.0 / rate_per_second if rate_per_second > 0 else 0
        self.jitter = jitter
        self._last_request: Dict[str, float] = defaultdict(lambda: 0.0)

    def _get_domain(self, url: str) -> str:
        """Extract domain from URL."""
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}"

    def _interval(self) -> float:
        if not self.min_interval or not self.jitter:
            return self.min_interval
        return self.min_interval * random.uniform(1 - self.jitter, 1 + self.jitter)

    async def acquire(self, url: str) -> float:
        """Wait if necessary to respect rate limit. Returns seconds waited."""
        domain = self._get_domain(url)
        last = self._last_request[domain]
        elapsed = time.monotonic() - last
        interval = self._interval()

        waited = 0.0
        if last and elapsed < interval:
            waited = interval - elapsed
            await asyncio.sleep(waited)

        self._last_request[domain] = time.monotonic()
        return waited
