"""Metrics tracking for worker progress."""
import time
import logging
from collections import defaultdict
from typing import Dict

logger = logging.getLogger(__name__)


class Metrics:
    """Track pages and records for one worker and calculate ETA."""

    def __init__(self, total_pages: int):
        self.total_pages = total_pages
        self.start_time = time.time()
        self.counters: Dict[str, int] = defaultdict(int)

    def increment(self, key: str, amount: int = 1) -> None:
        """Increment a counter."""
        self.counters[key] += amount

    def get_rate(self) -> float:
        """Get current processing rate (pages/second)."""
        elapsed = time.time() - self.start_time
        pages = self.counters.get("pages", 0)
        if elapsed > 0:
            return pages / elapsed
        return 0.0

    def get_eta(self) -> float:
        """Get estimated time remaining in seconds."""
        rate = self.get_rate()
        if rate <= 0:
            return 0.0
        remaining = self.total_pages - self.counters.get("pages", 0)
        return max(remaining, 0) / rate

    def format_eta(self) -> str:
        """Format ETA as human-readable string."""
        eta_seconds = self.get_eta()
        if eta_seconds < 60:
            return f"{eta_seconds:.0f}s"
        elif eta_seconds < 3600:
            return f"{eta_seconds / 60:.1f}m"
        else:
            return f"{eta_seconds / 3600:.1f}h"

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        return {
            "total_pages": self.total_pages,
            "pages": self.counters.get("pages", 0),
            "records": self.counters.get("records", 0),
            "rejected": self.counters.get("rejected", 0),
            "rate": round(self.get_rate(), 3),
            "elapsed_seconds": round(time.time() - self.start_time, 1),
        }
