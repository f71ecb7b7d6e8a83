"""Logging setup shared by the job and worker processes."""
import logging
import sys
from typing import Optional

from soldscraper.config import config

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
WORKER_LOG_FORMAT = "%(asctime)s %(levelname)-7s [worker {worker_id}] %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None, worker_id: Optional[str] = None) -> None:
    """Configure the root logger once per process.

    Worker processes share the orchestrator's stderr, so their lines carry the
    worker id.
    """
    fmt = WORKER_LOG_FORMAT.format(worker_id=worker_id) if worker_id else LOG_FORMAT
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format=fmt,
        stream=sys.stderr,
        force=True,
    )
    # asyncio logs subprocess transport details at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
