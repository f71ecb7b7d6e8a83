"""Partition checkpoint files.

A checkpoint is the partition's whole output so far: a pretty-printed JSON
array of records, rewritten after every page. Writes go to a temp file that is
renamed over the target, so the file on disk is always a complete array.
"""
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
import orjson
from pydantic import ValidationError

from soldscraper.fetch.endpoints import page_number_from_url
from soldscraper.parse.models import ScrapedListingRecord

logger = logging.getLogger(__name__)


class CheckpointError(RuntimeError):
    """A checkpoint file exists but cannot be used."""


def dump_records(records: Iterable[ScrapedListingRecord]) -> bytes:
    payload = [record.model_dump(mode="json") for record in records]
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2) + b"\n"


def parse_records(raw: bytes, source: Path) -> list[ScrapedListingRecord]:
    """Decode a records file. Raises CheckpointError on any problem."""
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise CheckpointError(f"{source} is not valid JSON: {e}") from e
    if not isinstance(payload, list):
        raise CheckpointError(f"{source} does not hold a JSON array")
    try:
        return [ScrapedListingRecord.model_validate(item) for item in payload]
    except ValidationError as e:
        raise CheckpointError(f"{source} holds an invalid record: {e}") from e


def load_records(path: Path) -> list[ScrapedListingRecord]:
    """Load a records file. A missing file is an empty partition."""
    path = Path(path)
    if not path.exists():
        return []
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise CheckpointError(f"Cannot read {path}: {e}") from e
    return parse_records(raw, path)


async def save_records(path: Path, records: Iterable[ScrapedListingRecord]) -> int:
    """Atomically replace ``path`` with ``records``. Returns bytes written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = dump_records(records)
    tmp_path = path.with_name(f".{path.name}.tmp")
    async with aiofiles.open(tmp_path, "wb") as f:
        await f.write(data)
        await f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)
    return len(data)


def last_completed_page(records: list[ScrapedListingRecord]) -> Optional[int]:
    """Page number of the last checkpointed record, or None for an empty checkpoint."""
    if not records:
        return None
    last_url = records[-1].source_page_url
    page = page_number_from_url(last_url)
    if page is None:
        raise CheckpointError(f"Cannot read a page number from {last_url!r}")
    return page


def check_page_range(
    records: Iterable[ScrapedListingRecord],
    start_page: int,
    end_page: int,
    source: Optional[Path] = None,
) -> None:
    """Raise CheckpointError if any record was read from a page outside [start_page, end_page].

    This is the case for a file written under a different partition plan.
    """
    for record in records:
        page = page_number_from_url(record.source_page_url)
        if page is None:
            raise CheckpointError(f"Cannot read a page number from {record.source_page_url!r}")
        if not start_page <= page <= end_page:
            raise CheckpointError(
                f"{source or 'Checkpoint'} holds a record from page {page}, "
                f"outside pages {start_page}-{end_page}"
            )


def resume_page(records: list[ScrapedListingRecord], start_page: int, end_page: int) -> int:
    """Next page to fetch for a partition. ``end_page + 1`` means done."""
    check_page_range(records, start_page, end_page)
    last = last_completed_page(records)
    if last is None:
        return start_page
    return max(start_page, min(last + 1, end_page + 1))
