"""Merge partition files into the final dataset."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

from soldscraper.parse.models import ScrapedListingRecord
from soldscraper.store.checkpoint import CheckpointError, check_page_range, load_records, save_records

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Outcome of the merge stage."""

    output_path: Path
    records: list[ScrapedListingRecord]
    per_partition: dict[str, int] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    unreadable: list[str] = field(default_factory=list)
    duplicates_dropped: int = 0

    @property
    def total(self) -> int:
        return len(self.records)


def dedupe_records(records: Iterable[ScrapedListingRecord]) -> tuple[list[ScrapedListingRecord], int]:
    """Keep the first record per (address, sold_date, sold_price)."""
    seen = set()
    kept = []
    dropped = 0
    for record in records:
        key = record.dedupe_key
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        kept.append(record)
    return kept, dropped


def sort_records(records: Iterable[ScrapedListingRecord]) -> list[ScrapedListingRecord]:
    """Newest sale first. Stable: equal dates keep their input order."""
    return sorted(records, key=lambda r: r.sold_date, reverse=True)


def read_partitions(
    partition_files: Sequence[Path],
    result: MergeResult,
    page_ranges: Optional[Sequence[tuple[int, int]]] = None,
) -> list[ScrapedListingRecord]:
    """Concatenate partition files in order. Missing or unreadable files count as empty.

    With ``page_ranges`` (one per file), a file holding records from pages
    outside its range is unreadable too.
    """
    combined: list[ScrapedListingRecord] = []
    ranges = list(page_ranges) if page_ranges is not None else [None] * len(partition_files)
    for path, page_range in zip(partition_files, ranges):
        path = Path(path)
        if not path.exists():
            logger.info(f"  {path.name}: no output file found")
            result.missing.append(str(path))
            result.per_partition[path.name] = 0
            continue
        try:
            records = load_records(path)
            if page_range:
                check_page_range(records, *page_range, source=path)
        except CheckpointError as e:
            logger.warning(f"  {path.name}: unreadable, treated as empty ({e})")
            result.unreadable.append(str(path))
            result.per_partition[path.name] = 0
            continue
        logger.info(f"  {path.name}: {len(records)} records")
        result.per_partition[path.name] = len(records)
        combined.extend(records)
    return combined


async def merge_partitions(
    partition_files: Sequence[Path],
    output_path: Path,
    dedupe: bool = False,
    page_ranges: Optional[Sequence[tuple[int, int]]] = None,
) -> MergeResult:
    """Read, concatenate, optionally dedupe, sort and write the merged dataset."""
    logger.info("Merging results...")
    result = MergeResult(output_path=Path(output_path), records=[])

    combined = read_partitions(partition_files, result, page_ranges)
    if dedupe:
        combined, result.duplicates_dropped = dedupe_records(combined)
        if result.duplicates_dropped:
            logger.warning(f"Dropped {result.duplicates_dropped} duplicate records")

    result.records = sort_records(combined)
    await save_records(result.output_path, result.records)
    logger.info(f"Merged {result.total} records into {result.output_path}")
    return result
