"""Split the page range into per-worker partitions."""
import math
from dataclasses import dataclass
from pathlib import Path

MERGED_FILENAME = "properties.json"


@dataclass(frozen=True)
class Partition:
    """A contiguous page range owned by one worker."""

    partition_id: int
    start_page: int
    end_page: int
    output_path: Path

    @property
    def page_count(self) -> int:
        return self.end_page - self.start_page + 1


def partition_filename(partition_id: int) -> str:
    return f"properties-{partition_id}.json"


def plan_partitions(total_pages: int, worker_count: int, output_dir: Path) -> list[Partition]:
    """Cover [1, total_pages] with contiguous, non-overlapping partitions.

    Each partition gets ceil(total_pages / worker_count) pages; the last one
    takes whatever remains. Fewer than worker_count partitions are returned
    when the ranges run out early (e.g. 10 pages over 6 workers).
    """
    if total_pages < 1:
        raise ValueError(f"total_pages must be >= 1, got {total_pages}")
    if worker_count < 1:
        raise ValueError(f"worker_count must be >= 1, got {worker_count}")

    pages_per_worker = math.ceil(total_pages / worker_count)
    output_dir = Path(output_dir)
    partitions = []
    for i in range(worker_count):
        start_page = i * pages_per_worker + 1
        if start_page > total_pages:
            break
        end_page = min((i + 1) * pages_per_worker, total_pages)
        partitions.append(
            Partition(
                partition_id=i + 1,
                start_page=start_page,
                end_page=end_page,
                output_path=output_dir / partition_filename(i + 1),
            )
        )
    return partitions
