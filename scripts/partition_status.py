#!/usr/bin/env python3
"""Show the checkpoint state of every partition file in a directory."""
import argparse
import math
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from soldscraper.config import DATA_DIR
from soldscraper.jobs.partition import plan_partitions
from soldscraper.store.checkpoint import CheckpointError, last_completed_page, load_records, resume_page


def show_status(output_dir: Path, total_pages: int, workers: int) -> int:
    """Print one line per partition. Returns the number of incomplete partitions."""
    incomplete = 0
    pages_per_worker = math.ceil(total_pages / workers)
    print(f"{'id':>3}  {'range':>13}  {'records':>8}  {'last page':>9}  {'resume at':>9}  status")
    for p in plan_partitions(total_pages, workers, output_dir):
        label = f"{p.start_page}-{p.end_page}"
        try:
            records = load_records(p.output_path)
            last = last_completed_page(records)
            nxt = resume_page(records, p.start_page, p.end_page)
        except CheckpointError as e:
            print(f"{p.partition_id:>3}  {label:>13}  {'?':>8}  {'?':>9}  {'?':>9}  unreadable: {e}")
            incomplete += 1
            continue

        if not p.output_path.exists():
            status = "not started"
        elif nxt > p.end_page:
            status = "done"
        else:
            status = f"{nxt - p.start_page}/{p.page_count} pages"
        if status != "done":
            incomplete += 1
        print(
            f"{p.partition_id:>3}  {label:>13}  {len(records):>8}  "
            f"{last if last is not None else '-':>9}  {nxt if nxt <= p.end_page else '-':>9}  {status}"
        )
    print(f"\n{pages_per_worker} pages per partition, {incomplete} incomplete")
    return incomplete


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--total-pages", type=int, required=True, help="Total pages of the job")
    parser.add_argument("--workers", type=int, required=True, help="Worker count of the job")
    parser.add_argument("--output-dir", type=Path, default=DATA_DIR, help="Job output directory")
    args = parser.parse_args()

    incomplete = show_status(args.output_dir, args.total_pages, args.workers)
    sys.exit(1 if incomplete else 0)


if __name__ == "__main__":
    main()
