"""Job run report exporter."""
import json
import time
from pathlib import Path
from typing import Dict

import aiofiles

REPORT_FILENAME = "job_runs.jsonl"


class RunReportExporter:
    """Appends one JSON line per job run to the output directory."""

    def __init__(self, run_id: str, output_dir: Path):
        self.run_id = run_id
        self.report_file = Path(output_dir) / REPORT_FILENAME
        self.start_time = time.time()

    async def export(
        self,
        total_pages: int,
        partitions: list[Dict],
        exit_codes: Dict[int, int],
        merged_records: int,
        duplicates_dropped: int,
        unreadable: list[str],
    ) -> Dict:
        """Append the run summary and return it."""
        failed = sorted(pid for pid, code in exit_codes.items() if code != 0)
        report = {
            "ts": time.time(),
            "run_id": self.run_id,
            "total_pages": total_pages,
            "partitions": partitions,
            "exit_codes": {str(pid): code for pid, code in sorted(exit_codes.items())},
            "failed_partitions": failed,
            "merged_records": merged_records,
            "duplicates_dropped": duplicates_dropped,
            "unreadable_files": unreadable,
            "elapsed_seconds": round(time.time() - self.start_time, 2),
        }

        line = json.dumps(report) + "\n"
        async with aiofiles.open(self.report_file, "a") as f:
            await f.write(line)
        return report
