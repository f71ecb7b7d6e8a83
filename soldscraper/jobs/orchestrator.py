"""Job orchestrator: run one worker process per partition, then merge."""
import asyncio
import logging
import os
import sys
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from soldscraper.config import PROJECT_ROOT, config
from soldscraper.jobs.partition import MERGED_FILENAME, Partition, plan_partitions
from soldscraper.jobs.report import RunReportExporter
from soldscraper.store.merge import MergeResult, merge_partitions

logger = logging.getLogger(__name__)

WORKER_MODULE = "soldscraper.jobs.worker"
SPAWN_FAILED = -1


class JobRunner:
    """Partitions the page range, runs the workers, merges their output."""

    def __init__(
        self,
        total_pages: int,
        output_dir: Path,
        workers: Optional[int] = None,
        cleanup: bool = False,
        dedupe: bool = False,
        location: Optional[str] = None,
        replay_dir: Optional[Path] = None,
        headed: bool = False,
        dev: bool = False,
    ):
        self.total_pages = total_pages
        self.output_dir = Path(output_dir)
        self.workers = config.WORKERS if workers is None else workers
        self.cleanup = cleanup
        self.dedupe = dedupe
        self.location = location
        self.replay_dir = Path(replay_dir) if replay_dir else None
        self.headed = headed
        self.dev = dev

        self.run_id = str(uuid.uuid4())
        self.partitions: list[Partition] = plan_partitions(total_pages, self.workers, self.output_dir)
        self.exit_codes: dict[int, int] = {}

    @property
    def merged_path(self) -> Path:
        return self.output_dir / MERGED_FILENAME

    def worker_command(self, partition: Partition) -> list[str]:
        """Command line for one worker process."""
        cmd = [
            sys.executable,
            "-m",
            WORKER_MODULE,
            "--worker-id", str(partition.partition_id),
            "--start-page", str(partition.start_page),
            "--end-page", str(partition.end_page),
            "--output-file", str(partition.output_path),
        ]
        if self.location:
            cmd += ["--location", self.location]
        if self.replay_dir:
            cmd += ["--replay-dir", str(self.replay_dir)]
        if self.headed:
            cmd.append("--headed")
        if self.dev:
            cmd.append("--dev")
        return cmd

    def _worker_env(self) -> dict[str, str]:
        env = dict(os.environ)
        pythonpath = env.get("PYTHONPATH")
        env["PYTHONPATH"] = f"{PROJECT_ROOT}{os.pathsep}{pythonpath}" if pythonpath else str(PROJECT_ROOT)
        return env

    async def _run_worker(self, partition: Partition) -> int:
        logger.info(
            f"Starting worker {partition.partition_id}: pages {partition.start_page}-{partition.end_page}"
        )
        try:
            process = await asyncio.create_subprocess_exec(
                *self.worker_command(partition),
                env=self._worker_env(),
            )
        except OSError as e:
            logger.error(f"Could not start worker {partition.partition_id}: {e}")
            return SPAWN_FAILED
        return await process.wait()

    async def run_workers(self) -> dict[int, int]:
        """Run every partition concurrently and wait for all of them, whatever their exit code."""
        codes = await asyncio.gather(*(self._run_worker(p) for p in self.partitions))
        self.exit_codes = {p.partition_id: code for p, code in zip(self.partitions, codes)}

        logger.info("--- All workers finished ---")
        failed = {pid: code for pid, code in self.exit_codes.items() if code != 0}
        if failed:
            logger.warning(f"{len(failed)} worker(s) failed")
            for pid, code in failed.items():
                logger.warning(f"  Worker {pid} exited with code {code}")
        return self.exit_codes

    def cleanup_partition_files(self) -> list[Path]:
        """Delete partition files of workers that completed. Failed partitions keep their resume state."""
        logger.info("Cleaning up worker files...")
        removed = []
        for partition in self.partitions:
            if self.exit_codes.get(partition.partition_id) != 0:
                logger.warning(
                    f"  Keeping {partition.output_path} (worker {partition.partition_id} did not finish)"
                )
                continue
            if partition.output_path.exists():
                partition.output_path.unlink()
                removed.append(partition.output_path)
                logger.info(f"  Deleted {partition.output_path}")
        return removed

    async def run(self) -> MergeResult:
        """Run the whole job. Worker failures are reported, never raised."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        reporter = RunReportExporter(self.run_id, self.output_dir)

        logger.info(f"Run ID: {self.run_id}")
        logger.info("Page ranges:")
        for p in self.partitions:
            logger.info(f"  Worker {p.partition_id}: pages {p.start_page}-{p.end_page}")

        await self.run_workers()

        result = await merge_partitions(
            [p.output_path for p in self.partitions],
            self.merged_path,
            dedupe=self.dedupe,
            page_ranges=[(p.start_page, p.end_page) for p in self.partitions],
        )

        if self.cleanup:
            self.cleanup_partition_files()
        else:
            logger.info("Keeping worker files for inspection (use --cleanup to remove them)")

        await reporter.export(
            total_pages=self.total_pages,
            partitions=[
                {**asdict(p), "output_path": str(p.output_path)} for p in self.partitions
            ],
            exit_codes=self.exit_codes,
            merged_records=result.total,
            duplicates_dropped=result.duplicates_dropped,
            unreadable=result.unreadable,
        )
        return result
