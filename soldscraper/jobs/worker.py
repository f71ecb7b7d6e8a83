"""Partition worker: scrape one page range, checkpointing after every page.

Run as its own process by the orchestrator::

    python -m soldscraper.jobs.worker --worker-id 1 --start-page 1 \
        --end-page 1713 --output-file data/properties-1.json
"""
import argparse
import asyncio
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

from soldscraper.config import config, Config
from soldscraper.fetch.advisory import run_advisory
from soldscraper.fetch.base import PageFetcher
from soldscraper.fetch.endpoints import get_page_url
from soldscraper.fetch.rate_limit import RateLimiter
from soldscraper.jobs.metrics import Metrics
from soldscraper.logging_conf import setup_logging
from soldscraper.parse.card_parser import parse_cards
from soldscraper.parse.models import ScrapedListingRecord
from soldscraper.store.checkpoint import load_records, resume_page, save_records
from soldscraper.store.dev_storage import DevStorage

logger = logging.getLogger(__name__)


class WorkerState(str, Enum):
    NOT_STARTED = "not_started"
    RESUMING = "resuming"
    FETCHING = "fetching"
    PARSING = "parsing"
    CHECKPOINTING = "checkpointing"
    DONE = "done"
    FAILED = "failed"


class PartitionWorker:
    """Scrapes pages [start_page, end_page] into output_path."""

    def __init__(
        self,
        worker_id: str,
        start_page: int,
        end_page: int,
        output_path: Path,
        fetcher: PageFetcher,
        location: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
        dev_storage: Optional[DevStorage] = None,
        store_html: bool = False,
    ):
        if start_page < 1 or end_page < start_page:
            raise ValueError(f"Invalid page range {start_page}-{end_page}")
        self.worker_id = worker_id
        self.start_page = start_page
        self.end_page = end_page
        self.output_path = Path(output_path)
        self.fetcher = fetcher
        self.location = location or config.LOCATION
        self.rate_limiter = rate_limiter or RateLimiter(config.RATE_PER_DOMAIN, config.RATE_JITTER)
        self.dev_storage = dev_storage
        self.store_html = store_html

        self.state = WorkerState.NOT_STARTED
        self.records: list[ScrapedListingRecord] = []
        self.pages_fetched = 0

    def _set_state(self, state: WorkerState) -> None:
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    async def run(self) -> int:
        """Scrape the remaining pages. Returns the number of pages fetched this run.

        Any fault stops the loop and propagates; the checkpoint written after
        the last good page stays on disk.
        """
        logger.info(f"Starting: pages {self.start_page}-{self.end_page} -> {self.output_path}")
        self._set_state(WorkerState.RESUMING)
        try:
            self.records = load_records(self.output_path)
            current_page = resume_page(self.records, self.start_page, self.end_page)
        except Exception:
            self._set_state(WorkerState.FAILED)
            raise

        if self.records:
            logger.info(f"Loaded {len(self.records)} existing records, resuming at page {current_page}")
        if current_page > self.end_page:
            logger.info("Partition already complete, nothing to do")
            self._set_state(WorkerState.DONE)
            return 0

        metrics = Metrics(self.end_page - current_page + 1)
        try:
            async with self.fetcher:
                for page in range(current_page, self.end_page + 1):
                    await self._scrape_page(page, first=(page == current_page), metrics=metrics)
        except Exception:
            self._set_state(WorkerState.FAILED)
            logger.info(f"Progress saved ({len(self.records)} records) up to the last completed page")
            raise

        self._set_state(WorkerState.DONE)
        logger.info(f"Complete! {len(self.records)} records saved to {self.output_path}")
        logger.info(f"Summary: {metrics.get_summary()}")
        return self.pages_fetched

    async def _scrape_page(self, page: int, first: bool, metrics: Metrics) -> None:
        url = get_page_url(page, self.location)

        self._set_state(WorkerState.FETCHING)
        await self.rate_limiter.acquire(url)
        await self.fetcher.open_page(url)
        self.pages_fetched += 1
        if first:
            consent = await run_advisory("accept consent", self.fetcher.accept_consent)
            logger.info(f"Consent banner: {'handled' if consent.ok else 'skipped'} ({consent.detail})")
        await self.fetcher.wait_for_cards()
        cards = await self.fetcher.cards()

        self._set_state(WorkerState.PARSING)
        accepted, rejected = parse_cards(
            [card.text for card in cards], url, ber_ratings=[card.ber_rating for card in cards]
        )
        if rejected:
            logger.debug(f"Page {page}: {len(rejected)} cards rejected")

        self._set_state(WorkerState.CHECKPOINTING)
        self.records.extend(accepted)
        await save_records(self.output_path, self.records)

        if self.dev_storage:
            html_content = await self.fetcher.page_html() if self.store_html else None
            self.dev_storage.save_page(
                page=page,
                url=url,
                card_count=len(cards),
                accepted_count=len(accepted),
                rejected=rejected,
                html_content=html_content,
                store_html=self.store_html,
            )

        metrics.increment("pages")
        metrics.increment("records", len(accepted))
        metrics.increment("rejected", len(rejected))
        logger.info(
            f"Page {page}/{self.end_page}: +{len(accepted)} "
            f"(total: {len(self.records)}) | ETA: {metrics.format_eta()}"
        )


def build_fetcher(replay_dir: Optional[Path] = None, headless: Optional[bool] = None) -> PageFetcher:
    """Replay saved pages when replay_dir is given, otherwise drive a real browser."""
    if replay_dir:
        from soldscraper.fetch.replay import ReplayFetcher
        return ReplayFetcher(replay_dir)
    from soldscraper.fetch.browser import PlaywrightFetcher
    return PlaywrightFetcher(headless=headless)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Scrape one partition of listing pages")
    parser.add_argument("--worker-id", required=True, help="Worker id (used in logs)")
    parser.add_argument("--start-page", type=int, required=True, help="First page (inclusive)")
    parser.add_argument("--end-page", type=int, required=True, help="Last page (inclusive)")
    parser.add_argument("--output-file", type=Path, required=True, help="Partition checkpoint file")
    parser.add_argument(
        "--location",
        default=None,
        help=f"Listing location slug (default: {config.LOCATION})",
    )
    parser.add_argument(
        "--replay-dir",
        type=Path,
        default=None,
        help="Serve pages from saved page-N.html(.gz) files instead of a browser",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode (verbose logs, per-page summaries in data/dev)",
    )
    parser.add_argument(
        "--store-html",
        action="store_true",
        help="Store gzipped page HTML in DEV mode",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    """Worker entry point. Exits 0 only when the whole range is done."""
    args = parse_args(argv)
    setup_logging(level="DEBUG" if args.dev else None, worker_id=args.worker_id)

    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)

    rate_limiter = None
    if args.replay_dir:
        rate_limiter = RateLimiter(0)

    try:
        worker = PartitionWorker(
            worker_id=args.worker_id,
            start_page=args.start_page,
            end_page=args.end_page,
            output_path=args.output_file,
            fetcher=build_fetcher(args.replay_dir, headless=False if args.headed else None),
            location=args.location,
            rate_limiter=rate_limiter,
            dev_storage=DevStorage(args.worker_id) if args.dev else None,
            store_html=args.store_html,
        )
        asyncio.run(worker.run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Worker failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
