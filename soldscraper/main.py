"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from soldscraper.config import DATA_DIR, Config, config
from soldscraper.jobs.orchestrator import JobRunner
from soldscraper.logging_conf import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Parallel sold-property scraper")

    # Range arguments
    parser.add_argument(
        "--total-pages",
        type=int,
        required=True,
        help="Number of listing pages to scrape, starting at page 1",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help=f"Number of worker processes (default: {config.WORKERS})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=DATA_DIR,
        help=f"Directory for partition files and the merged output (default: {DATA_DIR})",
    )
    parser.add_argument(
        "--location",
        default=None,
        help=f"Listing location slug (default: {config.LOCATION})",
    )

    # Merge options
    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Delete partition files after a successful merge",
    )
    parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Drop records repeating an earlier (address, sold date, sold price)",
    )

    # Fetching
    parser.add_argument(
        "--replay-dir",
        type=Path,
        default=None,
        help="Serve pages from saved page-N.html(.gz) files instead of a browser",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser windows",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Development mode (verbose logs, per-page summaries in data/dev)",
    )

    return parser.parse_args(argv)


def main(argv=None) -> None:
    """Main entry point. Exits 0 once the merge completed, even if some workers failed."""
    args = parse_args(argv)
    setup_logging(level="DEBUG" if args.dev else None)

    try:
        Config.validate()
        runner = JobRunner(
            total_pages=args.total_pages,
            output_dir=args.output_dir,
            workers=args.workers,
            cleanup=args.cleanup,
            dedupe=args.dedupe,
            location=args.location,
            replay_dir=args.replay_dir,
            headed=args.headed,
            dev=args.dev,
        )
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("Parallel Property Scraper Starting")
    logger.info(f"Mode: {'DEV' if args.dev else 'PROD'}")
    logger.info(f"Pages: 1 - {args.total_pages}")
    logger.info(f"Workers: {len(runner.partitions)}")
    logger.info(f"Output: {runner.merged_path}")
    logger.info(f"Dedupe: {args.dedupe}")
    logger.info(f"Cleanup: {args.cleanup}")
    logger.info("=" * 60)

    try:
        result = asyncio.run(runner.run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    failed = [pid for pid, code in runner.exit_codes.items() if code != 0]
    if failed:
        logger.warning(f"Partial dataset: workers {failed} did not finish; rerun to resume them")
    logger.info(f"Done! {result.total} records in {result.output_path}")


if __name__ == "__main__":
    main()
