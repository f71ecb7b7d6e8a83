"""DEV mode storage: save per-page outputs to data/dev/ for inspection."""
import gzip
import json
import logging
from pathlib import Path
from typing import Optional

from soldscraper.config import DEV_DIR
from soldscraper.parse.models import Rejected

logger = logging.getLogger(__name__)


class DevStorage:
    """Stores what each page produced, rejected cards included."""

    def __init__(self, worker_id: str, dev_dir: Optional[Path] = None):
        self.dev_dir = Path(dev_dir or DEV_DIR) / f"worker-{worker_id}"
        self.pages_dir = self.dev_dir / "pages"
        self.dev_dir.mkdir(parents=True, exist_ok=True)

    def save_page(
        self,
        page: int,
        url: str,
        card_count: int,
        accepted_count: int,
        rejected: list[tuple[str, Rejected]],
        html_content: Optional[str] = None,
        store_html: bool = False,
    ) -> None:
        """Save summary and rejected cards for a page."""
        page_dir = self.dev_dir / f"page-{page}"
        page_dir.mkdir(exist_ok=True)

        summary = {
            "page": page,
            "url": url,
            "cards": card_count,
            "accepted": accepted_count,
            "rejected": len(rejected),
        }
        with open(page_dir / "summary.json", "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2, ensure_ascii=False)

        if rejected:
            rejected_path = page_dir / "rejected.json"
            with open(rejected_path, "w", encoding="utf-8") as f:
                json.dump(
                    [{"reason": r.reason, "text": text} for text, r in rejected],
                    f,
                    indent=2,
                    ensure_ascii=False,
                )
            logger.debug(f"Saved {len(rejected)} rejected cards to {rejected_path}")

        # Same naming as ReplayFetcher expects
        if store_html and html_content:
            self.pages_dir.mkdir(exist_ok=True)
            html_path = self.pages_dir / f"page-{page}.html.gz"
            with gzip.open(html_path, "wt", encoding="utf-8") as f:
                f.write(html_content)
            logger.debug(f"Saved HTML to {html_path}")
