"""Advisory operations: best-effort steps whose outcome never changes control flow."""
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvisoryResult:
    """Outcome of an advisory step. Callers log it and move on."""

    name: str
    ok: bool
    detail: Optional[str] = None


async def run_advisory(name: str, action: Callable[[], Awaitable[object]]) -> AdvisoryResult:
    """Run ``action``, converting any failure into a non-ok result."""
    try:
        outcome = await action()
    except Exception as e:
        logger.debug(f"Advisory step '{name}' failed: {e}")
        return AdvisoryResult(name=name, ok=False, detail=f"{type(e).__name__}: {e}")
    detail = None if outcome is None else str(outcome)
    logger.debug(f"Advisory step '{name}' done ({detail})")
    return AdvisoryResult(name=name, ok=True, detail=detail)
