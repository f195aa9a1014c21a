"""Pure decision helpers used by the generation pipeline and its observers."""

import logging
from typing import Sequence

from models.enums import PageStatus
from models.page import GeneratedPage

logger = logging.getLogger(__name__)


def reconcile_scenes(scenes: Sequence[str], page_count: int) -> list[str]:
    """Fit the planner's scenes to the requested page count.

    Surplus scenes are dropped. A shortfall is kept as-is (the book gets fewer
    pages) and logged; an empty list stays empty so the caller can abort.
    """
    scenes = [s for s in scenes if s and s.strip()]
    if len(scenes) > page_count:
        logger.warning("Planner returned %d scenes for %d pages; truncating", len(scenes), page_count)
        return scenes[:page_count]
    if 0 < len(scenes) < page_count:
        logger.warning("Planner returned %d scenes for %d pages; continuing short", len(scenes), page_count)
    return scenes


def progress_percent(pages: Sequence[GeneratedPage], page_count: int) -> int:
    """Share of the configured pages that finished with an image."""
    if page_count <= 0:
        return 0
    done = sum(1 for p in pages if p.status == PageStatus.COMPLETED)
    return round(done / page_count * 100)


def next_pending_index(pages: Sequence[GeneratedPage]) -> int | None:
    """Index of the first page still waiting to render, or None when all are done."""
    for i, page in enumerate(pages):
        if page.status == PageStatus.PENDING:
            return i
    return None
