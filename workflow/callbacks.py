"""Generation progress callbacks for monitoring and real-time reporting."""

import logging
from typing import Protocol, assert_never, runtime_checkable

from models.enums import AbortReason, EventType, PageStatus
from models.page import GeneratedPage
from models.project import SavedProject
from workflow.conditions import progress_percent
from workflow.state import ProgressEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class GenerationCallback(Protocol):
    """Protocol for generation progress callbacks.

    Implement this protocol to hook into the pipeline's event stream.
    """

    def on_log(self, line: str) -> None:
        """Called for every run-log line, in order."""
        ...

    def on_theme_resolved(self, theme: str) -> None:
        """Called when a blank theme was filled in."""
        ...

    def on_pages_planned(self, pages: tuple[GeneratedPage, ...]) -> None:
        """Called once, with every page still pending."""
        ...

    def on_page_update(self, index: int, pages: tuple[GeneratedPage, ...]) -> None:
        """Called after each page status change with the full page snapshot."""
        ...

    def on_complete(self, project: SavedProject) -> None:
        """Called when the run finished and the project was saved."""
        ...

    def on_abort(self, reason: AbortReason, message: str) -> None:
        """Called when the run was abandoned and returned to setup."""
        ...

    def on_validation_error(self, field: str, message: str) -> None:
        """Called when the config was rejected before any model call."""
        ...


def dispatch_event(callback: GenerationCallback, event: ProgressEvent) -> None:
    """Route one pipeline event to the matching callback method."""
    if event.log_line:
        callback.on_log(event.log_line)
    match event.type:
        case EventType.LOG:
            pass
        case EventType.THEME_RESOLVED:
            callback.on_theme_resolved(event.theme)
        case EventType.PAGES_PLANNED:
            callback.on_pages_planned(event.pages)
        case EventType.PAGE_UPDATED:
            callback.on_page_update(event.page_index, event.pages)
        case EventType.COMPLETED:
            callback.on_complete(event.project)
        case EventType.ABORTED:
            callback.on_abort(event.reason, event.message)
        case EventType.VALIDATION_FAILED:
            callback.on_validation_error(event.field, event.message)
        case _:
            assert_never(event.type)


def status_colour(status: PageStatus) -> str:
    """Rich colour name for a page status."""
    match status:
        case PageStatus.PENDING:
            return "dim"
        case PageStatus.GENERATING:
            return "cyan"
        case PageStatus.COMPLETED:
            return "green"
        case PageStatus.FAILED:
            return "red"
        case _:
            assert_never(status)


class LoggingCallback:
    """Lightweight callback that logs progress to the standard logger."""

    def on_log(self, line: str) -> None:
        logger.debug("run: %s", line)

    def on_theme_resolved(self, theme: str) -> None:
        logger.info("Theme resolved: %s", theme)

    def on_pages_planned(self, pages: tuple[GeneratedPage, ...]) -> None:
        logger.info("Planned %d pages", len(pages))

    def on_page_update(self, index: int, pages: tuple[GeneratedPage, ...]) -> None:
        logger.info("Page %d/%d -> %s", index + 1, len(pages), pages[index].status.value)

    def on_complete(self, project: SavedProject) -> None:
        logger.info(
            "Run complete: project %s, %d/%d pages rendered",
            project.id, len(project.completed_pages), len(project.pages),
        )

    def on_abort(self, reason: AbortReason, message: str) -> None:
        logger.error("Run aborted (%s): %s", reason.value, message)

    def on_validation_error(self, field: str, message: str) -> None:
        logger.warning("Invalid config (%s): %s", field, message)


class RichProgressCallback:
    """Progress callback that renders a Rich live progress display in the terminal."""

    def __init__(self, console=None, page_count: int = 0, show_log: bool = True):
        """
        Args:
            console: Rich Console instance. Creates one if not provided.
            page_count: Configured page count (for the percentage).
            show_log: Echo run-log lines above the progress bars.
        """
        self._console = console
        self._page_count = page_count
        self._show_log = show_log
        self._progress = None
        self._book_task_id = None
        self._step_task_id = None

    def start(self):
        """Start the progress display. Call before running the pipeline."""
        from rich.console import Console
        from rich.progress import (
            Progress, SpinnerColumn, TextColumn, BarColumn, MofNCompleteColumn,
        )

        console = self._console or Console()
        self._console = console

        self._progress = Progress(
            SpinnerColumn("dots"),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
        )
        self._progress.start()

        self._book_task_id = self._progress.add_task(
            "Planning story...",
            total=self._page_count if self._page_count > 0 else None,
        )
        self._step_task_id = self._progress.add_task("[dim]Starting...[/]", total=None)

    def stop(self):
        """Stop the progress display."""
        if self._progress:
            self._progress.stop()
            self._progress = None

    def on_log(self, line: str) -> None:
        if self._progress and self._show_log:
            self._progress.console.print(f"[dim]➜[/] {line}")
        if self._progress:
            self._progress.update(self._step_task_id, description=f"[dim]{line}[/]")

    def on_theme_resolved(self, theme: str) -> None:
        if self._progress:
            self._progress.console.print(f"  [cyan]Theme:[/] {theme}")

    def on_pages_planned(self, pages: tuple[GeneratedPage, ...]) -> None:
        if not self._progress:
            return
        self._page_count = len(pages)
        self._progress.update(
            self._book_task_id,
            total=len(pages),
            completed=0,
            description=f"Rendering {len(pages)} pages...",
        )

    def on_page_update(self, index: int, pages: tuple[GeneratedPage, ...]) -> None:
        if not self._progress:
            return
        finished = sum(1 for p in pages if p.status.is_terminal)
        percent = progress_percent(pages, self._page_count)
        status = pages[index].status
        colour = status_colour(status)
        self._progress.update(
            self._book_task_id,
            completed=finished,
            description=f"[{colour}]Page {index + 1}: {status.value}[/] ({percent}%)",
        )

    def on_complete(self, project: SavedProject) -> None:
        if not self._progress:
            return
        self._progress.update(
            self._book_task_id,
            description=f"[bold green]Done! {len(project.completed_pages)}/{len(project.pages)} pages[/]",
        )
        self._progress.update(self._step_task_id, description="")

    def on_abort(self, reason: AbortReason, message: str) -> None:
        if not self._progress:
            return
        self._progress.update(self._book_task_id, description=f"[red]Aborted: {message[:80]}[/]")

    def on_validation_error(self, field: str, message: str) -> None:
        if self._progress:
            self._progress.update(self._book_task_id, description=f"[red]{field}: {message}[/]")
