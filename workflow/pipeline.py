"""Generation pipeline: theme -> scene plan -> one render per page -> history.

``GenerationPipeline.run`` is an async generator. It yields a
``ProgressEvent`` after every step so a CLI, TUI, or test can follow the run
without the pipeline knowing about any of them. Pages are rendered strictly
one after another; at most one page is ``generating`` at any time.
"""

import logging
import time
from typing import AsyncIterator, Callable, Optional

from agents.image_renderer import ImageRenderer
from agents.story_planner import StoryPlanner
from agents.theme_oracle import ThemeOracle
from config.exceptions import CredentialError, DreamLinesError, PlanningError, ValidationError
from config.settings import Settings
from models.book import BookConfig
from models.enums import AbortReason, EventType, PageStatus, RunState
from models.page import GeneratedPage
from models.project import SavedProject
from storage.project_store import ProjectStore
from workflow.callbacks import dispatch_event
from workflow.conditions import next_pending_index, reconcile_scenes
from workflow.state import ProgressEvent, RunLog, RunResult

logger = logging.getLogger(__name__)


class _Run:
    """Mutable state owned by a single run; only the pipeline writes to it."""

    def __init__(self, config: BookConfig, clock: Callable[[], float]):
        self.config = config
        self.state = RunState.SETUP
        self.pages: list[GeneratedPage] = []
        self.log = RunLog(clock)

    def event(self, type_: EventType, log_message: str = "", **kwargs) -> ProgressEvent:
        line = self.log.add(log_message) if log_message else ""
        return ProgressEvent(
            type=type_,
            state=self.state,
            pages=tuple(self.pages),
            log_line=line,
            **kwargs,
        )

    def abort(self, reason: AbortReason, message: str) -> ProgressEvent:
        self.state = RunState.SETUP
        self.pages = []
        return self.event(EventType.ABORTED, message, reason=reason, message=message)


class GenerationPipeline:
    """Drives StoryPlanner once, then ImageRenderer per page, then saves the project."""

    def __init__(
        self,
        planner: StoryPlanner,
        renderer: ImageRenderer,
        oracle: ThemeOracle,
        store: ProjectStore,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.planner = planner
        self.renderer = renderer
        self.oracle = oracle
        self.store = store
        self.settings = settings or planner.settings
        self._clock = clock

    async def run(self, config: BookConfig) -> AsyncIterator[ProgressEvent]:
        """Generate a book for ``config``.

        Ends with exactly one of ``validation_failed``, ``aborted`` or
        ``completed``. Never raises for provider, planning, or storage failures.
        """
        run = _Run(config, self._clock)

        try:
            config.validate(self.settings.min_pages, self.settings.max_pages)
        except ValidationError as e:
            logger.info("Run rejected: %s", e)
            yield run.event(
                EventType.VALIDATION_FAILED,
                field=e.details.get("field", "page_count"),
                message=e.message,
            )
            return

        run.state = RunState.GENERATING_STORY
        yield run.event(EventType.LOG, "Initializing Dream Engine...")

        if not config.has_theme:
            yield run.event(EventType.LOG, "No theme detected. Engaging creative matrix...")
            theme = (await self.oracle.random_theme()).strip() or self.settings.default_theme
            config = config.with_theme(theme)
            run.config = config
            yield run.event(EventType.THEME_RESOLVED, f'Theme generated: "{theme}"', theme=theme)

        yield run.event(
            EventType.LOG,
            f'Config: "{config.child_name}" | Style: {config.art_style.value} | Pages: {config.page_count}',
        )

        try:
            scenes = await self.planner.plan(config.child_name, config.theme, config.page_count)
        except CredentialError as e:
            logger.error("Planning stopped, credential rejected: %s", e)
            yield run.abort(AbortReason.CREDENTIAL, "API key invalid or not from a paid project. Please re-select.")
            return
        except DreamLinesError as e:
            logger.exception("Planning failed unexpectedly")
            yield run.abort(AbortReason.ERROR, f"CRITICAL ERROR: {e.message}")
            return

        scenes = reconcile_scenes(scenes, config.page_count)
        if not scenes:
            error = PlanningError(
                "Story planning failed.",
                {"child_name": config.child_name, "theme": config.theme, "page_count": config.page_count},
            )
            logger.error("Run aborted: %s", error)
            yield run.abort(AbortReason.PLANNING_FAILED, f"CRITICAL ERROR: {error.message}")
            return

        run.pages = [GeneratedPage.pending(i, scene) for i, scene in enumerate(scenes)]
        run.state = RunState.GENERATING_IMAGES
        yield run.event(EventType.PAGES_PLANNED, f"Blueprint acquired. {len(scenes)} scenes ready.")

        total = len(run.pages)
        while (i := next_pending_index(run.pages)) is not None:
            run.pages[i] = run.pages[i].advance(PageStatus.GENERATING)
            yield run.event(
                EventType.PAGE_UPDATED,
                f"Rendering Page {i + 1}/{total} [{config.image_size.value}]...",
                page_index=i,
            )

            try:
                image = await self.renderer.render(
                    run.pages[i].scene_description,
                    art_style=config.art_style,
                    age_group=config.age_group,
                    aspect_ratio=config.aspect_ratio,
                    image_size=config.image_size,
                )
            except CredentialError as e:
                logger.error("Rendering stopped at page %d, credential rejected: %s", i + 1, e)
                yield run.abort(AbortReason.CREDENTIAL, "API key invalid or not from a paid project. Please re-select.")
                return

            if image is not None:
                run.pages[i] = run.pages[i].advance(PageStatus.COMPLETED, image.data_url)
                message = f"Page {i + 1} rendering complete."
            else:
                run.pages[i] = run.pages[i].advance(PageStatus.FAILED)
                message = f"Page {i + 1} failed."
            yield run.event(EventType.PAGE_UPDATED, message, page_index=i)

        yield run.event(EventType.LOG, "Compilation complete. Finalizing assets...")

        project = SavedProject.create(config, run.pages, timestamp=int(self._clock() * 1000))
        self.store.append(project)
        if self.store.degraded:
            yield run.event(EventType.LOG, "Warning: Local storage full. Project not saved to history.")

        run.state = RunState.COMPLETED
        failed = len(project.failed_pages)
        logger.info("Run complete: %d/%d pages rendered", total - failed, total)
        yield run.event(
            EventType.COMPLETED,
            f"Book ready: {total - failed}/{total} pages rendered.",
            project=project,
        )


async def run_to_completion(
    pipeline: GenerationPipeline,
    config: BookConfig,
    callback=None,
) -> RunResult:
    """Drain ``pipeline.run(config)``, forwarding each event to ``callback``."""
    result = RunResult(state=RunState.SETUP, config=config)
    async for event in pipeline.run(config):
        if event.log_line:
            result.logs.append(event.log_line)
        result.state = event.state
        result.pages = event.pages
        if event.type == EventType.THEME_RESOLVED:
            result.config = result.config.with_theme(event.theme)
        elif event.type == EventType.VALIDATION_FAILED:
            result.error_field = event.field
            result.error_message = event.message
        elif event.type == EventType.ABORTED:
            result.abort_reason = event.reason
            result.error_message = event.message
        elif event.type == EventType.COMPLETED:
            result.project = event.project
        if callback is not None:
            dispatch_event(callback, event)
    return result
