"""Run state: progress events, the run log, and the final result."""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from models.book import BookConfig
from models.enums import AbortReason, EventType, PageStatus, RunState
from models.page import GeneratedPage
from models.project import SavedProject


@dataclass(frozen=True)
class ProgressEvent:
    """One step of a run, as seen by observers.

    ``pages`` is always a snapshot of the whole page list at the moment the
    event was emitted; ``log_line`` is the run-log entry the step added, if any.
    """
    type: EventType
    state: RunState
    pages: tuple[GeneratedPage, ...] = ()
    log_line: str = ""
    page_index: Optional[int] = None
    theme: str = ""
    field: Optional[str] = None
    message: str = ""
    reason: Optional[AbortReason] = None
    project: Optional[SavedProject] = None

    @property
    def generating_count(self) -> int:
        return sum(1 for p in self.pages if p.status == PageStatus.GENERATING)


class RunLog:
    """Timestamped narrative of a run (``[HH:MM:SS] message``)."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self.entries: list[str] = []

    def add(self, message: str) -> str:
        stamp = time.strftime("%H:%M:%S", time.localtime(self._clock()))
        line = f"[{stamp}] {message}"
        self.entries.append(line)
        return line

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class RunResult:
    """Where a drained run ended up."""
    state: RunState
    config: BookConfig
    pages: tuple[GeneratedPage, ...] = ()
    logs: list[str] = field(default_factory=list)
    project: Optional[SavedProject] = None
    abort_reason: Optional[AbortReason] = None
    error_field: Optional[str] = None
    error_message: str = ""

    @property
    def completed(self) -> bool:
        return self.state == RunState.COMPLETED

    @property
    def aborted(self) -> bool:
        return self.abort_reason is not None

    @property
    def rejected(self) -> bool:
        """Validation failed before any network call."""
        return self.error_field is not None
