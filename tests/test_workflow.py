"""Tests for workflow conditions, run state, and callbacks."""

import pytest
from unittest.mock import MagicMock


def _pages(*statuses):
    from models.page import GeneratedPage
    return tuple(
        GeneratedPage(f"page-{i}", f"Scene {i}", "data:image/png;base64,AA==" if s.value == "completed" else None, s)
        for i, s in enumerate(statuses)
    )


class TestReconcileScenes:
    def test_exact_count_unchanged(self):
        from workflow.conditions import reconcile_scenes
        assert reconcile_scenes(["a", "b"], 2) == ["a", "b"]

    def test_surplus_truncated(self):
        from workflow.conditions import reconcile_scenes
        assert reconcile_scenes(["a", "b", "c"], 2) == ["a", "b"]

    def test_shortfall_kept(self):
        from workflow.conditions import reconcile_scenes
        assert reconcile_scenes(["a"], 3) == ["a"]

    def test_blank_scenes_dropped(self):
        from workflow.conditions import reconcile_scenes
        assert reconcile_scenes(["", "  ", "a"], 3) == ["a"]

    def test_empty_stays_empty(self):
        from workflow.conditions import reconcile_scenes
        assert reconcile_scenes([], 5) == []


class TestProgressPercent:
    def test_counts_completed_only(self):
        from models.enums import PageStatus as S
        from workflow.conditions import progress_percent
        pages = _pages(S.COMPLETED, S.FAILED, S.GENERATING, S.PENDING)
        assert progress_percent(pages, 4) == 25

    def test_zero_page_count(self):
        from workflow.conditions import progress_percent
        assert progress_percent((), 0) == 0

    def test_all_done(self):
        from models.enums import PageStatus as S
        from workflow.conditions import progress_percent
        assert progress_percent(_pages(S.COMPLETED, S.COMPLETED), 2) == 100


class TestRunHelpers:
    def test_next_pending_index(self):
        from models.enums import PageStatus as S
        from workflow.conditions import next_pending_index
        assert next_pending_index(_pages(S.COMPLETED, S.PENDING, S.PENDING)) == 1
        assert next_pending_index(_pages(S.COMPLETED, S.FAILED)) is None


class TestRunLog:
    def test_format(self):
        import time
        from workflow.state import RunLog
        log = RunLog(clock=lambda: 0.0)
        line = log.add("hello")
        stamp = time.strftime("%H:%M:%S", time.localtime(0.0))
        assert line == f"[{stamp}] hello"
        assert log.entries == [line]
        assert len(log) == 1


class TestProgressEvent:
    def test_generating_count(self):
        from models.enums import EventType, PageStatus as S, RunState
        from workflow.state import ProgressEvent
        event = ProgressEvent(EventType.PAGE_UPDATED, RunState.GENERATING_IMAGES, _pages(S.GENERATING, S.PENDING))
        assert event.generating_count == 1


class TestDispatchEvent:
    def _event(self, type_, **kwargs):
        from models.enums import RunState
        from workflow.state import ProgressEvent
        return ProgressEvent(type_, RunState.GENERATING_STORY, **kwargs)

    def test_log_line_forwarded_before_specific_call(self, collector):
        from models.enums import EventType
        from workflow.callbacks import dispatch_event
        cb = collector
        dispatch_event(cb, self._event(EventType.THEME_RESOLVED, log_line="[00:00:00] x", theme="Dinos"))
        assert cb.calls == [("log", "[00:00:00] x"), ("theme", "Dinos")]

    def test_plain_log_event(self, collector):
        from models.enums import EventType
        from workflow.callbacks import dispatch_event
        cb = collector
        dispatch_event(cb, self._event(EventType.LOG, log_line="line"))
        assert cb.calls == [("log", "line")]

    def test_abort_and_validation(self, collector):
        from models.enums import AbortReason, EventType
        from workflow.callbacks import dispatch_event
        cb = collector
        dispatch_event(cb, self._event(EventType.ABORTED, reason=AbortReason.ERROR, message="bad"))
        dispatch_event(cb, self._event(EventType.VALIDATION_FAILED, field="child_name", message="name"))
        assert cb.calls == [("abort", AbortReason.ERROR, "bad"), ("invalid", "child_name", "name")]

    def test_every_event_type_is_routed(self):
        from models.enums import EventType
        from workflow.callbacks import dispatch_event
        cb = MagicMock()
        for type_ in EventType:
            dispatch_event(cb, self._event(type_, page_index=0))

    def test_callbacks_satisfy_protocol(self):
        from workflow.callbacks import (
            GenerationCallback, LoggingCallback, RichProgressCallback,
        )
        for cls in (LoggingCallback, RichProgressCallback):
            assert isinstance(cls(), GenerationCallback)

    @pytest.mark.parametrize("status,colour", [
        ("pending", "dim"),
        ("generating", "cyan"),
        ("completed", "green"),
        ("failed", "red"),
    ])
    def test_status_colour_covers_every_status(self, status, colour):
        from models.enums import PageStatus
        from workflow.callbacks import status_colour
        assert status_colour(PageStatus(status)) == colour


class TestRichProgressCallback:
    def test_updates_without_start_are_noops(self):
        from models.enums import PageStatus as S
        from workflow.callbacks import RichProgressCallback
        cb = RichProgressCallback(page_count=2)
        cb.on_log("x")
        cb.on_page_update(0, _pages(S.GENERATING, S.PENDING))
        cb.stop()

    def test_start_and_stop(self, sample_project):
        from io import StringIO
        from rich.console import Console
        from models.enums import PageStatus as S
        from workflow.callbacks import RichProgressCallback

        console = Console(file=StringIO(), force_terminal=False)
        cb = RichProgressCallback(console=console, page_count=2)
        cb.start()
        cb.on_pages_planned(_pages(S.PENDING, S.PENDING))
        cb.on_page_update(0, _pages(S.COMPLETED, S.PENDING))
        cb.on_complete(sample_project)
        cb.stop()
        assert cb._progress is None
