"""Workflow package — generation pipeline, state, conditions, and session."""

from workflow.pipeline import GenerationPipeline, run_to_completion
from workflow.state import ProgressEvent, RunLog, RunResult
from workflow.conditions import (
    reconcile_scenes,
    progress_percent,
    next_pending_index,
)
from workflow.callbacks import (
    GenerationCallback,
    LoggingCallback,
    RichProgressCallback,
    dispatch_event,
)
from workflow.session import AppSession

__all__ = [
    "GenerationPipeline",
    "run_to_completion",
    "ProgressEvent",
    "RunLog",
    "RunResult",
    "reconcile_scenes",
    "progress_percent",
    "next_pending_index",
    "GenerationCallback",
    "LoggingCallback",
    "RichProgressCallback",
    "dispatch_event",
    "AppSession",
]
