"""Configuration package — settings, logging, and exceptions."""

from config.exceptions import (
    DreamLinesError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMResponseParseError,
    CredentialError,
    MissingCredentialError,
    InvalidCredentialError,
    StorageError,
    StorageQuotaError,
    WorkflowError,
    PlanningError,
    PageStateError,
    RunInProgressError,
    ValidationError,
    MissingFieldError,
    InvalidConfigError,
    ExportError,
)
from config.logging_config import setup_logging
from config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "DreamLinesError",
    "LLMError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "LLMResponseParseError",
    "CredentialError",
    "MissingCredentialError",
    "InvalidCredentialError",
    "StorageError",
    "StorageQuotaError",
    "WorkflowError",
    "PlanningError",
    "PageStateError",
    "RunInProgressError",
    "ValidationError",
    "MissingFieldError",
    "InvalidConfigError",
    "ExportError",
]
