"""Custom exception hierarchy for the coloring book generator."""

from typing import Optional


class DreamLinesError(Exception):
    """Base exception for all DreamLines errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ---- LLM Errors ----

class LLMError(DreamLinesError):
    """Base exception for generative API errors."""


class LLMRateLimitError(LLMError):
    """Generative API rate limit exceeded."""

    def __init__(self, message: str = "API rate limit exceeded", retry_after: Optional[float] = None):
        details = {}
        if retry_after is not None:
            details["retry_after"] = retry_after
        super().__init__(message, details)
        self.retry_after = retry_after


class LLMTimeoutError(LLMError):
    """Generative API request timed out."""


class LLMResponseParseError(LLMError):
    """Failed to parse a model response."""

    def __init__(self, message: str = "Failed to parse LLM response", raw_response: str = ""):
        details = {"raw_response": raw_response[:200]} if raw_response else {}
        super().__init__(message, details)
        self.raw_response = raw_response


# ---- Credential Errors ----

class CredentialError(DreamLinesError):
    """Base exception for API credential problems."""


class MissingCredentialError(CredentialError):
    """No API key is configured."""

    def __init__(self, message: str = "GEMINI_API_KEY is not set"):
        super().__init__(message)


class InvalidCredentialError(CredentialError):
    """The provider rejected the API key mid-run."""

    def __init__(self, message: str = "API key rejected by provider", status: Optional[int] = None):
        details = {"status": status} if status is not None else {}
        super().__init__(message, details)
        self.status = status


# ---- Storage Errors ----

class StorageError(DreamLinesError):
    """Durable storage operation failed."""


class StorageQuotaError(StorageError):
    """Writing would exceed the key-value store quota."""

    def __init__(self, key: str, size: int, quota: int):
        super().__init__(
            f"Storage quota exceeded writing '{key}'",
            {"size": size, "quota": quota},
        )
        self.key = key


# ---- Workflow Errors ----

class WorkflowError(DreamLinesError):
    """Base exception for generation pipeline errors."""


class PlanningError(WorkflowError):
    """Story planning produced no usable scenes; the run cannot continue."""


class PageStateError(WorkflowError):
    """Illegal page status transition."""

    def __init__(self, page_id: str, current: str, target: str):
        super().__init__(
            f"Page {page_id} cannot move from {current} to {target}",
            {"page_id": page_id, "current": current, "target": target},
        )


class RunInProgressError(WorkflowError):
    """A generation run is already active for this session."""


# ---- Validation Errors ----

class ValidationError(DreamLinesError):
    """Input validation failed."""


class MissingFieldError(ValidationError):
    """A required form field is blank."""

    def __init__(self, field: str, message: str = ""):
        super().__init__(message or f"{field} is required", {"field": field})
        self.field = field


class InvalidConfigError(ValidationError):
    """Configuration value is invalid."""


# ---- Export Errors ----

class ExportError(DreamLinesError):
    """Packaging a project for export failed."""
