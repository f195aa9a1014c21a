"""Models package — book config, pages, projects, and enums."""

from models.book import BookConfig, MIN_PAGES, MAX_PAGES, DEFAULT_PAGE_COUNT
from models.page import GeneratedPage, RenderedImage
from models.project import SavedProject, ChatMessage
from models.enums import (
    PageStatus,
    AgeGroup,
    ImageSize,
    AspectRatio,
    ArtStyle,
    RunState,
    EventType,
    AbortReason,
    ChatRole,
    ThemePreference,
)

__all__ = [
    "BookConfig",
    "MIN_PAGES",
    "MAX_PAGES",
    "DEFAULT_PAGE_COUNT",
    "GeneratedPage",
    "RenderedImage",
    "SavedProject",
    "ChatMessage",
    "PageStatus",
    "AgeGroup",
    "ImageSize",
    "AspectRatio",
    "ArtStyle",
    "RunState",
    "EventType",
    "AbortReason",
    "ChatRole",
    "ThemePreference",
]
