"""Enumerations for book configuration and generation status tracking."""

from enum import Enum


class PageStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PageStatus.COMPLETED, PageStatus.FAILED)

    def can_transition_to(self, target: "PageStatus") -> bool:
        """Statuses only move forward: pending -> generating -> completed | failed."""
        return target in _PAGE_TRANSITIONS[self]


_PAGE_TRANSITIONS: dict[PageStatus, frozenset[PageStatus]] = {
    PageStatus.PENDING: frozenset({PageStatus.GENERATING}),
    PageStatus.GENERATING: frozenset({PageStatus.COMPLETED, PageStatus.FAILED}),
    PageStatus.COMPLETED: frozenset(),
    PageStatus.FAILED: frozenset(),
}


class AgeGroup(str, Enum):
    """Complexity tier of the line art (simple / standard / complex)."""
    TODDLER = "toddler"
    KIDS = "kids"
    EXPERT = "expert"


class ImageSize(str, Enum):
    """Resolution tier (low / medium / high)."""
    LOW = "1K"
    MEDIUM = "2K"
    HIGH = "4K"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    TALL = "9:16"
    WIDE = "16:9"


class ArtStyle(str, Enum):
    WHIMSICAL = "Whimsical"
    CARTOON = "Disney Animation"
    PIXEL = "8-Bit Pixel"
    PATTERN = "Mandala"
    ANIME = "Anime"
    BLOCKY = "Lego"


class RunState(str, Enum):
    SETUP = "setup"
    GENERATING_STORY = "generating_story"
    GENERATING_IMAGES = "generating_images"
    COMPLETED = "completed"


class EventType(str, Enum):
    """Kinds of progress events emitted by the generation pipeline."""
    VALIDATION_FAILED = "validation_failed"
    LOG = "log"
    THEME_RESOLVED = "theme_resolved"
    PAGES_PLANNED = "pages_planned"
    PAGE_UPDATED = "page_updated"
    COMPLETED = "completed"
    ABORTED = "aborted"


class AbortReason(str, Enum):
    PLANNING_FAILED = "planning_failed"
    CREDENTIAL = "credential"
    ERROR = "error"


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class ThemePreference(str, Enum):
    DARK = "dark"
    LIGHT = "light"
