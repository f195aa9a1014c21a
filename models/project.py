"""Saved project and chat message models."""

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from models.book import BookConfig
from models.enums import ChatRole, PageStatus
from models.page import GeneratedPage


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class SavedProject:
    """A finished run. The page tuple is a frozen copy of the pipeline's pages."""
    id: str
    timestamp: int
    config: BookConfig
    pages: tuple[GeneratedPage, ...] = ()

    @classmethod
    def create(
        cls,
        config: BookConfig,
        pages: Iterable[GeneratedPage],
        timestamp: Optional[int] = None,
    ) -> "SavedProject":
        ts = timestamp if timestamp is not None else now_ms()
        return cls(id=str(ts), timestamp=ts, config=config, pages=tuple(pages))

    @property
    def completed_pages(self) -> list[GeneratedPage]:
        return [p for p in self.pages if p.status == PageStatus.COMPLETED]

    @property
    def failed_pages(self) -> list[GeneratedPage]:
        return [p for p in self.pages if p.status == PageStatus.FAILED]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "config": self.config.to_dict(),
            "pages": [p.to_dict() for p in self.pages],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavedProject":
        """Rebuild a project from ``to_dict`` output.

        Raises:
            TypeError: If the record or its config is not a JSON object.
            KeyError, ValueError: If required fields are missing or invalid.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Project record must be an object, got {type(data).__name__}")
        config = data.get("config")
        if not isinstance(config, dict):
            raise TypeError(f"Project {data.get('id')!r} has no config object")
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            config=BookConfig.from_dict(config),
            pages=tuple(GeneratedPage.from_dict(p) for p in data.get("pages") or []),
        )


@dataclass(frozen=True)
class ChatMessage:
    """One line of a chat session. Never persisted."""
    role: ChatRole
    text: str
    timestamp: int = field(default_factory=now_ms)
    id: str = ""

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", str(self.timestamp))
