"""Generated page and rendered image models."""

import base64
import binascii
from dataclasses import dataclass, replace
from typing import Any, Optional

from config.exceptions import PageStateError
from models.enums import PageStatus


@dataclass(frozen=True)
class RenderedImage:
    """Raw image bytes returned by the image model."""
    data: bytes
    mime_type: str = "image/png"

    @property
    def extension(self) -> str:
        return self.mime_type.split("/", 1)[-1] or "png"

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_data_url(cls, url: str) -> "RenderedImage":
        """Decode a ``data:<mime>;base64,<payload>`` URL.

        Raises:
            ValueError: If the URL is not a base64 data URL.
        """
        header, sep, payload = url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError(f"Not a base64 data URL: {url[:40]}")
        mime_type = header[len("data:"):-len(";base64")] or "image/png"
        try:
            data = base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
        return cls(data=data, mime_type=mime_type)


@dataclass(frozen=True)
class GeneratedPage:
    """One coloring page. The scene description never changes after planning."""
    id: str
    scene_description: str
    image_url: Optional[str] = None
    status: PageStatus = PageStatus.PENDING

    @classmethod
    def pending(cls, index: int, scene_description: str) -> "GeneratedPage":
        return cls(id=f"page-{index}", scene_description=scene_description)

    def advance(self, status: PageStatus, image_url: Optional[str] = None) -> "GeneratedPage":
        """Return a copy moved to ``status``.

        Raises:
            PageStateError: If the transition would skip or reverse a status,
                or a completed page has no image.
        """
        if not self.status.can_transition_to(status):
            raise PageStateError(self.id, self.status.value, status.value)
        if status == PageStatus.COMPLETED:
            if not image_url:
                raise PageStateError(self.id, self.status.value, "completed without image")
            return replace(self, status=status, image_url=image_url)
        return replace(self, status=status, image_url=None)

    def image(self) -> Optional[RenderedImage]:
        if not self.image_url:
            return None
        return RenderedImage.from_data_url(self.image_url)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "scene_description": self.scene_description,
            "status": self.status.value,
        }
        if self.image_url:
            data["image_url"] = self.image_url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeneratedPage":
        return cls(
            id=data["id"],
            scene_description=data.get("scene_description", ""),
            image_url=data.get("image_url"),
            status=PageStatus(data.get("status", PageStatus.PENDING.value)),
        )
