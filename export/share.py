"""Share payload: title, text, and an optional cover image."""

from dataclasses import dataclass
from typing import Optional

from models.page import RenderedImage
from models.project import SavedProject


@dataclass(frozen=True)
class SharePayload:
    title: str
    text: str
    cover: Optional[RenderedImage] = None

    @property
    def cover_filename(self) -> Optional[str]:
        if self.cover is None:
            return None
        return f"coloring-page.{self.cover.extension}"


def build_share_payload(project: SavedProject) -> SharePayload:
    """The cover is the first completed page; a book with none shares text only."""
    config = project.config
    cover = None
    for page in project.completed_pages:
        if page.image_url:
            try:
                cover = page.image()
            except ValueError:
                continue
            break
    return SharePayload(
        title=f"DreamLines: {config.theme}",
        text=f"I made a custom coloring book for {config.child_name} with DreamLines AI!",
        cover=cover,
    )
