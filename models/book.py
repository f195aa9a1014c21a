"""Book configuration data model."""

from dataclasses import dataclass, replace
from typing import Any

from config.exceptions import InvalidConfigError, MissingFieldError
from models.enums import AgeGroup, ArtStyle, AspectRatio, ImageSize

MIN_PAGES = 1
MAX_PAGES = 15
DEFAULT_PAGE_COUNT = 5


@dataclass(frozen=True)
class BookConfig:
    """What the user asked for. Frozen once a run starts; only the theme is back-filled."""
    child_name: str = ""
    theme: str = ""
    page_count: int = DEFAULT_PAGE_COUNT
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT
    image_size: ImageSize = ImageSize.LOW
    art_style: ArtStyle = ArtStyle.WHIMSICAL
    age_group: AgeGroup = AgeGroup.KIDS

    @property
    def has_theme(self) -> bool:
        return bool(self.theme.strip())

    def with_theme(self, theme: str) -> "BookConfig":
        return replace(self, theme=theme)

    def validate(self, min_pages: int = MIN_PAGES, max_pages: int = MAX_PAGES) -> None:
        """Raise a field-level error if the config cannot start a run.

        Raises:
            MissingFieldError: If the child's name is blank.
            InvalidConfigError: If the page count is out of range.
        """
        if not self.child_name.strip():
            raise MissingFieldError("child_name", "Please enter the child's name.")
        if not min_pages <= self.page_count <= max_pages:
            raise InvalidConfigError(
                f"Page count must be between {min_pages} and {max_pages}",
                {"page_count": self.page_count},
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "child_name": self.child_name,
            "theme": self.theme,
            "page_count": self.page_count,
            "aspect_ratio": self.aspect_ratio.value,
            "image_size": self.image_size.value,
            "art_style": self.art_style.value,
            "age_group": self.age_group.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BookConfig":
        return cls(
            child_name=data.get("child_name", ""),
            theme=data.get("theme", ""),
            page_count=int(data.get("page_count", DEFAULT_PAGE_COUNT)),
            aspect_ratio=AspectRatio(data.get("aspect_ratio", AspectRatio.PORTRAIT.value)),
            image_size=ImageSize(data.get("image_size", ImageSize.LOW.value)),
            art_style=ArtStyle(data.get("art_style", ArtStyle.WHIMSICAL.value)),
            age_group=AgeGroup(data.get("age_group", AgeGroup.KIDS.value)),
        )
