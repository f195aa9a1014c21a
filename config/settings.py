"""Configuration settings loaded from .env file."""

from pathlib import Path
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from environment variables or a .env file.

    The Gemini API key is the single credential used by every model call.
    Model identifiers are grouped by tier: the high-capability tier is tried
    first, the fast tier is the fallback and also serves the theme/chat helpers.
    """

    # Credential
    gemini_api_key: Optional[str] = None

    # Model tiers
    story_model: str = "gemini-3-pro-preview"              # StoryPlanner (primary)
    fast_text_model: str = "gemini-3-flash-preview"        # StoryPlanner fallback, ThemeOracle, ChatAssistant
    image_model: str = "gemini-3-pro-image-preview"        # ImageRenderer (primary)
    fallback_image_model: str = "gemini-2.5-flash-image"   # ImageRenderer fallback, aspect ratio only
    story_thinking_budget: int = 32768

    # Book limits
    min_pages: int = 1
    max_pages: int = 15
    default_theme: str = "Magical Forest Adventure"

    # Storage
    store_db_path: Path = Path("./data/dreamlines.db")
    history_limit: int = 3
    storage_quota_bytes: int = 5 * 1024 * 1024

    # Export
    output_dir: Path = Path("./output")

    # Logging
    log_dir: Path = Path("./data/logs")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("history_limit")
    @classmethod
    def validate_history_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("history_limit must be >= 1")
        return v

    @field_validator("storage_quota_bytes")
    @classmethod
    def validate_quota(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("storage_quota_bytes must be positive")
        return v

    @field_validator("story_thinking_budget")
    @classmethod
    def validate_thinking_budget(cls, v: int) -> int:
        if v < 0:
            raise ValueError("story_thinking_budget must be non-negative")
        return v

    @field_validator("min_pages", "max_pages")
    @classmethod
    def validate_page_bounds(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Page bounds must be >= 1")
        return v

    @field_validator("store_db_path", "log_dir")
    @classmethod
    def ensure_parent_dirs(cls, v: Path) -> Path:
        v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @model_validator(mode="after")
    def validate_page_range(self) -> "Settings":
        if self.min_pages > self.max_pages:
            raise ValueError(
                f"min_pages ({self.min_pages}) must not exceed "
                f"max_pages ({self.max_pages})"
            )
        return self

    @property
    def has_credential(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
