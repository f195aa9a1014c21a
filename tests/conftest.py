"""Shared pytest fixtures for the dreamlines test suite."""

import io

import pytest
from unittest.mock import MagicMock, AsyncMock


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Return a Settings instance with all paths pointing to tmp_path."""
    from config.settings import Settings
    return Settings(
        gemini_api_key="test-key",
        store_db_path=tmp_path / "dreamlines.db",
        output_dir=tmp_path / "output",
        log_dir=tmp_path / "logs",
    )


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def kv(tmp_path):
    """Return a KeyValueStore backed by a temp file."""
    from storage.kv_store import KeyValueStore
    return KeyValueStore(tmp_path / "kv.db")


@pytest.fixture
def project_store(kv):
    from storage.project_store import ProjectStore
    return ProjectStore(kv, limit=3)


# ---------------------------------------------------------------------------
# Gemini client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def png_bytes():
    """A tiny real PNG so Pillow-based export code can decode it."""
    from PIL import Image
    buf = io.BytesIO()
    Image.new("RGB", (30, 40), "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def rendered_image(png_bytes):
    from models.page import RenderedImage
    return RenderedImage(data=png_bytes, mime_type="image/png")


@pytest.fixture
def mock_llm(rendered_image):
    """Return a MagicMock replacing GenAIClient."""
    llm = MagicMock()
    llm.generate_text = AsyncMock(return_value="Dinosaur Space Party")
    llm.generate_json = AsyncMock(return_value=["Scene one", "Scene two", "Scene three"])
    llm.generate_image = AsyncMock(return_value=rendered_image)
    llm.chat = AsyncMock(return_value="Try a jungle safari!")
    llm.get_usage_summary.return_value = {"total_calls": 1}
    return llm


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def book_config():
    from models.book import BookConfig
    return BookConfig(child_name="Mia", theme="Space Dinosaurs", page_count=3)


@pytest.fixture
def sample_project(book_config, rendered_image):
    """A saved project with two rendered pages and one failed page."""
    from models.enums import PageStatus
    from models.page import GeneratedPage
    from models.project import SavedProject

    pages = [
        GeneratedPage("page-0", "Mia rides a T-rex to the moon", rendered_image.data_url, PageStatus.COMPLETED),
        GeneratedPage("page-1", "A stegosaurus space station", None, PageStatus.FAILED),
        GeneratedPage("page-2", "Mia waves goodbye to the stars", rendered_image.data_url, PageStatus.COMPLETED),
    ]
    return SavedProject.create(book_config, pages, timestamp=1718000000000)


# ---------------------------------------------------------------------------
# Pipeline event recorder
# ---------------------------------------------------------------------------

class CollectingCallback:
    """GenerationCallback that records every call as a tuple, in order."""

    def __init__(self):
        self.calls: list[tuple] = []

    def on_log(self, line):
        self.calls.append(("log", line))

    def on_theme_resolved(self, theme):
        self.calls.append(("theme", theme))

    def on_pages_planned(self, pages):
        self.calls.append(("planned", pages))

    def on_page_update(self, index, pages):
        self.calls.append(("page", index, pages))

    def on_complete(self, project):
        self.calls.append(("complete", project))

    def on_abort(self, reason, message):
        self.calls.append(("abort", reason, message))

    def on_validation_error(self, field, message):
        self.calls.append(("invalid", field, message))


@pytest.fixture
def collector():
    return CollectingCallback()
