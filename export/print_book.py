"""Printable PDF: a title cover followed by one sheet per rendered page."""

import io
import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from config.exceptions import ExportError
from export.archive import folder_name
from models.project import SavedProject

logger = logging.getLogger(__name__)

# A4 portrait at 150 dpi
PAGE_SIZE = (1240, 1754)
PAGE_DPI = 150
MARGIN = 90


def image_bytes_to_pil(b: bytes) -> Image.Image:
    return Image.open(io.BytesIO(b)).convert("RGB")


def fit_to_sheet(img: Image.Image, size: tuple[int, int] = PAGE_SIZE, margin: int = MARGIN) -> Image.Image:
    """Scale ``img`` into a white sheet of ``size``, centred, keeping its aspect ratio."""
    box_w, box_h = size[0] - 2 * margin, size[1] - 2 * margin
    w, h = img.size
    scale = min(box_w / w, box_h / h)
    new_w, new_h = max(1, int(w * scale)), max(1, int(h * scale))
    img = img.resize((new_w, new_h), resample=Image.LANCZOS)
    sheet = Image.new("RGB", size, "white")
    sheet.paste(img, ((size[0] - new_w) // 2, (size[1] - new_h) // 2))
    return sheet


def _centered_text(draw: ImageDraw.ImageDraw, y: int, text: str, font, width: int) -> int:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text(((width - (right - left)) // 2, y), text, fill="black", font=font)
    return y + (bottom - top)


def cover_sheet(project: SavedProject, size: tuple[int, int] = PAGE_SIZE) -> Image.Image:
    sheet = Image.new("RGB", size, "white")
    draw = ImageDraw.Draw(sheet)
    draw.rectangle(
        [MARGIN // 2, MARGIN // 2, size[0] - MARGIN // 2, size[1] - MARGIN // 2],
        outline="black",
        width=6,
    )
    title_font = ImageFont.load_default(size=72)
    small_font = ImageFont.load_default(size=40)
    y = size[1] // 3
    y = _centered_text(draw, y, project.config.theme, title_font, size[0]) + 60
    y = _centered_text(draw, y, f"A coloring book for {project.config.child_name}", small_font, size[0]) + 30
    _centered_text(draw, y, project.config.art_style.value, small_font, size[0])
    return sheet


def build_pdf(project: SavedProject) -> bytes:
    """Render the print view of ``project`` as PDF bytes.

    Raises:
        ExportError: If a stored image cannot be decoded.
    """
    sheets = [cover_sheet(project)]
    for i, page in enumerate(project.pages):
        if not page.image_url:
            continue
        try:
            sheets.append(fit_to_sheet(image_bytes_to_pil(page.image().data)))
        except (ValueError, UnidentifiedImageError) as e:
            raise ExportError(f"Page {i + 1} has an unreadable image", {"page_id": page.id}) from e

    buf = io.BytesIO()
    sheets[0].save(buf, format="PDF", save_all=True, append_images=sheets[1:], resolution=PAGE_DPI)
    return buf.getvalue()


def write_pdf(project: SavedProject, output_dir: Path) -> Path:
    data = build_pdf(project)
    path = Path(output_dir) / f"{folder_name(project.config.child_name)}.pdf"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ExportError(f"Cannot write print book: {e}", {"path": str(path)}) from e
    logger.info("Wrote print book %s", path)
    return path
