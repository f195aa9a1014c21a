"""Zip archive of a finished book."""

import io
import logging
import re
import zipfile
from pathlib import Path

from config.exceptions import ExportError
from models.project import SavedProject

logger = logging.getLogger(__name__)

# Anything that is not safe inside a single path component.
_UNSAFE = re.compile(r'[\s/\\:*?"<>|\x00-\x1f]+')


def folder_name(child_name: str) -> str:
    """``dreamlines-<name>`` safe to use as a file or folder name.

    Whitespace and path-unsafe characters collapse to a single dash.
    """
    slug = _UNSAFE.sub("-", child_name).strip("-.")
    return f"dreamlines-{slug}" if slug else "dreamlines"


def info_text(project: SavedProject) -> str:
    config = project.config
    return f"Title: {config.theme}\nFor: {config.child_name}\nStyle: {config.art_style.value}"


def build_zip(project: SavedProject) -> bytes:
    """Pack ``info.txt`` and one ``page-<n>.<ext>`` per page that has an image.

    Page numbers follow the page position, so a failed page leaves a gap.

    Raises:
        ExportError: If a stored image cannot be decoded.
    """
    root = folder_name(project.config.child_name)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(f"{root}/info.txt", info_text(project))
        for i, page in enumerate(project.pages):
            if not page.image_url:
                continue
            try:
                image = page.image()
            except ValueError as e:
                raise ExportError(f"Page {i + 1} has an unreadable image", {"page_id": page.id}) from e
            zf.writestr(f"{root}/page-{i + 1}.{image.extension}", image.data)
    return buf.getvalue()


def write_zip(project: SavedProject, output_dir: Path) -> Path:
    """Write the archive to ``output_dir/dreamlines-<name>.zip`` and return the path."""
    data = build_zip(project)
    path = Path(output_dir) / f"{folder_name(project.config.child_name)}.zip"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ExportError(f"Cannot write archive: {e}", {"path": str(path)}) from e
    logger.info("Wrote archive %s (%d pages)", path, len(project.completed_pages))
    return path
