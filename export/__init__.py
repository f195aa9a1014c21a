"""Export package — zip archive, printable PDF, and share payload."""

from export.archive import build_zip, write_zip, folder_name, info_text
from export.print_book import build_pdf, write_pdf
from export.share import SharePayload, build_share_payload

__all__ = [
    "build_zip",
    "write_zip",
    "folder_name",
    "info_text",
    "build_pdf",
    "write_pdf",
    "SharePayload",
    "build_share_payload",
]
