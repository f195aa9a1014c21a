"""Tests for zip, print PDF, and share exports."""

import io
import zipfile

import pytest


class TestArchive:
    def test_folder_name_dashes_whitespace(self):
        from export.archive import folder_name
        assert folder_name("Mia  Rose Lee") == "dreamlines-Mia-Rose-Lee"

    @pytest.mark.parametrize("name,expected", [
        ("Mia/Leo", "dreamlines-Mia-Leo"),
        ("..\\evil", "dreamlines-evil"),
        ('Zoe: "the great"?', "dreamlines-Zoe-the-great"),
        ("///", "dreamlines"),
    ])
    def test_folder_name_strips_path_characters(self, name, expected):
        from export.archive import folder_name
        assert folder_name(name) == expected

    def test_write_zip_with_slash_in_name(self, sample_project, tmp_path):
        from dataclasses import replace
        from export.archive import write_zip
        project = replace(sample_project, config=replace(sample_project.config, child_name="Mia/Leo"))
        path = write_zip(project, tmp_path / "out")
        assert path.parent == tmp_path / "out"
        assert path.name == "dreamlines-Mia-Leo.zip"
        with zipfile.ZipFile(path) as zf:
            assert all(n.startswith("dreamlines-Mia-Leo/") for n in zf.namelist())
            assert "For: Mia/Leo" in zf.read("dreamlines-Mia-Leo/info.txt").decode()

    def test_write_zip_unwritable_dir_raises_export_error(self, sample_project, tmp_path):
        from config.exceptions import ExportError
        from export.archive import write_zip
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(ExportError):
            write_zip(sample_project, blocker)

    def test_info_text(self, sample_project):
        from export.archive import info_text
        assert info_text(sample_project) == "Title: Space Dinosaurs\nFor: Mia\nStyle: Whimsical"

    def test_zip_contents_skip_failed_page(self, sample_project, png_bytes):
        from export.archive import build_zip
        with zipfile.ZipFile(io.BytesIO(build_zip(sample_project))) as zf:
            names = sorted(zf.namelist())
            assert names == [
                "dreamlines-Mia/info.txt",
                "dreamlines-Mia/page-1.png",
                "dreamlines-Mia/page-3.png",
            ]
            assert zf.read("dreamlines-Mia/page-1.png") == png_bytes

    def test_bad_image_raises_export_error(self, book_config):
        from config.exceptions import ExportError
        from export.archive import build_zip
        from models.enums import PageStatus
        from models.page import GeneratedPage
        from models.project import SavedProject
        broken = SavedProject.create(
            book_config,
            [GeneratedPage("page-0", "x", "https://example.com/x.png", PageStatus.COMPLETED)],
            timestamp=1,
        )
        with pytest.raises(ExportError):
            build_zip(broken)

    def test_write_zip(self, sample_project, tmp_path):
        from export.archive import write_zip
        path = write_zip(sample_project, tmp_path / "out")
        assert path.name == "dreamlines-Mia.zip"
        assert zipfile.is_zipfile(path)


class TestPrintBook:
    def test_pdf_bytes(self, sample_project):
        from export.print_book import build_pdf
        assert build_pdf(sample_project).startswith(b"%PDF")

    def test_cover_plus_one_sheet_per_image(self, sample_project, monkeypatch):
        from export import print_book
        captured = {}
        real_save = print_book.Image.Image.save

        def spy(self, fp, format=None, **params):
            captured["count"] = 1 + len(params.get("append_images", []))
            return real_save(self, fp, format=format, **params)

        monkeypatch.setattr(print_book.Image.Image, "save", spy)
        print_book.build_pdf(sample_project)
        assert captured["count"] == 3

    def test_fit_to_sheet_keeps_page_size(self):
        from PIL import Image
        from export.print_book import PAGE_SIZE, fit_to_sheet
        sheet = fit_to_sheet(Image.new("RGB", (300, 100), "black"))
        assert sheet.size == PAGE_SIZE

    def test_write_pdf(self, sample_project, tmp_path):
        from export.print_book import write_pdf
        path = write_pdf(sample_project, tmp_path)
        assert path.suffix == ".pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_write_pdf_with_slash_in_name(self, sample_project, tmp_path):
        from dataclasses import replace
        from export.print_book import write_pdf
        project = replace(sample_project, config=replace(sample_project.config, child_name="Mia/Leo"))
        path = write_pdf(project, tmp_path)
        assert path == tmp_path / "dreamlines-Mia-Leo.pdf"
        assert path.exists()


class TestShare:
    def test_payload_text(self, sample_project):
        from export.share import build_share_payload
        payload = build_share_payload(sample_project)
        assert payload.title == "DreamLines: Space Dinosaurs"
        assert payload.text == "I made a custom coloring book for Mia with DreamLines AI!"

    def test_cover_is_first_completed_page(self, sample_project, png_bytes):
        from export.share import build_share_payload
        payload = build_share_payload(sample_project)
        assert payload.cover.data == png_bytes
        assert payload.cover_filename == "coloring-page.png"

    def test_no_completed_pages_means_no_cover(self, book_config):
        from export.share import build_share_payload
        from models.project import SavedProject
        payload = build_share_payload(SavedProject.create(book_config, [], timestamp=1))
        assert payload.cover is None
        assert payload.cover_filename is None
