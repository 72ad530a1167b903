import os
import sys

import pytest

from inkepub.core.validator import EpubValidator

from epub_builders import make_opf, write_epub, xhtml

validator = EpubValidator(max_archive_size=1024 * 1024)


def test_valid_book_has_no_errors(epub3_path):
    result = validator.validate(epub3_path)

    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []
    assert result.error_message is None


def test_missing_title_and_author_are_warnings(epub2_path, tmp_path):
    path = write_epub(
        tmp_path / "bare.epub",
        {"OEBPS/c.xhtml": xhtml("<p>x</p>")},
        opf=make_opf(
            manifest='<item id="c" href="c.xhtml" media-type="application/xhtml+xml"/>',
            spine='<itemref idref="c"/>',
        ),
    )
    result = validator.validate(path)

    assert result.is_valid
    assert result.warnings == ["No title found", "No author found"]
    assert validator.validate(epub2_path).warnings == ["No author found"]


def test_no_chapters_is_a_warning(tmp_path):
    metadata = "<dc:title>T</dc:title><dc:creator>A</dc:creator>"
    path = write_epub(tmp_path / "empty.epub", {}, opf=make_opf(metadata))

    result = validator.validate(path)

    assert result.is_valid
    assert result.warnings == ["No chapters found"]


def test_missing_file(tmp_path):
    result = validator.validate(tmp_path / "nope.epub")
    assert not result.is_valid
    assert result.error_message == "File does not exist"


def test_empty_file(tmp_path):
    path = tmp_path / "empty.epub"
    path.touch()
    assert validator.validate(path).errors == ["File is empty"]


def test_wrong_extension(tmp_path, epub3_path):
    renamed = epub3_path.rename(tmp_path / "book.zip")
    assert validator.validate(renamed).errors == ["File is not an EPUB file"]


def test_extension_check_is_case_insensitive(tmp_path, epub3_path):
    renamed = epub3_path.rename(tmp_path / "BOOK.EPUB")
    assert validator.validate(renamed).is_valid


@pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0, reason="needs POSIX permissions")
def test_unreadable_file(epub3_path):
    epub3_path.chmod(0)
    try:
        assert validator.validate(epub3_path).errors == ["Cannot read file"]
    finally:
        epub3_path.chmod(0o644)


def test_not_a_zip(tmp_path):
    path = tmp_path / "fake.epub"
    path.write_text("plain text")

    result = validator.validate(path)

    assert not result.is_valid
    assert result.error_message == "Invalid EPUB file: File is not a ZIP archive"


@pytest.mark.parametrize("mimetype", [None, "application/zip", "text/plain"])
def test_missing_or_wrong_mimetype_is_invalid(tmp_path, mimetype):
    path = write_epub(tmp_path / "book.epub", {}, opf=make_opf(), mimetype=mimetype)

    result = validator.validate(path)

    assert not result.is_valid
    assert "mimetype" in result.error_message


def test_missing_container_is_invalid(tmp_path):
    path = write_epub(tmp_path / "book.epub", {}, container=False)

    result = validator.validate(path)

    assert not result.is_valid
    assert "container.xml" in result.error_message


def test_oversized_archive_is_invalid(epub3_path):
    result = EpubValidator(max_archive_size=128).validate(epub3_path)
    assert result.error_message == "Invalid EPUB file: EPUB file is too large"
