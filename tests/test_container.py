import pytest

from inkepub.core.archive import load_archive
from inkepub.core.container import resolve_rootfile
from inkepub.core.errors import InvalidMimetype, MissingContainer, MissingRootfile

from epub_builders import write_epub

MB = 1024 * 1024


def _archive(tmp_path, files=None, **kwargs):
    return load_archive(write_epub(tmp_path / "book.epub", files or {}, **kwargs), MB)


def test_rootfile_path_is_returned(tmp_path):
    archive = _archive(tmp_path, opf="<package/>", opf_path="OPS/package.opf")
    assert resolve_rootfile(archive) == "OPS/package.opf"


def test_missing_container(tmp_path):
    with pytest.raises(MissingContainer):
        resolve_rootfile(_archive(tmp_path, container=False))


def test_zip_without_anything_epub_like_is_missing_container(tmp_path):
    archive = _archive(tmp_path, {"readme.txt": "hello"}, container=False, mimetype=None)
    with pytest.raises(MissingContainer):
        resolve_rootfile(archive)


def test_missing_mimetype(tmp_path):
    with pytest.raises(InvalidMimetype):
        resolve_rootfile(_archive(tmp_path, mimetype=None))


def test_wrong_mimetype(tmp_path):
    with pytest.raises(InvalidMimetype):
        resolve_rootfile(_archive(tmp_path, mimetype="application/zip"))


def test_mimetype_trailing_newline_is_tolerated(tmp_path):
    archive = _archive(tmp_path, mimetype="application/epub+zip\n")
    assert resolve_rootfile(archive) == "OEBPS/content.opf"


def test_container_without_rootfile(tmp_path):
    files = {
        "META-INF/container.xml": (
            '<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
            "<rootfiles/></container>"
        )
    }
    with pytest.raises(MissingRootfile):
        resolve_rootfile(_archive(tmp_path, files, container=False))


def test_rootfile_with_blank_full_path(tmp_path):
    files = {
        "META-INF/container.xml": (
            '<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
            '<rootfiles><rootfile full-path="  "/></rootfiles></container>'
        )
    }
    with pytest.raises(MissingRootfile):
        resolve_rootfile(_archive(tmp_path, files, container=False))


def test_first_rootfile_wins_without_namespace(tmp_path):
    files = {
        "META-INF/container.xml": (
            "<container><rootfiles>"
            '<rootfile full-path="first/a.opf"/><rootfile full-path="second/b.opf"/>'
            "</rootfiles></container>"
        )
    }
    assert resolve_rootfile(_archive(tmp_path, files, container=False)) == "first/a.opf"
