"""Shared fixtures: parser settings and sample books."""

from pathlib import Path

import pytest

from inkepub.config import ParserSettings
from inkepub.core.epub_parser import EpubParser

from epub_builders import NAV_DOCUMENT, STANDARD_METADATA, image_bytes, make_opf, write_epub, xhtml


@pytest.fixture
def settings(tmp_path) -> ParserSettings:
    return ParserSettings(cover_cache_dir=tmp_path / "covers")


@pytest.fixture
def parser(settings) -> EpubParser:
    return EpubParser(settings=settings)


@pytest.fixture
def epub3_path(tmp_path) -> Path:
    """EPUB3 book with a nested nav document and a tagged cover."""
    manifest = (
        '<item id="nav" href="nav.xhtml" media-type="application/xhtml+xml" properties="nav"/>'
        '<item id="intro" href="Text/intro.xhtml" media-type="application/xhtml+xml"/>'
        '<item id="body" href="Text/body.xhtml" media-type="application/xhtml+xml"/>'
        '<item id="end" href="Text/end.xhtml" media-type="application/xhtml+xml"/>'
        '<item id="css" href="Styles/book.css" media-type="text/css"/>'
        '<item id="img-cover" href="Images/front.png" media-type="image/png" properties="cover-image"/>'
    )
    spine = '<itemref idref="intro"/><itemref idref="body"/><itemref idref="end"/>'
    files = {
        "OEBPS/nav.xhtml": NAV_DOCUMENT,
        "OEBPS/Text/intro.xhtml": xhtml("<h1>Intro</h1><p>The story begins here.</p>"),
        "OEBPS/Text/body.xhtml": xhtml(
            '<h1>Body</h1><p style="color:red">Middle of the story.</p>'
            '<h2 id="part2">Part two</h2><p>More words follow.</p>'
        ),
        "OEBPS/Text/end.xhtml": xhtml("<h1>End</h1><p>The end.</p>"),
        "OEBPS/Styles/book.css": "p { color: red; }",
        "OEBPS/Images/front.png": image_bytes(),
    }
    return write_epub(
        tmp_path / "epub3.epub",
        files,
        opf=make_opf(STANDARD_METADATA, manifest, spine),
    )


@pytest.fixture
def epub2_path(tmp_path) -> Path:
    """EPUB2-style book: no nav document, chapters come from the spine."""
    manifest = (
        '<item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>'
        '<item id="ch1" href="ch1.html" media-type="text/html"/>'
        '<item id="ch2" href="ch2.xhtml" media-type="application/xhtml+xml"/>'
        '<item id="pic" href="plate.jpg" media-type="image/jpeg"/>'
        '<item id="ch3" href="ch3.xhtml" media-type="application/xhtml+xml"/>'
        '<item id="ch4" href="ch4.xhtml" media-type="application/xhtml+xml"/>'
    )
    spine = (
        '<itemref idref="ch1"/><itemref idref="ch2"/><itemref idref="pic"/>'
        '<itemref idref="ch3"/><itemref idref="ch4"/>'
    )
    files = {
        "OPS/toc.ncx": "<ncx/>",
        "OPS/ch1.html": xhtml("<h2>Second level</h2><h1>  </h1><p>One</p>", title="Ignored"),
        "OPS/ch2.xhtml": xhtml("<h3>Third level</h3><p>Two</p>", title="Also ignored"),
        "OPS/plate.jpg": image_bytes("JPEG"),
        "OPS/ch3.xhtml": xhtml("<p>Three</p>", title="Title Tag"),
        "OPS/ch4.xhtml": xhtml("<p>Four</p>"),
    }
    metadata = "<dc:title>Old Book</dc:title>"
    return write_epub(
        tmp_path / "epub2.epub",
        files,
        opf=make_opf(metadata, manifest, spine, version="2.0"),
        opf_path="OPS/content.opf",
    )
