"""Parse EPUB files into metadata, chapters and sanitized content."""

import os
from pathlib import Path

from inkepub.config import ParserSettings, get_settings
from inkepub.core.epub_parser import EpubParser
from inkepub.core.errors import (
    ArchiveTooLarge,
    InvalidMimetype,
    IoError,
    MalformedPackageDocument,
    MissingContainer,
    MissingRootfile,
    NotAnArchive,
    ParseError,
    ResourceNotFound,
)
from inkepub.models import (
    ChapterContent,
    ChapterInfo,
    EpubMetadata,
    ManifestItem,
    ValidationResult,
)


def validate(file_path: str | os.PathLike) -> ValidationResult:
    return EpubParser().validate(file_path)


def parse(file_path: str | os.PathLike) -> EpubMetadata:
    return EpubParser().parse(file_path)


def get_chapter_content(file_path: str | os.PathLike, chapter_path: str) -> str:
    return EpubParser().get_chapter_content(file_path, chapter_path)


def extract_chapters(file_path: str | os.PathLike) -> list[ChapterContent]:
    return EpubParser().extract_chapters(file_path)


def extract_cover_image(file_path: str | os.PathLike, output_dir: str | os.PathLike) -> Path | None:
    return EpubParser().extract_cover_image(file_path, output_dir)


def count_words(html_content: bytes | str) -> int:
    return EpubParser().count_words(html_content)


__all__ = [
    # Entry points
    "EpubParser",
    "validate",
    "parse",
    "get_chapter_content",
    "extract_chapters",
    "extract_cover_image",
    "count_words",
    # Configuration
    "ParserSettings",
    "get_settings",
    # Models
    "ManifestItem",
    "ChapterInfo",
    "ChapterContent",
    "EpubMetadata",
    "ValidationResult",
    # Errors
    "ParseError",
    "NotAnArchive",
    "ArchiveTooLarge",
    "MissingContainer",
    "MissingRootfile",
    "InvalidMimetype",
    "MalformedPackageDocument",
    "ResourceNotFound",
    "IoError",
]
