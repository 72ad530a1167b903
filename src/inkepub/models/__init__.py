"""Data models."""

from inkepub.models.epub import (
    ChapterContent,
    ChapterInfo,
    EpubMetadata,
    ManifestItem,
    PackageDocument,
)
from inkepub.models.validation import ValidationResult

__all__ = [
    # EPUB models
    "ManifestItem",
    "ChapterInfo",
    "ChapterContent",
    "PackageDocument",
    "EpubMetadata",
    # Validation models
    "ValidationResult",
]
