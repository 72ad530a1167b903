"""Pre-flight checks that do not need a full parse."""

import logging
import os
from pathlib import Path

from inkepub.core.archive import load_archive
from inkepub.core.container import resolve_rootfile
from inkepub.core.errors import ParseError
from inkepub.core.navigation import find_nav_item
from inkepub.core.package import parse_package
from inkepub.models.validation import ValidationResult

log = logging.getLogger(__name__)


class EpubValidator:
    """Validate EPUB files before handing them to the parser."""

    SUPPORTED_EXTENSIONS = {".epub"}

    def __init__(self, max_archive_size: int):
        self.max_archive_size = max_archive_size

    @classmethod
    def is_supported(cls, path: Path) -> bool:
        """Check if the file extension is supported."""
        return path.suffix.lower() in cls.SUPPORTED_EXTENSIONS

    def validate(self, file_path: str | os.PathLike) -> ValidationResult:
        """Check that ``file_path`` looks like a usable EPUB.

        Hard problems (missing, unreadable, not an EPUB) are errors; missing
        title, author or chapters are warnings. Never raises.
        """
        path = Path(file_path)

        if not path.is_file():
            return ValidationResult.failure("File does not exist")
        if not os.access(path, os.R_OK):
            return ValidationResult.failure("Cannot read file")
        try:
            size = path.stat().st_size
        except OSError as e:
            return ValidationResult.failure(f"Cannot read file: {e}")
        if size == 0:
            return ValidationResult.failure("File is empty")
        if not self.is_supported(path):
            return ValidationResult.failure("File is not an EPUB file")

        try:
            archive = load_archive(path, self.max_archive_size)
            opf_path = resolve_rootfile(archive)
            package = parse_package(archive, opf_path)
        except ParseError as e:
            log.info(f"{path} failed validation: {e}")
            return ValidationResult.failure(f"Invalid EPUB file: {e.message}")

        warnings = [w for w in package.warnings if w in ("No title found", "No author found")]
        has_documents = any(
            package.manifest[idref].is_html for idref in package.spine if idref in package.manifest
        )
        if not has_documents and find_nav_item(package) is None:
            warnings.append("No chapters found")

        return ValidationResult(is_valid=True, warnings=warnings)
