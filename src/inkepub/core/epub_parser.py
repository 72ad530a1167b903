"""EPUB parsing entry points."""

import logging
import os
from pathlib import Path

from inkepub.cache.manager import CoverCache
from inkepub.config import ParserSettings, get_settings
from inkepub.core.archive import EpubArchive, load_archive, resolve_href, split_fragment
from inkepub.core.container import resolve_rootfile
from inkepub.core.content_processor import ContentProcessor
from inkepub.core.cover import CoverExtractor
from inkepub.core.errors import IoError, ParseError, ResourceNotFound
from inkepub.core.navigation import NavigationResolver
from inkepub.core.package import parse_package
from inkepub.core.validator import EpubValidator
from inkepub.models.epub import ChapterContent, ChapterInfo, EpubMetadata, PackageDocument
from inkepub.models.validation import ValidationResult

log = logging.getLogger(__name__)


class EpubParser:
    """Parse EPUB files into plain data structures.

    Every call opens its own archive and keeps nothing afterwards, so one
    instance can serve concurrent callers on different threads.
    """

    def __init__(self, settings: ParserSettings | None = None):
        self.settings = settings or get_settings()
        self.processor = ContentProcessor()
        self.validator = EpubValidator(self.settings.max_archive_size)
        self.cover_extractor = CoverExtractor(quality=self.settings.cover_jpeg_quality)

    def validate(self, file_path: str | os.PathLike) -> ValidationResult:
        """Cheap pre-flight check; see EpubValidator."""
        return self.validator.validate(file_path)

    def parse(self, file_path: str | os.PathLike) -> EpubMetadata:
        """Parse the EPUB and return its metadata and chapter list.

        Raises:
            ParseError: One of its subclasses when the file is not a usable EPUB
        """
        path = Path(file_path)
        log.info(f"Parsing {path}")

        archive, package = self._open(path)
        chapters = self._resolve_chapters(archive, package)
        cover_path = self._cached_cover(archive, package)

        warnings = list(package.warnings)
        if not chapters:
            warnings.append("No chapters found")
        if cover_path is None:
            warnings.append("No cover image found")

        try:
            file_size = path.stat().st_size
        except OSError as exc:
            raise IoError(str(exc)) from exc

        metadata = EpubMetadata(
            title=package.title or "Unknown Title",
            author=package.author or "Unknown Author",
            publisher=package.publisher,
            description=package.description,
            language=package.language or self.settings.default_language,
            identifier=package.identifier,
            isbn=package.isbn,
            publication_date=package.publication_date,
            rights=package.rights,
            subjects=package.subjects,
            cover_image_path=str(cover_path) if cover_path else None,
            file_path=str(path),
            file_size=file_size,
            chapters=chapters,
            spine=package.spine,
            manifest=package.manifest,
            extra_metadata=package.extra_metadata,
            warnings=warnings,
        )
        log.info(f"Parsed {path}: {metadata.title!r}, {len(chapters)} chapters")
        return metadata

    def extract_chapters(self, file_path: str | os.PathLike) -> list[ChapterContent]:
        """Return every chapter with its sanitized HTML, in reading order."""
        archive, package = self._open(Path(file_path))

        sanitized: dict[str, str] = {}
        contents = []
        for chapter in self._resolve_chapters(archive, package):
            if chapter.href not in sanitized:
                raw = archive.get(chapter.href)
                sanitized[chapter.href] = self.processor.sanitize(raw) if raw else ""
            contents.append(ChapterContent(chapter=chapter, html=sanitized[chapter.href]))
        return contents

    def get_chapter_content(self, file_path: str | os.PathLike, chapter_path: str) -> str:
        """Return sanitized HTML for one resource of the archive.

        ``chapter_path`` is an archive path as found in ``ChapterInfo.href``;
        a path relative to the package document is accepted too. Any
        ``#anchor`` suffix is ignored.

        Raises:
            ResourceNotFound: If the path is not in the archive
        """
        path = Path(file_path)
        archive = load_archive(path, self.settings.max_archive_size)
        resource, _ = split_fragment(chapter_path)

        raw = archive.get(resource)
        if raw is None:
            raw = self._get_package_relative(archive, resource)
        if raw is None:
            raise ResourceNotFound(chapter_path)
        return self.processor.sanitize(raw)

    def extract_cover_image(self, file_path: str | os.PathLike, output_dir: str | os.PathLike) -> Path | None:
        """Write the cover as JPEG into ``output_dir``.

        Returns None when the book has no decodable cover.
        """
        path = Path(file_path)
        archive, package = self._open(path)
        cache = CoverCache(Path(output_dir))
        try:
            target = cache.cover_path(path)
        except OSError as exc:
            raise IoError(str(exc)) from exc
        return self.cover_extractor.extract(archive, package, target)

    def count_words(self, html_content: bytes | str) -> int:
        return self.processor.count_words(html_content)

    def clear_cover_cache(self) -> int:
        """Delete covers written by parse(). Returns number of files removed."""
        return CoverCache(self.settings.cover_cache_dir).clear_cache()

    def _open(self, path: Path) -> tuple[EpubArchive, PackageDocument]:
        archive = load_archive(path, self.settings.max_archive_size)
        opf_path = resolve_rootfile(archive)
        return archive, parse_package(archive, opf_path)

    def _resolve_chapters(self, archive: EpubArchive, package: PackageDocument) -> list[ChapterInfo]:
        resolver = NavigationResolver(
            archive,
            package,
            processor=self.processor,
            words_per_minute=self.settings.words_per_minute,
        )
        return resolver.resolve()

    def _cached_cover(self, archive: EpubArchive, package: PackageDocument) -> Path | None:
        """Cover in the configured cache directory; failures only cost the cover."""
        cache = CoverCache(self.settings.cover_cache_dir)
        try:
            target = cache.cover_path(archive.path)
            if target.is_file():
                return target
            return self.cover_extractor.extract(archive, package, target)
        except OSError as e:
            log.warning(f"Could not store cover for {archive.path}: {e}")
            return None

    def _get_package_relative(self, archive: EpubArchive, resource: str) -> bytes | None:
        try:
            opf_path = resolve_rootfile(archive)
        except ParseError:
            return None
        return archive.get(resolve_href(opf_path, resource))
