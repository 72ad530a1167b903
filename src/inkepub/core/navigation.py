"""Build the chapter list from the nav document or the spine."""

import logging
import re

from bs4 import BeautifulSoup, Tag

from inkepub.core.archive import EpubArchive, resolve_href, split_fragment
from inkepub.core.content_processor import ContentProcessor
from inkepub.models.epub import ChapterInfo, ManifestItem, PackageDocument

log = logging.getLogger(__name__)

LIST_TAGS = {"ol", "ul"}
EXTERNAL_HREF_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def find_nav_item(package: PackageDocument) -> ManifestItem | None:
    """First XHTML manifest item carrying the ``nav`` property."""
    for item in package.manifest.values():
        if item.is_html and "nav" in item.properties:
            return item
    return None


def _nav_types(nav: Tag) -> set[str] | None:
    """Tokens of the nav's epub:type, or None when the attribute is absent."""
    for key, value in nav.attrs.items():
        if key.split(":")[-1].lower() == "type":
            tokens = value if isinstance(value, list) else str(value).split()
            return {token.lower() for token in tokens}
    return None


def _select_toc_nav(soup: BeautifulSoup) -> Tag | None:
    navs = soup.find_all("nav")
    for nav in navs:
        types = _nav_types(nav)
        if types and "toc" in types:
            return nav
    for nav in navs:
        if _nav_types(nav) is None:
            return nav
    return navs[0] if navs else None


def _list_depth(node: Tag, nav: Tag) -> int:
    depth = 0
    for parent in node.parents:
        if parent is nav:
            break
        if parent.name in LIST_TAGS:
            depth += 1
    return max(depth, 1)


class NavigationResolver:
    """Resolve the ordered chapter list of one package.

    The path is chosen by manifest inspection rather than the declared EPUB
    version: a nav document means EPUB3 navigation, otherwise chapters are
    synthesized from the spine.
    """

    def __init__(
        self,
        archive: EpubArchive,
        package: PackageDocument,
        processor: ContentProcessor | None = None,
        words_per_minute: int = 300,
    ):
        self.archive = archive
        self.package = package
        self.processor = processor or ContentProcessor()
        self.words_per_minute = words_per_minute
        self._stats: dict[str, tuple[int, int]] = {}

    def resolve(self) -> list[ChapterInfo]:
        """Return chapters in reading order; never raises on zero results."""
        nav_item = find_nav_item(self.package)
        if nav_item is not None:
            nav_raw = self.archive.get(nav_item.href)
            if nav_raw is not None:
                log.debug(f"Using nav document {nav_item.href}")
                return self._chapters_from_nav(nav_item, nav_raw)
            log.warning(f"Nav document {nav_item.href} is missing from the archive")

        log.debug("No usable nav document, synthesizing chapters from spine")
        return self._chapters_from_spine()

    def _chapters_from_nav(self, nav_item: ManifestItem, nav_raw: bytes) -> list[ChapterInfo]:
        soup = BeautifulSoup(nav_raw, "lxml")
        nav = _select_toc_nav(soup)
        if nav is None:
            log.warning(f"Nav document {nav_item.href} has no table of contents")
            return []

        chapters: list[ChapterInfo] = []
        for link in nav.find_all("a", href=True):
            if link.find_parent("li") is None:
                continue
            raw_href = link["href"].strip()
            if EXTERNAL_HREF_RE.match(raw_href):
                log.debug(f"Skipping external TOC link {raw_href}")
                continue

            _, anchor = split_fragment(raw_href)
            href = resolve_href(nav_item.href, raw_href) or nav_item.href
            title = " ".join(link.get_text(" ", strip=True).split())
            word_count, reading_time = self._resource_stats(href)
            chapters.append(
                ChapterInfo(
                    title=title or f"Chapter {len(chapters) + 1}",
                    href=href,
                    anchor=anchor,
                    level=_list_depth(link, nav),
                    word_count=word_count,
                    estimated_reading_time=reading_time,
                )
            )

        if not chapters:
            log.warning(f"Nav document {nav_item.href} lists no chapters")
        return chapters

    def _chapters_from_spine(self) -> list[ChapterInfo]:
        chapters: list[ChapterInfo] = []
        for idref in self.package.spine:
            item = self.package.manifest.get(idref)
            if item is None or not item.is_html:
                continue

            raw = self.archive.get(item.href)
            title = self.processor.extract_title(raw) if raw else None
            word_count, reading_time = self._resource_stats(item.href)
            chapters.append(
                ChapterInfo(
                    title=title or f"Chapter {len(chapters) + 1}",
                    href=item.href,
                    level=1,
                    word_count=word_count,
                    estimated_reading_time=reading_time,
                )
            )
        return chapters

    def _resource_stats(self, href: str) -> tuple[int, int]:
        """Word count and reading time of one resource, computed once per call."""
        if href not in self._stats:
            raw = self.archive.get(href)
            stats = self.processor.get_stats(raw or b"", self.words_per_minute)
            self._stats[href] = (stats["word_count"], stats["reading_time"])
        return self._stats[href]
