"""Data models for EPUB structure."""

from pydantic import BaseModel, ConfigDict, Field


class ManifestItem(BaseModel):
    """Single resource declared in the package manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str
    media_type: str = ""
    properties: frozenset[str] = Field(default_factory=frozenset)

    @property
    def is_html(self) -> bool:
        return self.media_type in ("application/xhtml+xml", "text/html")

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")


class ChapterInfo(BaseModel):
    """Chapter entry in reading order."""

    model_config = ConfigDict(frozen=True)

    title: str
    href: str
    anchor: str | None = None
    level: int = Field(default=1, ge=1)
    word_count: int = 0
    estimated_reading_time: int = 0  # minutes


class ChapterContent(BaseModel):
    """Chapter entry together with its sanitized HTML."""

    model_config = ConfigDict(frozen=True)

    chapter: ChapterInfo
    html: str


class PackageDocument(BaseModel):
    """Everything read from the OPF package document."""

    model_config = ConfigDict(frozen=True)

    path: str
    version: str | None = None
    title: str | None = None
    author: str | None = None
    publisher: str | None = None
    description: str | None = None
    language: str | None = None
    identifier: str | None = None
    isbn: str | None = None
    publication_date: str | None = None
    rights: str | None = None
    subjects: list[str] = Field(default_factory=list)
    cover_id: str | None = None
    extra_metadata: dict[str, str] = Field(default_factory=dict)
    manifest: dict[str, ManifestItem] = Field(default_factory=dict)
    spine: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class EpubMetadata(BaseModel):
    """Book-level metadata and structure returned by a parse."""

    model_config = ConfigDict(frozen=True)

    title: str
    author: str
    publisher: str | None = None
    description: str | None = None
    language: str = "zh-CN"
    identifier: str | None = None
    isbn: str | None = None
    publication_date: str | None = None
    rights: str | None = None
    subjects: list[str] = Field(default_factory=list)
    cover_image_path: str | None = None
    file_path: str
    file_size: int = 0
    chapters: list[ChapterInfo] = Field(default_factory=list)
    spine: list[str] = Field(default_factory=list)
    manifest: dict[str, ManifestItem] = Field(default_factory=dict)
    extra_metadata: dict[str, str] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)

    @property
    def total_chapters(self) -> int:
        return len(self.chapters)

    @property
    def word_count(self) -> int:
        # chapters anchored into the same document share its count
        per_document = {chapter.href: chapter.word_count for chapter in self.chapters}
        return sum(per_document.values())

    def is_valid(self) -> bool:
        """Check the record is complete enough to persist."""
        return bool(
            self.title.strip()
            and self.author.strip()
            and self.file_path.strip()
            and self.chapters
        )
