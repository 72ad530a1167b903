"""Parser configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """Parser settings loaded from environment variables."""

    # Archive limits
    max_archive_size_mb: int = 100  # file size and total uncompressed size

    # Metadata
    default_language: str = "zh-CN"

    # Cover images
    cover_jpeg_quality: int = 90
    cover_cache_dir: Path = Path.home() / ".cache" / "inkepub" / "covers"

    # Reading statistics
    words_per_minute: int = 300

    model_config = SettingsConfigDict(
        env_prefix="INKEPUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def max_archive_size(self) -> int:
        return self.max_archive_size_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> ParserSettings:
    return ParserSettings()
