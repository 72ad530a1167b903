"""Cover image cache keyed by EPUB content hash."""

import hashlib
import logging
from pathlib import Path

log = logging.getLogger(__name__)


class CoverCache:
    """Manages the directory where extracted covers are written."""

    COVER_SUFFIX = ".jpg"

    def __init__(self, cache_dir: Path):
        self.cache_root = Path(cache_dir)

    def _ensure_cache_dir(self) -> None:
        """Create cache directory if it doesn't exist."""
        self.cache_root.mkdir(parents=True, exist_ok=True)

    def get_file_hash(self, file_path: Path) -> str:
        """Compute SHA-256 hash of a file."""
        sha256 = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                sha256.update(chunk)
        return sha256.hexdigest()

    def cover_path(self, epub_path: Path) -> Path:
        """Target path for the cover of ``epub_path``; creates the directory."""
        self._ensure_cache_dir()
        return self.cache_root / f"{self.get_file_hash(epub_path)}{self.COVER_SUFFIX}"

    def clear_cache(self) -> int:
        """Delete all cached covers. Returns number of files removed."""
        if not self.cache_root.exists():
            return 0

        count = 0
        for cover in self.cache_root.glob(f"*{self.COVER_SUFFIX}"):
            cover.unlink(missing_ok=True)
            count += 1
        log.info(f"Removed {count} cached covers from {self.cache_root}")
        return count

