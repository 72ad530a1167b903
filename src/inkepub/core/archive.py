"""In-memory view of an EPUB's ZIP container."""

import logging
import posixpath
import zipfile
import zlib
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from urllib.parse import unquote

from inkepub.core.errors import ArchiveTooLarge, IoError, NotAnArchive

log = logging.getLogger(__name__)


def normalize_path(name: str) -> str:
    """Canonical archive path: forward slashes, no leading '/', no '..' escape."""
    normalized = posixpath.normpath((name or "").replace("\\", "/")).lstrip("/")
    while normalized.startswith("../"):
        normalized = normalized[3:]
    return "" if normalized in {"", ".", ".."} else normalized


def resolve_href(base_path: str, href: str) -> str:
    """Resolve ``href`` relative to the directory of ``base_path``.

    The fragment, if any, is dropped. Returns "" for an empty reference.
    """
    raw = unquote((href or "").split("#", 1)[0].strip())
    if not raw:
        return ""
    base_dir = PurePosixPath(base_path).parent.as_posix()
    if base_dir in {"", "."}:
        return normalize_path(raw)
    return normalize_path(f"{base_dir}/{raw}")


def split_fragment(href: str) -> tuple[str, str | None]:
    """Split ``href`` into path and optional anchor."""
    path, sep, anchor = (href or "").partition("#")
    return path, (anchor or None) if sep else None


@dataclass(frozen=True)
class EpubArchive:
    """Entries of one archive, keyed by normalized path.

    Built once per call and never shared; components read through it.
    """

    path: Path
    entries: dict[str, bytes]
    first_entry: str = ""
    mimetype_stored: bool = True
    _folded: dict[str, str] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        for name in self.entries:
            self._folded.setdefault(name.lower(), name)

    def __contains__(self, name: str) -> bool:
        return self.locate(name) is not None

    def locate(self, name: str) -> str | None:
        """Return the stored path for ``name``, tolerating case differences."""
        normalized = normalize_path(name)
        if not normalized:
            return None
        if normalized in self.entries:
            return normalized
        return self._folded.get(normalized.lower())

    def get(self, name: str) -> bytes | None:
        located = self.locate(name)
        return self.entries[located] if located else None


def load_archive(path: Path, max_size: int) -> EpubArchive:
    """Read every non-directory entry of the ZIP at ``path`` into memory.

    Raises:
        IoError: If the file cannot be read
        ArchiveTooLarge: If the file or its uncompressed content exceeds max_size
        NotAnArchive: If the file is not a ZIP archive
    """
    try:
        file_size = path.stat().st_size
    except OSError as exc:
        raise IoError(str(exc)) from exc

    if file_size > max_size:
        raise ArchiveTooLarge(f"{file_size} bytes exceeds {max_size}")

    try:
        with zipfile.ZipFile(path, "r") as zf:
            infos = [info for info in zf.infolist() if not info.is_dir()]
            uncompressed = sum(info.file_size for info in infos)
            if uncompressed > max_size:
                raise ArchiveTooLarge(f"{uncompressed} uncompressed bytes exceeds {max_size}")

            entries: dict[str, bytes] = {}
            for info in infos:
                name = normalize_path(info.filename)
                if not name or name in entries:
                    continue
                entries[name] = zf.read(info.filename)

            first = infos[0] if infos else None
    except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
        raise NotAnArchive(str(exc)) from exc
    except (RuntimeError, NotImplementedError) as exc:
        # encrypted or unsupported compression
        raise IoError(str(exc)) from exc
    except OSError as exc:
        raise IoError(str(exc)) from exc

    log.debug(f"Loaded {len(entries)} entries from {path}")
    return EpubArchive(
        path=path,
        entries=entries,
        first_entry=normalize_path(first.filename) if first else "",
        mimetype_stored=first is None or first.compress_type == zipfile.ZIP_STORED,
    )
