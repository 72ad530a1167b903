"""Locate the cover image in the manifest and store it as JPEG."""

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from inkepub.core.archive import EpubArchive
from inkepub.models.epub import ManifestItem, PackageDocument

log = logging.getLogger(__name__)


def select_cover_item(package: PackageDocument) -> ManifestItem | None:
    """Pick the cover among image items; the first matching rule wins.

    Priority: ``cover-image`` property, the EPUB2 ``<meta name="cover">``
    target, an id containing "cover", an href containing "cover".
    """
    images = [item for item in package.manifest.values() if item.is_image]

    for item in images:
        if "cover-image" in item.properties:
            return item

    if package.cover_id:
        item = package.manifest.get(package.cover_id)
        if item is not None and item.is_image:
            return item

    for item in images:
        if "cover" in item.id.lower():
            return item

    for item in images:
        if "cover" in item.href.lower():
            return item

    return None


class CoverExtractor:
    """Decode the cover image and re-encode it as JPEG."""

    def __init__(self, quality: int = 90):
        self.quality = quality

    def extract(self, archive: EpubArchive, package: PackageDocument, output_path: Path) -> Path | None:
        """Write the cover to ``output_path``.

        Returns None when the book has no cover or it cannot be decoded.
        """
        item = select_cover_item(package)
        if item is None:
            log.debug(f"{archive.path}: no cover image declared")
            return None

        raw = archive.get(item.href)
        if raw is None:
            log.warning(f"{archive.path}: cover {item.href} is missing from the archive")
            return None

        try:
            with Image.open(BytesIO(raw)) as img:
                img.convert("RGB").save(output_path, "JPEG", quality=self.quality)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            log.warning(f"Cover {item.href} could not be decoded: {e}")
            output_path.unlink(missing_ok=True)
            return None

        log.info(f"Cover saved: {output_path}")
        return output_path
