"""Parse the OPF package document into metadata, manifest and spine."""

import logging
import re

from lxml import etree

from inkepub.core.archive import EpubArchive, resolve_href
from inkepub.core.errors import MalformedPackageDocument, ResourceNotFound
from inkepub.core.xmlutil import attributes, child, children, local_name, parse_xml, text_of
from inkepub.models.epub import ManifestItem, PackageDocument

log = logging.getLogger(__name__)

# dc:* element -> PackageDocument field, first non-blank occurrence wins
DC_FIELDS = {
    "title": "title",
    "creator": "author",
    "publisher": "publisher",
    "description": "description",
    "language": "language",
    "date": "publication_date",
    "rights": "rights",
}

# EPUB2 files sometimes wrap metadata in these legacy containers
LEGACY_METADATA_WRAPPERS = {"dc-metadata", "x-metadata"}

ISBN_PREFIX_RE = re.compile(r"^(urn:)?isbn(-1[03])?:?\s*", re.IGNORECASE)


def looks_like_isbn(value: str) -> bool:
    cleaned = re.sub(r"[^0-9Xx]", "", ISBN_PREFIX_RE.sub("", value or ""))
    return len(cleaned) in {10, 13} and cleaned[:-1].isdigit()


def _metadata_nodes(metadata: etree._Element) -> list[etree._Element]:
    nodes = []
    for node in metadata:
        if local_name(node.tag) in LEGACY_METADATA_WRAPPERS:
            nodes.extend(node)
        else:
            nodes.append(node)
    return nodes


def _parse_metadata(metadata: etree._Element | None) -> dict:
    fields: dict = {"subjects": [], "extra_metadata": {}}
    if metadata is None:
        return fields

    extra: dict[str, str] = fields["extra_metadata"]
    for node in _metadata_nodes(metadata):
        name = local_name(node.tag)
        attrs = attributes(node)
        value = text_of(node)

        if name == "meta":
            if attrs.get("refines"):
                continue
            key = (attrs.get("name") or attrs.get("property") or "").strip()
            content = (attrs.get("content") or "").strip() or value
            if not key or not content:
                continue
            extra.setdefault(key, content)
            if key == "cover" and "name" in attrs:
                fields.setdefault("cover_id", content)
            continue

        if not value:
            continue

        if name == "subject":
            fields["subjects"].append(value)
        elif name == "identifier":
            scheme = (attrs.get("scheme") or "").lower()
            id_attr = (attrs.get("id") or "").lower()
            fields.setdefault("identifier", value)
            if "isbn" in scheme or "isbn" in id_attr or looks_like_isbn(value):
                fields.setdefault("isbn", ISBN_PREFIX_RE.sub("", value))
        elif name in DC_FIELDS:
            fields.setdefault(DC_FIELDS[name], value)

    return fields


def _parse_manifest(
    archive: EpubArchive, opf_path: str, manifest: etree._Element | None
) -> dict[str, ManifestItem]:
    items: dict[str, ManifestItem] = {}
    if manifest is None:
        return items

    for node in children(manifest, "item"):
        item_id = (node.get("id") or "").strip()
        href = resolve_href(opf_path, node.get("href") or "")
        # use the stored spelling when the entry only matches case-insensitively
        href = archive.locate(href) or href
        if not item_id or not href or item_id in items:
            continue
        items[item_id] = ManifestItem(
            id=item_id,
            href=href,
            media_type=(node.get("media-type") or "").strip().lower(),
            properties=frozenset((node.get("properties") or "").split()),
        )
    return items


def _parse_spine(spine: etree._Element | None) -> list[str]:
    if spine is None:
        return []
    idrefs = ((node.get("idref") or "").strip() for node in children(spine, "itemref"))
    return [idref for idref in idrefs if idref]


def parse_package(archive: EpubArchive, opf_path: str) -> PackageDocument:
    """Parse the package document at ``opf_path``.

    Metadata, manifest and spine are read in independent passes; a missing
    metadata field only produces a warning.

    Raises:
        ResourceNotFound: If the package document is not in the archive
        MalformedPackageDocument: If it is not parseable OPF
    """
    raw = archive.get(opf_path)
    if raw is None:
        raise ResourceNotFound(opf_path)

    try:
        root = parse_xml(raw)
    except etree.XMLSyntaxError as exc:
        raise MalformedPackageDocument(str(exc)) from exc

    if local_name(root.tag) != "package":
        raise MalformedPackageDocument(f"unexpected root element <{local_name(root.tag)}>")

    fields = _parse_metadata(child(root, "metadata"))
    manifest = _parse_manifest(archive, opf_path, child(root, "manifest"))
    spine = _parse_spine(child(root, "spine"))

    warnings = []
    if not fields.get("title"):
        warnings.append("No title found")
    if not fields.get("author"):
        warnings.append("No author found")
    if not spine:
        warnings.append("Spine is empty")

    dangling = [idref for idref in spine if idref not in manifest]
    if dangling:
        log.warning(f"{opf_path}: spine references unknown items {dangling}")

    return PackageDocument(
        path=opf_path,
        version=(root.get("version") or "").strip() or None,
        manifest=manifest,
        spine=spine,
        warnings=warnings,
        **fields,
    )
