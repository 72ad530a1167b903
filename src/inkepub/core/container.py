"""Locate the package document through META-INF/container.xml."""

import logging

from lxml import etree

from inkepub.core.archive import EpubArchive, normalize_path
from inkepub.core.errors import InvalidMimetype, MissingContainer, MissingRootfile
from inkepub.core.xmlutil import local_name, parse_xml

log = logging.getLogger(__name__)

EPUB_MIMETYPE = "application/epub+zip"
MIMETYPE_PATH = "mimetype"
CONTAINER_PATH = "META-INF/container.xml"


def check_mimetype(archive: EpubArchive) -> None:
    """Require a ``mimetype`` entry reading exactly application/epub+zip."""
    raw = archive.entries.get(MIMETYPE_PATH)
    if raw is None:
        raise InvalidMimetype("mimetype entry is missing")
    declared = raw.decode("ascii", errors="replace").strip()
    if declared != EPUB_MIMETYPE:
        raise InvalidMimetype(f"found {declared[:64]!r}")
    if archive.first_entry != MIMETYPE_PATH:
        log.warning(f"{archive.path}: mimetype is not the first archive entry")
    elif not archive.mimetype_stored:
        log.warning(f"{archive.path}: mimetype entry is compressed")


def resolve_rootfile(archive: EpubArchive) -> str:
    """Return the normalized path of the package document.

    This is the gate that decides whether the archive is an EPUB at all,
    so it runs before any OPF parsing.

    Raises:
        MissingContainer: If META-INF/container.xml is absent
        InvalidMimetype: If the mimetype entry is missing or wrong
        MissingRootfile: If no rootfile with a full-path is declared
    """
    raw = archive.get(CONTAINER_PATH)
    if raw is None:
        raise MissingContainer()

    check_mimetype(archive)

    try:
        root = parse_xml(raw)
    except etree.XMLSyntaxError as exc:
        raise MissingRootfile(f"container.xml is not well-formed: {exc}") from exc

    rootfile = next(
        (node for node in root.iter() if local_name(node.tag) == "rootfile"),
        None,
    )
    if rootfile is None:
        raise MissingRootfile()

    full_path = normalize_path((rootfile.get("full-path") or "").strip())
    if not full_path:
        raise MissingRootfile("rootfile has no full-path")

    log.debug(f"Package document at {full_path}")
    return full_path
