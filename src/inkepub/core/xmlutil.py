"""Namespace-tolerant helpers over lxml."""

from lxml import etree


def parse_xml(raw: bytes) -> etree._Element:
    """Parse untrusted XML: no entity expansion, no network.

    Raises:
        etree.XMLSyntaxError: If nothing usable can be recovered
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=True)
    root = etree.fromstring(raw, parser=parser)
    if root is None:
        raise etree.XMLSyntaxError("empty document", None, 0, 0)
    return root


def local_name(tag: object) -> str:
    # comments and processing instructions have non-string tags
    if not tag or not isinstance(tag, str):
        return ""
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def child(node: etree._Element, name: str) -> etree._Element | None:
    for element in node:
        if local_name(element.tag) == name:
            return element
    return None


def children(node: etree._Element, name: str) -> list[etree._Element]:
    return [element for element in node if local_name(element.tag) == name]


def attributes(node: etree._Element) -> dict[str, str]:
    """Attributes keyed by local name (``opf:scheme`` becomes ``scheme``)."""
    return {local_name(key): str(value) for key, value in node.attrib.items()}


def text_of(node: etree._Element | None) -> str | None:
    if node is None:
        return None
    text = " ".join("".join(node.itertext()).split())
    return text or None
