"""
XML utilities for DOCX packages.

Namespace handling, qualified-name helpers and lxml parse/serialize wrappers
shared by the package, merger and content-control modules.
"""

from typing import Dict

from lxml import etree

# WordprocessingML / OPC namespaces
W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
XML_NS = "http://www.w3.org/XML/1998/namespace"

# Prefixes Word itself uses on new elements
WORD_NSMAP: Dict[str, str] = {"w": W_NS, "r": R_NS}

NAMESPACES: Dict[str, str] = {
    "w": W_NS,
    "r": R_NS,
    "rels": REL_NS,
    "ct": CT_NS,
    "xml": XML_NS,
}

# Well-known part names
DOCUMENT_PART = "word/document.xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"
CONTENT_TYPES_PART = "[Content_Types].xml"

FOOTER_RELATIONSHIP_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/footer"
FOOTER_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.footer+xml"

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)


def qn(tag: str) -> str:
    """
    Convert a prefixed tag to Clark notation.

    Args:
        tag: Prefixed name such as ``"w:p"`` or ``"xml:space"``

    Returns:
        ``"{namespace}localname"`` string usable by lxml
    """
    prefix, _, local = tag.partition(":")
    if not local:
        return tag
    return f"{{{NAMESPACES[prefix]}}}{local}"


def parse(data: bytes) -> etree._Element:
    """Parse XML bytes into a root element. Raises ``etree.XMLSyntaxError``."""
    return etree.fromstring(data, parser=_PARSER)


def serialize(root: etree._Element) -> bytes:
    """Serialize a root element with the declaration Word writes."""
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", standalone=True)


def local_name(element: etree._Element) -> str:
    """Return the local part of an element's tag."""
    return etree.QName(element).localname
