"""
Relationship helpers - OPC relationship and content-type bookkeeping.

Operates on the parsed ``word/_rels/document.xml.rels`` and
``[Content_Types].xml`` trees:
- Adding and enumerating relationships
- Adding, finding and removing content-type overrides
- Purging existing footer parts together with their registrations
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional
import logging
import posixpath

from lxml import etree

from ..utils.xml_utils import FOOTER_RELATIONSHIP_TYPE, local_name

logger = logging.getLogger(__name__)

# Relationship targets in document.xml.rels are relative to this folder
DOCUMENT_FOLDER = "word"


def _sibling_tag(root: etree._Element, name: str) -> str:
    """Qualified tag for a new child, in the namespace of ``root``."""
    namespace = etree.QName(root).namespace
    if namespace:
        return f"{{{namespace}}}{name}"
    return name


def _children(root: etree._Element, name: str) -> Iterator[etree._Element]:
    """Yield direct child elements with the given local name."""
    for child in root.iterchildren(etree.Element):
        if local_name(child) == name:
            yield child


def target_to_part_name(target: str) -> str:
    """
    Resolve a relationship Target of the main document to a part name.

    ``"footer1.xml"`` -> ``"word/footer1.xml"``;
    ``"/word/footer1.xml"`` -> ``"word/footer1.xml"``.
    """
    if target.startswith("/"):
        return target.lstrip("/")
    return posixpath.normpath(posixpath.join(DOCUMENT_FOLDER, target))


def part_rels_name(part_name: str) -> str:
    """Name of the relationships part belonging to ``part_name``."""
    folder, name = posixpath.split(part_name)
    return posixpath.join(folder, "_rels", name + ".rels")


def iter_relationships(
    rels_root: etree._Element,
    rel_type: Optional[str] = None
) -> Iterator[etree._Element]:
    """
    Iterate over Relationship entries.

    Args:
        rels_root: Root of a relationships part
        rel_type: Only yield entries with this Type URI (None = all)
    """
    for rel in _children(rels_root, "Relationship"):
        if rel_type is None or rel.get("Type") == rel_type:
            yield rel


def add_relationship(rels_root: etree._Element, rel_id: str, rel_type: str, target: str) -> etree._Element:
    """
    Append a Relationship entry.

    No duplicate check is made on ``rel_id``; the caller owns id uniqueness.
    """
    rel = etree.SubElement(rels_root, _sibling_tag(rels_root, "Relationship"))
    rel.set("Id", rel_id)
    rel.set("Type", rel_type)
    rel.set("Target", target)
    return rel


def find_override(ct_root: etree._Element, part_name: str) -> Optional[etree._Element]:
    """Return the Override entry for ``part_name`` (e.g. ``"/word/footer1.xml"``)."""
    for override in _children(ct_root, "Override"):
        if override.get("PartName") == part_name:
            return override
    return None


def has_override(ct_root: etree._Element, part_name: str) -> bool:
    return find_override(ct_root, part_name) is not None


def add_override(ct_root: etree._Element, part_name: str, content_type: str) -> bool:
    """
    Register a content type for one part.

    Returns:
        True if an entry was added, False if one already existed
    """
    if has_override(ct_root, part_name):
        return False
    override = etree.SubElement(ct_root, _sibling_tag(ct_root, "Override"))
    override.set("PartName", part_name)
    override.set("ContentType", content_type)
    return True


def remove_override(ct_root: etree._Element, part_name: str) -> bool:
    """Remove the Override entry for ``part_name`` if present."""
    override = find_override(ct_root, part_name)
    if override is None:
        return False
    ct_root.remove(override)
    return True


def remove_footers(package: Any, rels_root: etree._Element, ct_root: etree._Element) -> List[str]:
    """
    Remove every footer relationship, its part and its content-type override.

    Args:
        package: Open :class:`~docx_merger.parser.package.Package`
        rels_root: Main document relationships tree
        ct_root: Content types tree

    Returns:
        Part names of the removed footers
    """
    removed: List[str] = []
    for rel in list(iter_relationships(rels_root, FOOTER_RELATIONSHIP_TYPE)):
        target = rel.get("Target", "")
        rels_root.remove(rel)
        if not target:
            continue
        part_name = target_to_part_name(target)
        package.delete_part(part_name)
        package.delete_part(part_rels_name(part_name))
        remove_override(ct_root, "/" + part_name)
        removed.append(part_name)

    if removed:
        logger.debug(f"Removed {len(removed)} existing footer(s): {', '.join(removed)}")
    return removed
