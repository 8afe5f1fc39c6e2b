"""
Footer builder - generates per-document footer parts with a live PAGE field.

Each footer is a single paragraph::

    <fileName> - Page {PAGE}

where ``{PAGE}`` is a field evaluated by the word processor at render time.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union
import logging

from lxml import etree

from ..utils.xml_utils import (
    FOOTER_CONTENT_TYPE,
    FOOTER_RELATIONSHIP_TYPE,
    WORD_NSMAP,
    qn,
)
from .relationships import add_override, add_relationship

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LABEL = " - Page "
PAGE_FIELD_INSTRUCTION = "PAGE"


class FooterBuilder:
    """
    Creates footer parts and registers them in the destination package.
    """

    def __init__(self, page_label: str = DEFAULT_PAGE_LABEL) -> None:
        """
        Args:
            page_label: Literal text placed between the file name and the page field
        """
        self.page_label = page_label

    def build_footer(self, display_name: str) -> etree._Element:
        """
        Build the footer XML tree.

        The paragraph holds exactly four runs: the label text, the field
        begin marker, the ``PAGE`` instruction and the field end marker.

        Args:
            display_name: Source file name shown in the footer

        Returns:
            ``w:ftr`` root element
        """
        ftr = etree.Element(qn("w:ftr"), nsmap=WORD_NSMAP)
        paragraph = etree.SubElement(ftr, qn("w:p"))

        label_run = etree.SubElement(paragraph, qn("w:r"))
        label = etree.SubElement(label_run, qn("w:t"))
        label.text = display_name + self.page_label
        # Trailing space of the label must survive rendering
        label.set(qn("xml:space"), "preserve")

        begin_run = etree.SubElement(paragraph, qn("w:r"))
        etree.SubElement(begin_run, qn("w:fldChar")).set(qn("w:fldCharType"), "begin")

        instr_run = etree.SubElement(paragraph, qn("w:r"))
        instr = etree.SubElement(instr_run, qn("w:instrText"))
        instr.set(qn("xml:space"), "preserve")
        instr.text = PAGE_FIELD_INSTRUCTION

        end_run = etree.SubElement(paragraph, qn("w:r"))
        etree.SubElement(end_run, qn("w:fldChar")).set(qn("w:fldCharType"), "end")

        return ftr

    def create_footer(
        self,
        package: Any,
        rels_root: etree._Element,
        content_types_root: etree._Element,
        source: Union[str, Path],
        relationship_id: str,
        footer_part_name: str,
    ) -> etree._Element:
        """
        Create a footer part and register it in the package manifests.

        Args:
            package: Open destination :class:`~docx_merger.parser.package.Package`
            rels_root: Main document relationships tree (mutated)
            content_types_root: Content types tree (mutated)
            source: Source file path or display name; only the file name is shown
            relationship_id: Id of the new relationship, e.g. ``"rIdFooter1"``
            footer_part_name: File name of the part inside ``word/``, e.g. ``"footer1.xml"``

        Returns:
            The footer tree that was written
        """
        display_name = Path(source).name
        footer = self.build_footer(display_name)

        part_name = f"word/{footer_part_name}"
        package.save_part(part_name, footer)

        add_relationship(rels_root, relationship_id, FOOTER_RELATIONSHIP_TYPE, footer_part_name)
        add_override(content_types_root, f"/{part_name}", FOOTER_CONTENT_TYPE)

        logger.debug(f"Created footer {part_name} ({relationship_id}) for {display_name}")
        return footer
