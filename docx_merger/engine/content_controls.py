"""
Content Control Engine - rewriting tagged structured fields (``w:sdt``).

Handles:
- Locating content controls at any depth of the main document
- Replacing the content of controls whose tag is in a replacement mapping
- Reading the current text of every tagged control
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union
import logging

from lxml import etree

from ..exceptions import InvalidArgumentError, NotFoundError
from ..parser.package import open_for_read, open_for_update
from ..utils.xml_utils import DOCUMENT_PART, qn

logger = logging.getLogger(__name__)


@dataclass
class ContentControlInfo:
    """Content control found in a document."""
    tag: Optional[str]
    alias: Optional[str]
    text: str


def get_tag(sdt: etree._Element) -> Optional[str]:
    """Tag value of a content control (``w:sdtPr/w:tag/@w:val``), or None."""
    tag = sdt.find(f"{qn('w:sdtPr')}/{qn('w:tag')}")
    if tag is None:
        return None
    return tag.get(qn("w:val"))


def get_alias(sdt: etree._Element) -> Optional[str]:
    alias = sdt.find(f"{qn('w:sdtPr')}/{qn('w:alias')}")
    if alias is None:
        return None
    return alias.get(qn("w:val"))


def get_text(sdt: etree._Element) -> str:
    """Concatenated ``w:t`` text of the control's content, paragraphs joined by newlines."""
    content = sdt.find(qn("w:sdtContent"))
    if content is None:
        return ""
    paragraphs = content.findall(f".//{qn('w:p')}")
    if not paragraphs:
        return "".join(t.text or "" for t in content.iter(qn("w:t")))
    return "\n".join(
        "".join(t.text or "" for t in paragraph.iter(qn("w:t")))
        for paragraph in paragraphs
    )


def _is_attached(element: etree._Element, root: etree._Element) -> bool:
    node = element
    while node.getparent() is not None:
        node = node.getparent()
    return node is root


def validate_replacements(replacements: Optional[Mapping[str, str]]) -> None:
    if replacements is None:
        raise InvalidArgumentError("Replacements mapping cannot be None")
    if len(replacements) == 0:
        raise InvalidArgumentError("Replacements mapping cannot be empty")
    if any(key is None or not str(key).strip() for key in replacements):
        raise InvalidArgumentError("Replacement keys cannot be null or empty")
    if any(value is None for value in replacements.values()):
        raise InvalidArgumentError("Replacement values cannot be null")


def _validate_path(docx_path: Union[str, Path, None]) -> Path:
    if docx_path is None or not str(docx_path).strip():
        raise NotFoundError("Document path cannot be null or empty", path=None)
    path = Path(docx_path)
    if not path.is_file():
        raise NotFoundError(f"Document not found: {path}", path=str(path))
    return path


class ContentControlUpdater:
    """
    Replaces the content of tagged content controls with plain text.

    Controls whose tag is missing or not in the mapping are left untouched.
    Running twice with the same mapping yields the same document.
    """

    def replace_in_tree(self, root: etree._Element, replacements: Mapping[str, str]) -> int:
        """
        Rewrite matching content controls in a parsed ``word/document.xml`` tree.

        Args:
            root: Main document root (mutated)
            replacements: Mapping {tag: replacement text}

        Returns:
            Number of content controls rewritten
        """
        replaced = 0
        # Materialised up front: rewriting a control detaches controls nested in it
        for sdt in list(root.iter(qn("w:sdt"))):
            if not _is_attached(sdt, root):
                continue

            tag = get_tag(sdt)
            if tag is None or tag not in replacements:
                continue

            content = sdt.find(qn("w:sdtContent"))
            if content is None:
                logger.debug(f"Content control '{tag}' has no content container, skipped")
                continue

            if sdt.getparent() is not None and sdt.getparent().tag == qn("w:p"):
                logger.warning(f"Content control '{tag}' sits inside a paragraph; its replacement paragraph will be nested")
            self._set_content(content, str(replacements[tag]), tag)
            replaced += 1

        return replaced

    def _set_content(self, content: etree._Element, text: str, tag: str) -> None:
        for child in list(content):
            content.remove(child)
        content.text = None

        paragraph = etree.SubElement(content, qn("w:p"))
        run = etree.SubElement(paragraph, qn("w:r"))
        text_element = etree.SubElement(run, qn("w:t"))
        text_element.set(qn("xml:space"), "preserve")
        try:
            text_element.text = text
        except ValueError as exc:
            raise InvalidArgumentError(f"Replacement for '{tag}' is not valid XML text", str(exc)) from exc

    def update_content_controls(
        self,
        docx_path: Union[str, Path],
        replacements: Mapping[str, str]
    ) -> int:
        """
        Replace the content of tagged content controls in a DOCX file.

        Args:
            docx_path: Path to the DOCX file, rewritten in place
            replacements: Mapping {tag: replacement text}

        Returns:
            Number of content controls rewritten

        Raises:
            NotFoundError: Blank or missing path
            InvalidArgumentError: None, empty, blank-keyed or None-valued mapping

        Examples:
            >>> updater = ContentControlUpdater()
            >>> updater.update_content_controls("merged.docx", {"ClientName": "Acme"})
        """
        path = _validate_path(docx_path)
        validate_replacements(replacements)

        with open_for_update(path) as package:
            document = package.load_part(DOCUMENT_PART)
            replaced = self.replace_in_tree(document, replacements)
            package.save_part(DOCUMENT_PART, document)

        logger.info(f"Updated {replaced} content control(s) in {path.name}")
        return replaced

    def extract_content_controls(self, root: etree._Element) -> List[ContentControlInfo]:
        """List every content control of a document tree in document order."""
        return [
            ContentControlInfo(tag=get_tag(sdt), alias=get_alias(sdt), text=get_text(sdt))
            for sdt in root.iter(qn("w:sdt"))
        ]


def update_content_controls(docx_path: Union[str, Path], replacements: Mapping[str, str]) -> int:
    """Rewrite tagged content controls (convenience function)."""
    return ContentControlUpdater().update_content_controls(docx_path, replacements)


def list_content_controls(docx_path: Union[str, Path]) -> List[ContentControlInfo]:
    """List the content controls of a DOCX file without modifying it."""
    path = _validate_path(docx_path)
    with open_for_read(path) as package:
        document = package.load_part(DOCUMENT_PART)
    return ContentControlUpdater().extract_content_controls(document)


def read_content_controls(docx_path: Union[str, Path]) -> Dict[str, str]:
    """
    Read the text of tagged content controls.

    Returns:
        Mapping {tag: text}; for repeated tags the first occurrence wins
    """
    values: Dict[str, str] = {}
    for control in list_content_controls(docx_path):
        if control.tag is not None and control.tag not in values:
            values[control.tag] = control.text
    return values
