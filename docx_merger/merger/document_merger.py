"""
Document Merger - concatenates DOCX files with one dynamic footer per source.

The first input seeds the output package (styles, numbering, settings come
along with it). The body content of every input is then laid out in order,
each region closed by its own section so that it carries a footer naming the
file it came from, followed by a live page number.
"""

from __future__ import annotations

import copy
import shutil
from pathlib import Path
from typing import List, Optional, Sequence, Union
import logging

from lxml import etree

from ..exceptions import InvalidArgumentError, MalformedXmlError, NotFoundError
from ..parser.package import Package, open_for_read, open_for_update
from ..utils.xml_utils import (
    CONTENT_TYPES_PART,
    DOCUMENT_PART,
    DOCUMENT_RELS_PART,
    WORD_NSMAP,
    qn,
)
from .footer_builder import DEFAULT_PAGE_LABEL, FooterBuilder
from .relationships import remove_footers

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class MergeOptions:
    """Naming options for the generated footers."""

    def __init__(
        self,
        relationship_id_prefix: str = "rIdFooter",
        footer_part_prefix: str = "footer",
        page_label: str = DEFAULT_PAGE_LABEL
    ):
        """
        Initialize merge options.

        Args:
            relationship_id_prefix: Prefix of generated relationship ids (``rIdFooter1``...)
            footer_part_prefix: Prefix of generated footer part names (``footer1.xml``...)
            page_label: Text between the file name and the page number
        """
        if not relationship_id_prefix or not relationship_id_prefix.strip():
            raise InvalidArgumentError("Relationship id prefix cannot be empty")
        if not footer_part_prefix or not footer_part_prefix.strip():
            raise InvalidArgumentError("Footer part prefix cannot be empty")
        self.relationship_id_prefix = relationship_id_prefix
        self.footer_part_prefix = footer_part_prefix
        self.page_label = page_label

    def relationship_id(self, index: int) -> str:
        return f"{self.relationship_id_prefix}{index}"

    def footer_part_name(self, index: int) -> str:
        return f"{self.footer_part_prefix}{index}.xml"


def _body(document_root: etree._Element, source: PathLike) -> etree._Element:
    body = document_root.find(qn("w:body"))
    if body is None:
        raise MalformedXmlError(f"Document has no body element: {source}", part_name=DOCUMENT_PART)
    return body


def _footer_section(relationship_id: str) -> etree._Element:
    """``w:sectPr`` whose default footer is ``relationship_id``."""
    sect_pr = etree.Element(qn("w:sectPr"), nsmap=WORD_NSMAP)
    reference = etree.SubElement(sect_pr, qn("w:footerReference"))
    reference.set(qn("w:type"), "default")
    reference.set(qn("r:id"), relationship_id)
    return sect_pr


def _section_break(relationship_id: str) -> etree._Element:
    """Paragraph that closes the current section with the given footer."""
    paragraph = etree.Element(qn("w:p"), nsmap=WORD_NSMAP)
    p_pr = etree.SubElement(paragraph, qn("w:pPr"))
    p_pr.append(_footer_section(relationship_id))
    return paragraph


class DocumentMerger:
    """
    Merges DOCX files into one package with a distinct footer per source.
    """

    def __init__(
        self,
        footer_builder: Optional[FooterBuilder] = None,
        options: Optional[MergeOptions] = None
    ) -> None:
        """
        Initialize merger.

        Args:
            footer_builder: Builder used for the per-document footers
            options: Naming options; defaults produce ``rIdFooterN`` / ``footerN.xml``
        """
        self.options = options or MergeOptions()
        self.footer_builder = footer_builder or FooterBuilder(self.options.page_label)

    def _validate(self, input_files: Sequence[PathLike], output_path: PathLike) -> List[Path]:
        if not input_files:
            raise InvalidArgumentError("No files provided.")

        files = [Path(f) for f in input_files]
        for file in files:
            if not file.is_file():
                raise NotFoundError(f"Input file not found: {file}", path=str(file))

        if output_path is None or not str(output_path).strip():
            raise InvalidArgumentError("Output file path cannot be null or empty.")

        output = Path(output_path)
        if output.is_dir():
            raise InvalidArgumentError(f"Output path is a directory: {output}")
        if not output.parent.is_dir():
            raise NotFoundError(f"Output directory not found: {output.parent}", path=str(output.parent))
        if output.exists():
            for file in files:
                if output.resolve() == file.resolve():
                    raise InvalidArgumentError(f"Output file would overwrite an input: {output}")
        return files

    def merge_with_dynamic_footers(
        self,
        input_files: Sequence[PathLike],
        output_path: PathLike
    ) -> Path:
        """
        Merge ``input_files`` into ``output_path``.

        Args:
            input_files: Ordered, non-empty sequence of DOCX paths
            output_path: Destination path, overwritten if present

        Returns:
            Path of the merged document

        Raises:
            InvalidArgumentError: Empty input list, blank output path or output is a directory
            NotFoundError: An input file or the output directory does not exist
            MissingPartError: A required part is absent from the output or a source

        On failure the copied seed file stays at ``output_path`` and must be
        treated as invalid by the caller.

        Examples:
            >>> merger = DocumentMerger()
            >>> merger.merge_with_dynamic_footers(["a.docx", "b.docx"], "out.docx")
        """
        files = self._validate(input_files, output_path)
        output = Path(output_path)

        # Seed the output with a complete package skeleton
        try:
            shutil.copyfile(files[0], output)
        except OSError as exc:
            raise NotFoundError(f"Cannot write output file: {output}", path=str(output), details=str(exc)) from exc

        with open_for_update(output) as package:
            self._merge_into(package, files)

        logger.info(f"Merged {len(files)} document(s) into {output}")
        return output

    def _merge_into(self, package: Package, files: List[Path]) -> None:
        main_doc = package.load_part(DOCUMENT_PART)
        rels = package.load_part(DOCUMENT_RELS_PART)
        content_types = package.load_part(CONTENT_TYPES_PART)
        body = _body(main_doc, package.docx_path)

        # Rebuilt per section below
        for sect_pr in body.findall(qn("w:sectPr")):
            body.remove(sect_pr)

        remove_footers(package, rels, content_types)

        footer_index = 0
        last = len(files)
        for footer_index, source in enumerate(files, start=1):
            nodes = self._copy_body_content(source)

            if footer_index == 1:
                # First input's own content becomes the initial body
                for child in list(body):
                    body.remove(child)
            body.extend(nodes)

            rel_id = self.options.relationship_id(footer_index)
            footer_file = self.options.footer_part_name(footer_index)
            self.footer_builder.create_footer(package, rels, content_types, source, rel_id, footer_file)

            if footer_index < last:
                body.append(_section_break(rel_id))

            logger.info(f"Appended {source.name} ({len(nodes)} block(s)) with footer {footer_file}")

        # Governs everything after the last section break
        body.append(_footer_section(self.options.relationship_id(footer_index)))

        package.save_part(DOCUMENT_RELS_PART, rels)
        package.save_part(CONTENT_TYPES_PART, content_types)
        package.save_part(DOCUMENT_PART, main_doc)

    def _copy_body_content(self, source: Path) -> List[etree._Element]:
        """Deep copies of the source body's children, section properties excluded."""
        with open_for_read(source) as source_package:
            for part_name in (DOCUMENT_PART, DOCUMENT_RELS_PART, CONTENT_TYPES_PART):
                # Fail before any content is taken from an incomplete source
                source_package.read_bytes(part_name)
            source_doc = source_package.load_part(DOCUMENT_PART)

        source_body = _body(source_doc, source)
        return [
            copy.deepcopy(child)
            for child in source_body
            if child.tag != qn("w:sectPr")
        ]


def merge_with_dynamic_footers(
    input_files: Sequence[PathLike],
    output_path: PathLike,
    options: Optional[MergeOptions] = None
) -> Path:
    """Merge DOCX files with per-document footers (convenience function)."""
    return DocumentMerger(options=options).merge_with_dynamic_footers(input_files, output_path)
