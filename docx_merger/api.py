"""
Simple high-level API for DOCX Merger.

Usage:
    from docx_merger import merge_and_update

    merge_and_update(
        ["source1.docx", "source2.docx"],
        "merged.docx",
        {"ClientName": "ImpleVista", "AssignmentName": "MergeDocuments"},
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Sequence, Union
import logging

from .engine.content_controls import ContentControlUpdater, validate_replacements
from .merger.document_merger import DocumentMerger, MergeOptions

logger = logging.getLogger(__name__)


def merge_and_update(
    input_files: Sequence[Union[str, Path]],
    output_path: Union[str, Path],
    replacements: Optional[Mapping[str, str]] = None,
    options: Optional[MergeOptions] = None
) -> Path:
    """
    Merge documents with per-document footers, then rewrite content controls.

    The two passes run one after the other, each with its own package
    handle; the merge has closed the output before the rewrite opens it.

    Args:
        input_files: Ordered DOCX paths to merge
        output_path: Destination DOCX path
        replacements: Mapping {tag: text}; the rewrite pass is skipped when None
        options: Footer naming options

    Returns:
        Path of the merged document
    """
    if replacements is not None:
        validate_replacements(replacements)

    output = DocumentMerger(options=options).merge_with_dynamic_footers(input_files, output_path)

    if replacements is not None:
        count = ContentControlUpdater().update_content_controls(output, replacements)
        logger.debug(f"Content control pass rewrote {count} field(s)")

    return output
