"""
Document Merger module - DOCX concatenation with per-document footers.
"""

from .document_merger import DocumentMerger, MergeOptions, merge_with_dynamic_footers
from .footer_builder import FooterBuilder

__all__ = [
    "DocumentMerger",
    "FooterBuilder",
    "MergeOptions",
    "merge_with_dynamic_footers",
]
