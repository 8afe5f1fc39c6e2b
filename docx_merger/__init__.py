"""
DOCX Merger - concatenates Word documents with per-document dynamic footers.

Every source document gets its own section in the merged output, closed by a
footer showing the source file name and a live page number. A separate pass
rewrites tagged content controls in the merged document.

Quick Start:
    from docx_merger import DocumentMerger, ContentControlUpdater

    DocumentMerger().merge_with_dynamic_footers(["a.docx", "b.docx"], "out.docx")
    ContentControlUpdater().update_content_controls("out.docx", {"ClientName": "Acme"})
"""

from .version import __version__, __version_info__

from .exceptions import (
    CorruptArchiveError,
    DocxMergerError,
    ErrorKind,
    InvalidArgumentError,
    MalformedXmlError,
    MissingPartError,
    NotFoundError,
)
from .parser import Package, open_for_read, open_for_update
from .merger import DocumentMerger, FooterBuilder, MergeOptions, merge_with_dynamic_footers
from .engine import (
    ContentControlInfo,
    ContentControlUpdater,
    list_content_controls,
    read_content_controls,
    update_content_controls,
)
from .api import merge_and_update

__all__ = [
    "__version__",
    "__version_info__",
    # Exceptions
    "DocxMergerError",
    "ErrorKind",
    "NotFoundError",
    "InvalidArgumentError",
    "CorruptArchiveError",
    "MalformedXmlError",
    "MissingPartError",
    # Package access
    "Package",
    "open_for_read",
    "open_for_update",
    # Merging
    "DocumentMerger",
    "FooterBuilder",
    "MergeOptions",
    "merge_with_dynamic_footers",
    # Content controls
    "ContentControlInfo",
    "ContentControlUpdater",
    "list_content_controls",
    "read_content_controls",
    "update_content_controls",
    # High-level API
    "merge_and_update",
]
