"""Custom exceptions for DOCX Merger.

Every error carries an :class:`ErrorKind` so that the boundary layer can
dispatch on ``error.kind`` instead of walking the class hierarchy.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of failure surfaced by the package, merger and rewriter."""

    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    CORRUPT_ARCHIVE = "corrupt_archive"
    MALFORMED_XML = "malformed_xml"
    MISSING_PART = "missing_part"


class DocxMergerError(Exception):
    """Base exception for DOCX Merger errors."""

    kind: ErrorKind

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class NotFoundError(DocxMergerError):
    """Exception raised when an input or output file does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message, details)
        self.path = path


class InvalidArgumentError(DocxMergerError):
    """Exception raised when a caller-supplied argument is rejected."""

    kind = ErrorKind.INVALID_ARGUMENT


class CorruptArchiveError(DocxMergerError):
    """Exception raised when a file cannot be opened as a ZIP archive."""

    kind = ErrorKind.CORRUPT_ARCHIVE


class MalformedXmlError(DocxMergerError):
    """Exception raised when a package part does not parse as XML."""

    kind = ErrorKind.MALFORMED_XML

    def __init__(self, message: str, part_name: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message, details)
        self.part_name = part_name


class MissingPartError(DocxMergerError):
    """Exception raised when an archive lacks a part the merge depends on."""

    kind = ErrorKind.MISSING_PART

    def __init__(self, message: str, part_name: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message, details)
        self.part_name = part_name
