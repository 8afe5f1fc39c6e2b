"""Package access for DOCX files."""

from .package import Package, open_for_read, open_for_update

__all__ = ["Package", "open_for_read", "open_for_update"]
