"""
Package reader/writer for DOCX files.

Opens a DOCX file as a mutable in-memory archive of named parts, hands out
parsed XML trees for individual parts and writes them back.
"""

import logging
import os
import shutil
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import Dict, List, Union

from lxml import etree

from ..exceptions import (
    CorruptArchiveError,
    InvalidArgumentError,
    MalformedXmlError,
    MissingPartError,
    NotFoundError,
)
from ..utils.xml_utils import parse, serialize

logger = logging.getLogger(__name__)


class Package:
    """
    Mutable view of a DOCX (ZIP) package.

    Part bytes are held in memory keyed by part name, in archive order.
    Changes reach the disk only when the package is closed; the archive is
    then rewritten to a sibling temporary file and moved over the original,
    so readers never observe a half-written file.
    """

    def __init__(self, docx_path: Union[str, Path], read_only: bool = False):
        """
        Initialize package.

        Args:
            docx_path: Path to DOCX file
            read_only: Never write back to disk, even if parts were changed
        """
        self.docx_path = Path(docx_path)
        self.read_only = read_only

        self._parts: Dict[str, bytes] = {}
        self._infos: Dict[str, zipfile.ZipInfo] = {}
        self._modified: bool = False
        self._closed: bool = False

        self._open_package()

    @classmethod
    def open(cls, docx_path: Union[str, Path], read_only: bool = False) -> "Package":
        """Open a package (alias for the constructor)."""
        return cls(docx_path, read_only=read_only)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def modified(self) -> bool:
        return self._modified

    def _open_package(self) -> None:
        """Read every entry of the ZIP archive into memory."""
        if not self.docx_path.is_file():
            raise NotFoundError(f"DOCX file not found: {self.docx_path}", path=str(self.docx_path))

        try:
            with zipfile.ZipFile(self.docx_path, "r") as zip_file:
                for info in zip_file.infolist():
                    if info.is_dir():
                        continue
                    self._parts[info.filename] = zip_file.read(info)
                    self._infos[info.filename] = info
        except zipfile.BadZipFile as exc:
            raise CorruptArchiveError(f"Not a valid DOCX package: {self.docx_path}", str(exc)) from exc
        except (RuntimeError, EOFError, NotImplementedError, zlib.error) as exc:
            # Encrypted, truncated, unsupported or corrupt compressed entries
            raise CorruptArchiveError(f"Cannot read DOCX package: {self.docx_path}", str(exc)) from exc

        logger.debug(f"Opened DOCX package {self.docx_path} ({len(self._parts)} parts)")

    def _check_open(self) -> None:
        if self._closed:
            raise InvalidArgumentError(f"Package already closed: {self.docx_path}")

    def part_names(self) -> List[str]:
        """Return part names in archive order."""
        self._check_open()
        return list(self._parts)

    def has_part(self, part_name: str) -> bool:
        self._check_open()
        return part_name in self._parts

    def __contains__(self, part_name: str) -> bool:
        return self.has_part(part_name)

    def read_bytes(self, part_name: str) -> bytes:
        """
        Get raw content of a part.

        Raises:
            MissingPartError: If the part does not exist
        """
        self._check_open()
        try:
            return self._parts[part_name]
        except KeyError:
            raise MissingPartError(f"Part not found: {part_name}", part_name=part_name) from None

    def write_bytes(self, part_name: str, content: bytes) -> None:
        """
        Store raw content under a part name, replacing any existing entry.

        The old bytes are dropped in full before the new ones are stored;
        subsequent reads on this handle only ever see the new content.
        """
        self._check_open()
        if part_name in self._parts:
            logger.debug(f"Replacing part: {part_name}")
        self._parts[part_name] = bytes(content)
        self._modified = True

    def load_part(self, part_name: str) -> etree._Element:
        """
        Load a part as a parsed XML tree.

        Args:
            part_name: Name of the part, e.g. ``"word/document.xml"``

        Returns:
            Root element of a freshly parsed tree owned by the caller

        Raises:
            MissingPartError: If the part does not exist
            MalformedXmlError: If the bytes are not well-formed XML
        """
        content = self.read_bytes(part_name)
        try:
            return parse(content)
        except etree.XMLSyntaxError as exc:
            raise MalformedXmlError(f"Malformed XML in part {part_name}", part_name=part_name, details=str(exc)) from exc

    def save_part(self, part_name: str, root: etree._Element) -> None:
        """Serialize a tree and store it under ``part_name`` (upsert)."""
        self.write_bytes(part_name, serialize(root))

    def delete_part(self, part_name: str) -> None:
        """Remove a part. Does nothing if it is absent."""
        self._check_open()
        if self._parts.pop(part_name, None) is not None:
            self._infos.pop(part_name, None)
            self._modified = True
            logger.debug(f"Deleted part: {part_name}")

    def save(self) -> None:
        """Write all parts back to ``docx_path``."""
        self._check_open()
        if self.read_only:
            raise InvalidArgumentError(f"Package opened read-only: {self.docx_path}")

        target_dir = self.docx_path.parent
        fd, tmp_name = tempfile.mkstemp(prefix=".docx_", suffix=".tmp", dir=target_dir)
        os.close(fd)
        try:
            with zipfile.ZipFile(tmp_name, "w", zipfile.ZIP_DEFLATED) as zip_file:
                for part_name, content in self._parts.items():
                    zip_file.writestr(self._zip_info_for(part_name), content)
            shutil.copymode(self.docx_path, tmp_name)
            os.replace(tmp_name, self.docx_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        self._modified = False
        logger.debug(f"Saved DOCX package {self.docx_path} ({len(self._parts)} parts)")

    def _zip_info_for(self, part_name: str) -> zipfile.ZipInfo:
        """Build a fresh ZipInfo, keeping timestamp and compression of the original entry."""
        original = self._infos.get(part_name)
        if original is None:
            info = zipfile.ZipInfo(part_name)
            info.compress_type = zipfile.ZIP_DEFLATED
            return info
        info = zipfile.ZipInfo(part_name, date_time=original.date_time)
        info.compress_type = original.compress_type
        info.external_attr = original.external_attr
        return info

    def discard(self) -> None:
        """Close without writing pending changes."""
        if not self._closed and self._modified:
            logger.debug(f"Discarding changes to {self.docx_path}")
        self._parts.clear()
        self._infos.clear()
        self._closed = True

    def close(self) -> None:
        """Flush pending changes (unless read-only) and close the package."""
        if self._closed:
            return
        if self._modified and not self.read_only:
            self.save()
        self.discard()

    def __enter__(self) -> "Package":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.close()
        else:
            self.discard()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"{len(self._parts)} parts"
        return f"<Package {self.docx_path.name} ({state})>"


def open_for_update(docx_path: Union[str, Path]) -> Package:
    """
    Open a DOCX package for reading and writing.

    Raises:
        NotFoundError: If the file does not exist
        CorruptArchiveError: If the file is not a valid ZIP archive
    """
    return Package(docx_path)


def open_for_read(docx_path: Union[str, Path]) -> Package:
    """Open a DOCX package that is never written back."""
    return Package(docx_path, read_only=True)
