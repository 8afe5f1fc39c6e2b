"""
DOCX package builders and XML readers shared by the test suite.
"""

import zipfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from lxml import etree


W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
NS = {"w": W_NS, "r": R_NS, "rels": REL_NS, "ct": CT_NS}

FOOTER_REL_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/footer"
FOOTER_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.footer+xml"
STYLES_REL_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles"


def paragraph(text: str) -> str:
    """WordprocessingML paragraph holding one run of text."""
    return f'<w:p><w:r><w:t xml:space="preserve">{text}</w:t></w:r></w:p>'


def content_control(tag: Optional[str], text: str, alias: Optional[str] = None) -> str:
    """Block-level content control holding one paragraph."""
    props = ""
    if alias is not None:
        props += f'<w:alias w:val="{alias}"/>'
    if tag is not None:
        props += f'<w:tag w:val="{tag}"/>'
    return (
        f"<w:sdt><w:sdtPr>{props}<w:id w:val=\"1\"/></w:sdtPr>"
        f"<w:sdtContent>{paragraph(text)}</w:sdtContent></w:sdt>"
    )


class DocxFactory:
    """Builds minimal but complete DOCX packages for tests."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def build(
        self,
        name: str,
        body: Iterable[str] = (),
        footers: int = 0,
        omit: Iterable[str] = (),
        extra_parts: Optional[Dict[str, str]] = None,
        section: bool = True,
    ) -> Path:
        """
        Write a DOCX package.

        Args:
            name: File name inside the base directory
            body: Body block XML fragments (paragraphs, tables, content controls)
            footers: Number of pre-existing footers (footer1.xml ...) to include
            omit: Part names to leave out of the archive
            extra_parts: Additional parts {name: content}
            section: Whether to close the body with a top-level w:sectPr
        """
        footer_refs = "".join(
            f'<w:footerReference w:type="default" r:id="rIdOld{i}"/>'
            for i in range(1, footers + 1)
        )
        sect_pr = (
            f'<w:sectPr>{footer_refs}<w:pgSz w:w="12240" w:h="15840"/></w:sectPr>'
            if section else ""
        )
        document = (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            f'<w:document xmlns:w="{W_NS}" xmlns:r="{R_NS}">'
            f'<w:body>{"".join(body)}{sect_pr}</w:body></w:document>'
        )

        rels = [f'<Relationship Id="rId1" Type="{STYLES_REL_TYPE}" Target="styles.xml"/>']
        overrides = [
            '<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>',
            '<Override PartName="/word/styles.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.styles+xml"/>',
        ]
        parts: Dict[str, str] = {}
        for i in range(1, footers + 1):
            rels.append(f'<Relationship Id="rIdOld{i}" Type="{FOOTER_REL_TYPE}" Target="footer{i}.xml"/>')
            overrides.append(f'<Override PartName="/word/footer{i}.xml" ContentType="{FOOTER_CONTENT_TYPE}"/>')
            parts[f"word/footer{i}.xml"] = (
                f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f'<w:ftr xmlns:w="{W_NS}">{paragraph(f"Old footer {i}")}</w:ftr>'
            )

        package_parts = {
            "[Content_Types].xml": (
                '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f'<Types xmlns="{CT_NS}">'
                '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
                '<Default Extension="xml" ContentType="application/xml"/>'
                f'{"".join(overrides)}</Types>'
            ),
            "_rels/.rels": (
                '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f'<Relationships xmlns="{REL_NS}">'
                '<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>'
                '</Relationships>'
            ),
            "word/document.xml": document,
            "word/_rels/document.xml.rels": (
                '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f'<Relationships xmlns="{REL_NS}">{"".join(rels)}</Relationships>'
            ),
            "word/styles.xml": (
                '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
                f'<w:styles xmlns:w="{W_NS}"><w:style w:type="paragraph" w:styleId="Normal"/></w:styles>'
            ),
        }
        package_parts.update(parts)
        package_parts.update(extra_parts or {})

        path = self.base_dir / name
        omitted = set(omit)
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
            for part_name, content in package_parts.items():
                if part_name not in omitted:
                    zf.writestr(part_name, content)
        return path

    @staticmethod
    def names(path: Path) -> List[str]:
        with zipfile.ZipFile(path) as zf:
            return zf.namelist()

    @staticmethod
    def read_bytes(path: Path, part_name: str) -> bytes:
        with zipfile.ZipFile(path) as zf:
            return zf.read(part_name)

    @classmethod
    def read_xml(cls, path: Path, part_name: str) -> etree._Element:
        return etree.fromstring(cls.read_bytes(path, part_name))

    @classmethod
    def body(cls, path: Path) -> etree._Element:
        return cls.read_xml(path, "word/document.xml").find(f"{{{W_NS}}}body")

    @staticmethod
    def text(element: etree._Element) -> str:
        return "".join(element.xpath(".//w:t/text()", namespaces=NS))
