#!/usr/bin/env python3
"""
Example of the high-level API.

Merges two documents, giving each one a footer with its file name and
page number, then fills the tagged content controls of the result.
"""

import sys
from pathlib import Path

from docx_merger import DocxMergerError, merge_and_update, read_content_controls


def main(sources, output):
    """Merge the sources and fill the client and assignment fields."""

    print("📄 Merging documents...")
    for source in sources:
        print(f"   {source}")

    try:
        merged = merge_and_update(
            sources,
            output,
            {"ClientName": "ImpleVista", "AssignmentName": "MergeDocuments"},
        )
    except DocxMergerError as e:
        print(f"   ⚠️  Merge failed: {e}")
        return 1

    print(f"   ✅ Merged document saved: {merged}")

    print("📋 Content controls:")
    for tag, text in read_content_controls(merged).items():
        print(f"   {tag}: {text}")

    return 0


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: merge_example.py source1.docx [source2.docx ...] output.docx")
        sys.exit(2)

    Path(sys.argv[-1]).parent.mkdir(parents=True, exist_ok=True)

    sys.exit(main(sys.argv[1:-1], sys.argv[-1]))
