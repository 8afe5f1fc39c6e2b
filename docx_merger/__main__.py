"""
Entry point for running docx_merger as a module.

Usage:
    python -m docx_merger merge a.docx b.docx --output merged.docx
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
