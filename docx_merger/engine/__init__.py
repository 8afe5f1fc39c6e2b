"""Post-merge document engines."""

from .content_controls import (
    ContentControlInfo,
    ContentControlUpdater,
    list_content_controls,
    read_content_controls,
    update_content_controls,
)

__all__ = [
    "ContentControlInfo",
    "ContentControlUpdater",
    "list_content_controls",
    "read_content_controls",
    "update_content_controls",
]
