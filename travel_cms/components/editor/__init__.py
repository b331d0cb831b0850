"""
Editor component - builds and edits section payloads.
"""

from ._impl import ContentEditor, default_section
from .models import DEFAULT_LIST_ITEMS, DEFAULT_SECTIONS, SectionIssue

__all__ = [
    "ContentEditor",
    "DEFAULT_LIST_ITEMS",
    "DEFAULT_SECTIONS",
    "SectionIssue",
    "default_section",
]
