"""
Format classification by file extension.

The allow-list is closed: anything that is not .pdf, .docx, .doc or .txt
classifies as UNSUPPORTED and is purged from the bucket by the pipeline
rather than indexed.
"""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    PDF         = "pdf"
    DOCX        = "docx"
    DOC         = "doc"          # legacy Word (OLE2), decoded best-effort
    PLAIN_TEXT  = "txt"
    UNSUPPORTED = "unsupported"

    @property
    def is_indexable(self) -> bool:
        return self is not Category.UNSUPPORTED


ALLOWED_EXTENSIONS: frozenset[str] = frozenset({".pdf", ".docx", ".doc", ".txt"})


def get_extension(filename: str) -> str:
    """Return the lowercased extension including the dot, or "" if none."""
    parts = filename.rsplit(".", 1)
    return f".{parts[-1].lower()}" if len(parts) == 2 else ""


def classify(filename: str) -> Category:
    ext = get_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        return Category.UNSUPPORTED

    if ext == ".pdf":
        return Category.PDF
    # .docx before .doc
    if ext == ".docx":
        return Category.DOCX
    if ext == ".doc":
        return Category.DOC
    return Category.PLAIN_TEXT
