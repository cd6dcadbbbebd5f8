"""
Text sanitization for CloudSearch document batches.

CloudSearch rejects batches containing characters that are not valid in
XML 1.0. Everything outside the allowed set is dropped:

    U+0009  U+000A  U+000D  U+0020-U+D7FF  U+E000-U+FFFD

This strips raw control characters, lone surrogates and anything above
the Basic Multilingual Plane.
"""

from __future__ import annotations

import re

_INVALID_CHARS_RE = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd]"
)


def sanitize_text(text: str) -> str:
    return _INVALID_CHARS_RE.sub("", text)


def decode_text(data: bytes) -> str:
    """UTF-8 decode with replacement, then sanitize."""
    return sanitize_text(data.decode("utf-8", errors="replace"))
