"""
Document Processing Package
════════════════════════════

  Format Classification → Text Extraction → Sanitization

Modules
───────
  formats.py    Closed Category enum and extension-based classifier
  extractor.py  Per-format extraction strategies + ContentExtractor dispatcher
  sanitize.py   Removal of code points CloudSearch cannot accept
"""

from search_indexer.processing.extractor import ContentExtractor, ExtractionOutcome
from search_indexer.processing.formats import Category, classify
from search_indexer.processing.sanitize import sanitize_text

__all__ = [
    "Category",
    "classify",
    "ContentExtractor",
    "ExtractionOutcome",
    "sanitize_text",
]
