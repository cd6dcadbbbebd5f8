"""
Text Extraction Strategies
══════════════════════════

One strategy per Category:

  PDF          PyMuPDF (fitz) native text layer
  DOCX         python-docx paragraph text from the OOXML container
  DOC          UTF-8 decode of the raw OLE2 bytes (best effort, no parser)
  PLAIN_TEXT   UTF-8 decode
  UNSUPPORTED  UTF-8 decode of unrecognized bytes

Every strategy:
  - Accepts raw bytes (never a file path)
  - Returns an ExtractionOutcome, never raises
  - Sanitizes its text before returning

A corrupt or image-only PDF degrades to an empty, still-indexable
document: the object's metadata stays searchable and the object is not
skipped on every redelivery.
"""

from __future__ import annotations

import asyncio
import io
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

from search_indexer.core.errors import ExtractionError
from search_indexer.processing.formats import Category
from search_indexer.processing.sanitize import decode_text, sanitize_text

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class ExtractionOutcome:
    """
    text          : sanitized text ("" when the parser failed)
    strategy_name : which strategy produced this outcome
    elapsed_ms    : wall-clock time spent in the strategy
    error         : the parser failure, if any
    """
    text:          str
    strategy_name: str
    elapsed_ms:    float = 0.0
    error:         ExtractionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Abstract strategy
# ---------------------------------------------------------------------------

class BaseTextExtractor(ABC):

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Unique name for logging."""

    @abstractmethod
    def _extract_sync(self, data: bytes) -> str:
        """Blocking extraction, run in a thread executor. May raise."""

    async def extract(self, data: bytes) -> ExtractionOutcome:
        loop = asyncio.get_running_loop()
        t0 = time.monotonic()

        try:
            text  = await loop.run_in_executor(None, self._extract_sync, data)
            error = None
        except Exception as exc:
            logger.warning("%s extraction failed: %s", self.strategy_name, exc)
            text  = ""
            error = ExtractionError(str(exc), strategy=self.strategy_name)

        outcome = ExtractionOutcome(
            text=sanitize_text(text),
            strategy_name=self.strategy_name,
            elapsed_ms=(time.monotonic() - t0) * 1000,
            error=error,
        )
        logger.info(
            "Extraction | strategy=%s chars=%d ok=%s elapsed_ms=%.0f",
            outcome.strategy_name, len(outcome.text), outcome.ok, outcome.elapsed_ms,
        )
        return outcome


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class PyMuPDFExtractor(BaseTextExtractor):
    """
    Reads the native PDF text layer. Image-only pages yield "" and
    encrypted documents raise, which the base class turns into an empty
    outcome.
    """

    @property
    def strategy_name(self) -> str:
        return "pymupdf"

    def _extract_sync(self, data: bytes) -> str:
        import fitz  # PyMuPDF; imported here to avoid module-level import cost

        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.needs_pass:
                raise ValueError("PDF is password protected")
            pages = [page.get_text("text") or "" for page in doc]
        return "\n\n".join(p.strip() for p in pages if p.strip())


class DocxExtractor(BaseTextExtractor):

    @property
    def strategy_name(self) -> str:
        return "python-docx"

    def _extract_sync(self, data: bytes) -> str:
        import docx

        document = docx.Document(io.BytesIO(data))
        return "\n".join(para.text for para in document.paragraphs)


class RawTextExtractor(BaseTextExtractor):
    """UTF-8 decode. Used for plain text, unrecognized bytes and, heuristically, legacy .doc."""

    def __init__(self, name: str = "utf8") -> None:
        self._name = name

    @property
    def strategy_name(self) -> str:
        return self._name

    def _extract_sync(self, data: bytes) -> str:
        return decode_text(data)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class ContentExtractor:
    """
    Stateless dispatcher from Category to strategy.

    Usage:
        extractor = ContentExtractor()
        text = await extractor.extract(data, Category.PDF)
    """

    def __init__(self, strategies: dict[Category, BaseTextExtractor] | None = None) -> None:
        self._strategies = strategies or {
            Category.PDF:         PyMuPDFExtractor(),
            Category.DOCX:        DocxExtractor(),
            Category.DOC:         RawTextExtractor("doc-utf8"),
            Category.PLAIN_TEXT:  RawTextExtractor("utf8"),
            Category.UNSUPPORTED: RawTextExtractor("unrecognized-utf8"),
        }
        missing = set(Category) - set(self._strategies)
        if missing:
            raise ValueError(f"No extraction strategy for: {sorted(c.value for c in missing)}")

    async def extract_outcome(self, data: bytes, category: Category) -> ExtractionOutcome:
        return await self._strategies[category].extract(data)

    async def extract(self, data: bytes, category: Category) -> str:
        return (await self.extract_outcome(data, category)).text
