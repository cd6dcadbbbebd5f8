"""
Unit Tests — Content extraction
═══════════════════════════════

Coverage:
  ✅ PDF text layer is extracted with PyMuPDF
  ✅ DOCX paragraphs are extracted with python-docx
  ✅ Legacy DOC and TXT are decoded as UTF-8 and sanitized
  ✅ Corrupt PDF / DOCX degrade to "" and never raise
  ✅ Failure kind is reported on the ExtractionOutcome
  ✅ UNSUPPORTED bytes are decoded as UTF-8 and sanitized
"""

from __future__ import annotations

import pytest

from search_indexer.core.errors import ExtractionError
from search_indexer.processing.extractor import (
    BaseTextExtractor,
    ContentExtractor,
    DocxExtractor,
    PyMuPDFExtractor,
    RawTextExtractor,
)
from search_indexer.processing.formats import Category
from tests.conftest import DOCX_TEXT, PDF_TEXT


@pytest.fixture
def extractor() -> ContentExtractor:
    return ContentExtractor()


@pytest.mark.unit
@pytest.mark.extraction
class TestContentExtractorHappyPath:

    async def test_pdf_text_layer(self, extractor, sample_pdf_bytes):
        text = await extractor.extract(sample_pdf_bytes, Category.PDF)
        assert PDF_TEXT in text

    async def test_docx_paragraphs(self, extractor, sample_docx_bytes):
        text = await extractor.extract(sample_docx_bytes, Category.DOCX)
        assert DOCX_TEXT in text
        assert "Second paragraph" in text

    async def test_plain_text(self, extractor, sample_txt_bytes):
        text = await extractor.extract(sample_txt_bytes, Category.PLAIN_TEXT)
        assert text == "Plain notes\nline two\n"

    async def test_legacy_doc_is_decoded_and_sanitized(self, extractor):
        # OLE2 header followed by readable text
        data = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1\x00\x00Contract terms\x07\x01"
        text = await extractor.extract(data, Category.DOC)
        assert "Contract terms" in text
        assert "\x00" not in text
        assert "\x07" not in text

    async def test_outcome_names_strategy(self, extractor, sample_pdf_bytes):
        outcome = await extractor.extract_outcome(sample_pdf_bytes, Category.PDF)
        assert outcome.ok
        assert outcome.strategy_name == "pymupdf"
        assert outcome.elapsed_ms >= 0


@pytest.mark.unit
@pytest.mark.extraction
class TestContentExtractorFailures:

    async def test_corrupt_pdf_returns_empty_string(self, extractor, corrupt_bytes):
        text = await extractor.extract(corrupt_bytes, Category.PDF)
        assert text == ""

    async def test_empty_pdf_reports_extraction_error(self, extractor):
        outcome = await extractor.extract_outcome(b"", Category.PDF)
        assert outcome.text == ""
        assert isinstance(outcome.error, ExtractionError)
        assert outcome.error.strategy == "pymupdf"

    async def test_corrupt_docx_returns_empty_string(self, extractor, corrupt_bytes):
        outcome = await extractor.extract_outcome(corrupt_bytes, Category.DOCX)
        assert outcome.text == ""
        assert not outcome.ok
        assert outcome.error.strategy == "python-docx"

    async def test_pdf_bytes_declared_as_docx_do_not_raise(self, extractor, sample_pdf_bytes):
        assert await extractor.extract(sample_pdf_bytes, Category.DOCX) == ""

    async def test_unrecognized_bytes_are_decoded_and_sanitized(self, extractor):
        outcome = await extractor.extract_outcome(b"hello\x00 \x1bworld\xff", Category.UNSUPPORTED)
        assert outcome.ok
        assert outcome.strategy_name == "unrecognized-utf8"
        assert outcome.text == "hello world" + chr(0xFFFD)

    async def test_unrecognized_category_never_raises(self, extractor):
        assert await extractor.extract(b"hello", Category.UNSUPPORTED) == "hello"

    async def test_strategy_exception_is_contained(self):
        class Exploding(BaseTextExtractor):
            @property
            def strategy_name(self) -> str:
                return "exploding"

            def _extract_sync(self, data: bytes) -> str:
                raise RuntimeError("boom")

        outcome = await Exploding().extract(b"anything")
        assert outcome.text == ""
        assert str(outcome.error) == "boom"


@pytest.mark.unit
@pytest.mark.extraction
class TestContentExtractorRegistry:

    def test_default_registry_covers_every_category(self):
        ContentExtractor()  # constructor validates coverage

    def test_incomplete_registry_is_rejected(self):
        with pytest.raises(ValueError, match="doc"):
            ContentExtractor({
                Category.PDF:         PyMuPDFExtractor(),
                Category.DOCX:        DocxExtractor(),
                Category.PLAIN_TEXT:  RawTextExtractor(),
                Category.UNSUPPORTED: RawTextExtractor(),
            })

    def test_registry_without_unsupported_is_rejected(self):
        with pytest.raises(ValueError, match="unsupported"):
            ContentExtractor({
                Category.PDF:        PyMuPDFExtractor(),
                Category.DOCX:       DocxExtractor(),
                Category.DOC:        RawTextExtractor(),
                Category.PLAIN_TEXT: RawTextExtractor(),
            })
