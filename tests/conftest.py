"""
Root conftest.py — Shared fixtures for all tests

Fixture hierarchy:
  session-scoped  : sample_pdf_bytes, sample_docx_bytes (built in-memory once)
  function-scoped : pipeline_config, make_s3_event, mock_store, mock_index

Environment strategy:
  - No test talks to AWS. Collaborators are MagicMock(spec=...) with
    AsyncMock methods; aioboto3 sessions are replaced by mock sessions.
  - Real PDF / DOCX fixtures are produced with PyMuPDF and python-docx so
    extraction tests exercise the actual parsers.

How to run:
  pytest                          # all tests
  pytest -m extraction            # classifier / sanitizer / extractor only
  pytest tests/unit/test_pipeline.py
"""

from __future__ import annotations

import io
import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError

# ─────────────────────────────────────────────────────────────────────────────
# Patch settings BEFORE any package imports so modules read test config
# ─────────────────────────────────────────────────────────────────────────────

os.environ.setdefault("REGION",                "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID",     "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")


TEST_REGION   = "us-east-1"
TEST_BUCKET   = "corp-documents"
TEST_CONFIG_ID = "doc-corp-search-abc123xyz"
TEST_ENDPOINT = f"{TEST_CONFIG_ID}.{TEST_REGION}.cloudsearch.amazonaws.com"

PDF_TEXT  = "Quarterly revenue grew by twelve percent"
DOCX_TEXT = "Board meeting minutes"


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def client_error(code: str, operation: str = "operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "test"}}, operation)


def build_client_mock() -> AsyncMock:
    """Mock aioboto3 client usable as `async with session.client(...) as c`."""
    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__  = AsyncMock(return_value=None)
    return client


def build_session_mock(client: AsyncMock) -> MagicMock:
    session = MagicMock()
    session.client.return_value = client
    return session


# ─────────────────────────────────────────────────────────────────────────────
# Sample file bytes
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def sample_pdf_bytes() -> bytes:
    """One-page PDF with a real text layer."""
    import fitz

    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), PDF_TEXT)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session")
def sample_docx_bytes() -> bytes:
    import docx

    document = docx.Document()
    document.add_paragraph(DOCX_TEXT)
    document.add_paragraph("Second paragraph")
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture
def sample_txt_bytes() -> bytes:
    return b"Plain notes\nline two\n"


@pytest.fixture
def corrupt_bytes() -> bytes:
    """Neither a PDF nor a ZIP container."""
    return b"%PDF-1.4\n\x00\x01garbage that is not a pdf" + b"\xff" * 64


# ─────────────────────────────────────────────────────────────────────────────
# Configuration + events
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def pipeline_config():
    from search_indexer.core.config import PipelineConfig
    return PipelineConfig(region=TEST_REGION)


@pytest.fixture
def make_s3_event():
    """
    Factory fixture: returns a function that builds S3 notifications.

    Usage:
        event = make_s3_event("docs/report.pdf")
        event = make_s3_event("docs/report.pdf", event_name="ObjectRemoved:Delete")
    """
    def _build(
        key:        str,
        event_name: str = "ObjectCreated:Put",
        bucket:     str = TEST_BUCKET,
        configuration_id: str = TEST_CONFIG_ID,
    ) -> dict:
        return {
            "Records": [
                {
                    "eventVersion": "2.1",
                    "eventSource":  "aws:s3",
                    "awsRegion":    TEST_REGION,
                    "eventName":    event_name,
                    "s3": {
                        "s3SchemaVersion": "1.0",
                        "configurationId": configuration_id,
                        "bucket": {"name": bucket, "arn": f"arn:aws:s3:::{bucket}"},
                        "object": {"key": key, "size": 1024},
                    },
                }
            ]
        }

    return _build


# ─────────────────────────────────────────────────────────────────────────────
# Mock collaborators
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def mock_store(sample_pdf_bytes):
    """Fully mocked S3ObjectStore. fetch() returns the sample PDF by default."""
    from search_indexer.storage.s3 import S3ObjectStore

    store = MagicMock(spec=S3ObjectStore)
    store.fetch  = AsyncMock(return_value=sample_pdf_bytes)
    store.delete = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_index():
    """Mocked CloudSearchIndexClient that records submitted batches."""
    from search_indexer.indexing.cloudsearch import CloudSearchIndexClient, SubmitResult

    index = MagicMock(spec=CloudSearchIndexClient)
    index.submit = AsyncMock(return_value=SubmitResult(status="success", adds=1, deletes=0))
    return index


@pytest.fixture
def make_pipeline(pipeline_config, mock_store, mock_index):
    """Factory: build an IndexingPipeline with injected mocks."""
    def _build(config=None, extractor=None):
        from search_indexer.pipeline.orchestrator import IndexingPipeline
        return IndexingPipeline(
            config=config or pipeline_config,
            store=mock_store,
            index=mock_index,
            extractor=extractor,
        )
    return _build
