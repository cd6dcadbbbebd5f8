"""
CloudSearch Document Service Client

Submits serialized document batches to a CloudSearch domain's document
endpoint (UploadDocuments). The endpoint is per-domain and derived from
the notification, so a client is opened per submission rather than held.

CloudSearch applies batches with last-write-wins semantics per document
id; resubmitting an identical batch leaves the domain unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from search_indexer.core.errors import IndexSubmitError
from search_indexer.indexing.batch import AddEntry, DeleteEntry, serialize_batch

logger = logging.getLogger(__name__)

BATCH_CONTENT_TYPE = "application/json"
DEFAULT_API_VERSION = "2013-01-01"


@dataclass(frozen=True)
class SubmitResult:
    """Parsed UploadDocuments response."""
    status:   str
    adds:     int
    deletes:  int
    warnings: list[str] = field(default_factory=list)


class CloudSearchIndexClient:
    """
    Usage:
        client = CloudSearchIndexClient(region="us-east-1")
        result = await client.submit(endpoint, build_delete_batch(doc_id))
    """

    def __init__(
        self,
        region:      str,
        api_version: str = DEFAULT_API_VERSION,
        session:     aioboto3.Session | None = None,
    ) -> None:
        self._region      = region
        self._api_version = api_version
        self._session     = session or aioboto3.Session()

    def _client(self, endpoint: str):
        """Return a scoped async cloudsearchdomain client context manager."""
        url = endpoint if endpoint.startswith("http") else f"https://{endpoint}"
        return self._session.client(
            "cloudsearchdomain",
            endpoint_url=url,
            region_name=self._region or None,
            api_version=self._api_version,
        )

    async def submit(
        self,
        endpoint: str,
        entries:  Sequence[AddEntry | DeleteEntry],
    ) -> SubmitResult:
        """
        Upload one batch. Raises IndexSubmitError on any AWS or transport
        failure; no retries are attempted here.
        """
        documents = serialize_batch(entries).encode("utf-8")
        logger.info(
            "CloudSearch submit | endpoint=%s entries=%d bytes=%d",
            endpoint, len(entries), len(documents),
        )

        try:
            async with self._client(endpoint) as csd:
                resp = await csd.upload_documents(
                    documents=documents,
                    contentType=BATCH_CONTENT_TYPE,
                )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            raise IndexSubmitError(
                f"UploadDocuments rejected by {endpoint}: {exc}",
                endpoint=endpoint,
                code=code,
            ) from exc
        except BotoCoreError as exc:
            raise IndexSubmitError(
                f"UploadDocuments to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        result = SubmitResult(
            status=resp.get("status", ""),
            adds=resp.get("adds", 0),
            deletes=resp.get("deletes", 0),
            warnings=[w.get("message", "") for w in resp.get("warnings", [])],
        )
        for warning in result.warnings:
            logger.warning("CloudSearch warning | endpoint=%s message=%s", endpoint, warning)
        logger.info(
            "CloudSearch submit ok | endpoint=%s status=%s adds=%d deletes=%d",
            endpoint, result.status, result.adds, result.deletes,
        )
        return result
