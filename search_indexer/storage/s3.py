"""
S3 Object Store

The two S3 calls the indexer makes:

  fetch   GetObject on the notified key (requester-pays aware)
  delete  DeleteObject, only for objects whose format is not indexable

Keys arrive already decoded from the notification. ClientError codes are
translated into the indexer's StorageError hierarchy so callers never
inspect botocore responses.
"""

from __future__ import annotations

import logging

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from search_indexer.core.errors import (
    ObjectAccessDeniedError,
    ObjectNotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES     = frozenset({"NoSuchKey", "NoSuchBucket", "404", "NotFound"})
_ACCESS_DENIED_CODES = frozenset({"AccessDenied", "403", "Forbidden"})


def _translate(exc: ClientError, action: str, bucket: str, key: str) -> StorageError:
    code = exc.response.get("Error", {}).get("Code", "")
    message = f"S3 {action} failed for s3://{bucket}/{key}: {code or exc}"
    if code in _NOT_FOUND_CODES:
        return ObjectNotFoundError(message, bucket=bucket, key=key, code=code)
    if code in _ACCESS_DENIED_CODES:
        return ObjectAccessDeniedError(message, bucket=bucket, key=key, code=code)
    return StorageError(message, bucket=bucket, key=key, code=code)


class S3ObjectStore:
    """
    Async S3 access. One instance per invocation; holds no per-object state.
    """

    def __init__(
        self,
        region:        str,
        request_payer: str | None = "requester",
        session:       aioboto3.Session | None = None,
    ) -> None:
        self._region        = region
        self._request_payer = request_payer
        self._session       = session or aioboto3.Session()

    def _client(self):
        """Return a scoped async S3 client context manager."""
        return self._session.client("s3", region_name=self._region or None)

    async def fetch(self, bucket: str, key: str) -> bytes:
        params = {"Bucket": bucket, "Key": key}
        if self._request_payer:
            params["RequestPayer"] = self._request_payer

        async with self._client() as s3:
            try:
                resp = await s3.get_object(**params)
                data = await resp["Body"].read()
            except ClientError as exc:
                raise _translate(exc, "GetObject", bucket, key) from exc
            except BotoCoreError as exc:
                raise StorageError(
                    f"S3 GetObject failed for s3://{bucket}/{key}: {exc}",
                    bucket=bucket, key=key,
                ) from exc

        logger.info("S3 fetch ok | bucket=%s key=%s size=%d", bucket, key, len(data))
        return data

    async def delete(self, bucket: str, key: str) -> None:
        params = {"Bucket": bucket, "Key": key}
        if self._request_payer:
            params["RequestPayer"] = self._request_payer

        async with self._client() as s3:
            try:
                await s3.delete_object(**params)
            except ClientError as exc:
                raise _translate(exc, "DeleteObject", bucket, key) from exc
            except BotoCoreError as exc:
                raise StorageError(
                    f"S3 DeleteObject failed for s3://{bucket}/{key}: {exc}",
                    bucket=bucket, key=key,
                ) from exc

        logger.warning("S3 delete | bucket=%s key=%s reason=unsupported_format", bucket, key)
