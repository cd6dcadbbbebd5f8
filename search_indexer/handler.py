"""
Lambda entry point for S3 event notifications.

Wire the function to the bucket's ObjectCreated:* and ObjectRemoved:*
events and set the notification configuration id to the CloudSearch
domain's document endpoint prefix. Environment:

  REGION            region of the CloudSearch domain (falls back to AWS_REGION)
  IDENTITY_SECRET   HMAC key for document ids (optional)
  LOG_LEVEL         default INFO

The handler never raises: failed invocations are logged and reported in
the returned dict, and S3 redelivers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from search_indexer.core.config import PipelineConfig, Settings, get_settings
from search_indexer.indexing.cloudsearch import CloudSearchIndexClient
from search_indexer.pipeline.orchestrator import IndexingPipeline
from search_indexer.storage.s3 import S3ObjectStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # The Lambda runtime installs its own root handler; basicConfig is then a no-op.
    logging.getLogger().setLevel(level)
    logging.getLogger("botocore").setLevel(logging.WARNING)


def build_pipeline(settings: Settings) -> IndexingPipeline:
    """Fresh collaborators per invocation; nothing is carried between events."""
    return IndexingPipeline(
        config=PipelineConfig.from_settings(settings),
        store=S3ObjectStore(
            region=settings.region,
            request_payer=settings.s3_request_payer or None,
        ),
        index=CloudSearchIndexClient(
            region=settings.region,
            api_version=settings.cloudsearch_api_version,
        ),
    )


def lambda_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    try:
        settings = get_settings()
        configure_logging(settings)
        outcome = asyncio.run(build_pipeline(settings).run(event))
        return outcome.to_dict()
    except Exception as exc:
        logger.error("Handler started with errors: %s", exc, exc_info=True)
        return {"ok": False, "state": "failed", "error": f"{type(exc).__name__}: {exc}"}
