"""
Indexing Pipeline Orchestrator
══════════════════════════════

One notification in, at most one CloudSearch batch out.

    START ─► CLASSIFIED ─┬─ upsert ─► FETCHED ─► EXTRACTED ─► ASSEMBLED ─► SUBMITTED ─► DONE
                         ├─ delete ─► ASSEMBLED_DELETE ─────────────────► SUBMITTED ─► DONE
                         └─ upsert, unsupported format ─► PURGED ──────────────────────► DONE
    any stage ─► FAILED

Failure policy: nothing escapes run(). Every error is logged and recorded on
the PipelineOutcome; the notification source redelivers what did not land,
and deterministic document ids make that redelivery converge.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from search_indexer.core.config import PipelineConfig
from search_indexer.core.errors import IndexerError
from search_indexer.events.notification import EventTarget, classify_event
from search_indexer.indexing.batch import (
    build_add_batch,
    build_delete_batch,
)
from search_indexer.indexing.cloudsearch import CloudSearchIndexClient, SubmitResult
from search_indexer.indexing.identity import identify
from search_indexer.processing.extractor import ContentExtractor
from search_indexer.processing.formats import Category, classify
from search_indexer.processing.sanitize import sanitize_text
from search_indexer.storage.s3 import S3ObjectStore

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    START            = "start"
    CLASSIFIED       = "classified"
    FETCHED          = "fetched"
    EXTRACTED        = "extracted"
    ASSEMBLED        = "assembled"
    ASSEMBLED_DELETE = "assembled_delete"
    SUBMITTED        = "submitted"
    PURGED           = "purged"
    DONE             = "done"
    FAILED           = "failed"


class PipelineAction(str, Enum):
    ADD    = "add"
    DELETE = "delete"
    PURGE  = "purge"     # unsupported format removed from the bucket


@dataclass
class PipelineOutcome:
    """
    Structured record of one invocation, returned by run() and by the
    Lambda handler so failures are visible without parsing logs.
    """
    state:       PipelineState = PipelineState.START
    action:      PipelineAction | None = None
    bucket:      str = ""
    key:         str = ""
    document_id: str = ""
    category:    Category | None = None
    failed_at:   PipelineState | None = None
    error:       Exception | None = None
    submit:      SubmitResult | None = None
    elapsed_ms:  float = 0.0
    history:     list[PipelineState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.DONE

    def advance(self, state: PipelineState) -> None:
        self.history.append(self.state)
        self.state = state

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok":          self.ok,
            "state":       self.state.value,
            "action":      self.action.value if self.action else None,
            "bucket":      self.bucket,
            "key":         self.key,
            "document_id": self.document_id,
            "category":    self.category.value if self.category else None,
            "failed_at":   self.failed_at.value if self.failed_at else None,
            "error":       f"{type(self.error).__name__}: {self.error}" if self.error else None,
            "elapsed_ms":  round(self.elapsed_ms, 1),
        }


class IndexingPipeline:
    """
    Stateless orchestrator. All collaborators are injected.

    Usage:
        pipeline = IndexingPipeline(config, store=S3ObjectStore(...),
                                    index=CloudSearchIndexClient(...))
        outcome = await pipeline.run(event)
    """

    def __init__(
        self,
        config:    PipelineConfig,
        store:     S3ObjectStore,
        index:     CloudSearchIndexClient,
        extractor: ContentExtractor | None = None,
    ) -> None:
        self._config    = config
        self._store     = store
        self._index     = index
        self._extractor = extractor or ContentExtractor()

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def run(self, event: Any) -> PipelineOutcome:
        outcome = PipelineOutcome()
        t0 = time.monotonic()

        try:
            target = classify_event(event, self._config.region, self._config.endpoint_suffix)
            outcome.bucket = target.bucket
            outcome.key    = target.key
            outcome.document_id = identify(target.bucket, target.key, self._config.identity_secret)
            outcome.advance(PipelineState.CLASSIFIED)

            logger.info(
                "File indexer method: %s | bucket=%s key=%s endpoint=%s",
                "delete" if target.is_delete else "add",
                target.bucket, target.key, target.endpoint,
            )

            if target.is_delete:
                await self._delete(target, outcome)
            else:
                await self._upsert(target, outcome)

            outcome.advance(PipelineState.DONE)
        except IndexerError as exc:
            self._fail(outcome, exc)
        except Exception as exc:
            logger.exception("Unexpected pipeline error")
            self._fail(outcome, exc)
        finally:
            outcome.elapsed_ms = (time.monotonic() - t0) * 1000

        logger.info(
            "Pipeline finished | state=%s action=%s bucket=%s key=%s id=%s elapsed_ms=%.0f",
            outcome.state.value,
            outcome.action.value if outcome.action else None,
            outcome.bucket, outcome.key, outcome.document_id, outcome.elapsed_ms,
        )
        return outcome

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    async def _upsert(self, target: EventTarget, outcome: PipelineOutcome) -> None:
        category = classify(target.key)
        outcome.category = category

        if not category.is_indexable:
            outcome.action = PipelineAction.PURGE
            logger.warning(
                "Unsupported format, removing from bucket | bucket=%s key=%s",
                target.bucket, target.key,
            )
            await self._store.delete(target.bucket, target.key)
            outcome.advance(PipelineState.PURGED)
            return

        outcome.action = PipelineAction.ADD

        data = await self._store.fetch(target.bucket, target.key)
        outcome.advance(PipelineState.FETCHED)

        text = await self._extractor.extract(data, category)
        outcome.advance(PipelineState.EXTRACTED)

        batch = build_add_batch(outcome.document_id, sanitize_text(target.key), text)
        outcome.advance(PipelineState.ASSEMBLED)

        outcome.submit = await self._index.submit(target.endpoint, batch)
        outcome.advance(PipelineState.SUBMITTED)

    async def _delete(self, target: EventTarget, outcome: PipelineOutcome) -> None:
        outcome.action = PipelineAction.DELETE

        batch = build_delete_batch(outcome.document_id)
        outcome.advance(PipelineState.ASSEMBLED_DELETE)

        outcome.submit = await self._index.submit(target.endpoint, batch)
        outcome.advance(PipelineState.SUBMITTED)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _fail(outcome: PipelineOutcome, exc: Exception) -> None:
        outcome.failed_at = outcome.state
        outcome.error     = exc
        outcome.advance(PipelineState.FAILED)
        if isinstance(exc, IndexerError):
            logger.error(
                "Pipeline failed | after=%s stage=%s bucket=%s key=%s error=%s",
                outcome.failed_at.value, exc.stage, outcome.bucket, outcome.key, exc,
                exc_info=exc,
            )
