"""
S3 Event Notification parsing.

Only the fields the indexer needs are modelled:

    {"Records": [{"eventName": "ObjectCreated:Put",
                  "s3": {"configurationId": "<domain-endpoint-prefix>",
                         "bucket": {"name": "..."},
                         "object": {"key": "docs/My+Report.pdf"}}}]}

The notification's configurationId carries the CloudSearch document
endpoint prefix, e.g. "doc-mydomain-abc123", which combined with the
region gives the domain's document endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from search_indexer.core.errors import MalformedEventError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_SUFFIX = "cloudsearch.amazonaws.com"


class _Bucket(BaseModel):
    name: str = Field(..., min_length=1)


class _Object(BaseModel):
    key: str = Field(..., min_length=1)


class _S3Entity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    configuration_id: str = Field(..., alias="configurationId", min_length=1)
    bucket: _Bucket
    object: _Object


class S3EventRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_name: str = Field(..., alias="eventName")
    s3:         _S3Entity


class S3Event(BaseModel):
    records: list[S3EventRecord] = Field(..., alias="Records", min_length=1)


@dataclass(frozen=True)
class EventTarget:
    """Everything the pipeline needs from one notification."""
    is_delete: bool
    bucket:    str
    key:       str
    endpoint:  str


def decode_key(raw_key: str) -> str:
    """
    Percent-decode, then map literal '+' to space.

    The order is deliberate and lossy: a real '+' in the object name arrives
    as %2B and also ends up as a space, so such objects are fetched under
    the wrong key and fail with ObjectNotFoundError. unquote_plus would keep
    the '+', but it changes the key and the document id of every object
    whose name contains one, orphaning documents already in the index. Do
    not swap it in without treating that as a migration.
    """
    return unquote(raw_key).replace("+", " ")


def is_delete_event(event_name: str) -> bool:
    # Substring match covers ObjectRemoved:Delete and
    # ObjectRemoved:DeleteMarkerCreated alike.
    return "delete" in event_name.lower()


def build_endpoint(configuration_id: str, region: str, suffix: str = DEFAULT_ENDPOINT_SUFFIX) -> str:
    return f"{configuration_id}.{region}.{suffix}"


def parse_event(event: Any) -> S3EventRecord:
    """Validate the notification and return its first record."""
    try:
        parsed = S3Event.model_validate(event)
    except ValidationError as exc:
        raise MalformedEventError(f"Invalid S3 notification: {exc.error_count()} error(s): {exc}") from exc

    if len(parsed.records) > 1:
        logger.warning(
            "Notification carries %d records; only the first is processed",
            len(parsed.records),
        )
    return parsed.records[0]


def classify_event(
    event:  Any,
    region: str,
    endpoint_suffix: str = DEFAULT_ENDPOINT_SUFFIX,
) -> EventTarget:
    record = parse_event(event)
    return EventTarget(
        is_delete=is_delete_event(record.event_name),
        bucket=record.s3.bucket.name,
        key=decode_key(record.s3.object.key),
        endpoint=build_endpoint(record.s3.configuration_id, region, endpoint_suffix),
    )
