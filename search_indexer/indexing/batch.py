"""
CloudSearch Document Batch Schemas

A batch is a JSON array of entries:

    [{"type": "add", "id": "...", "fields": {"content": ..., "content_type": ...,
                                             "resourcename": ..., "created": ...}}]
    [{"type": "delete", "id": "..."}]

One notification always yields a single-entry batch; the models accept more.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# Label stored on every indexed document; extraction always yields text.
CONTENT_TYPE_LABEL = "text/plain"


class AddFields(BaseModel):
    model_config = ConfigDict(frozen=True)

    content:      str
    content_type: str      = CONTENT_TYPE_LABEL
    resourcename: str
    created:      datetime

    @field_serializer("created", when_used="json")
    def serialize_created(self, value: datetime) -> str:
        """yyyy-mm-ddTHH:mm:ss.SSSZ in UTC; naive values are taken as UTC."""
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class AddEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    type:   Literal["add"] = "add"
    id:     str = Field(..., min_length=1, max_length=127)
    fields: AddFields


class DeleteEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["delete"] = "delete"
    id:   str = Field(..., min_length=1, max_length=127)


def build_add_batch(
    identifier: str,
    filename:   str,
    text:       str,
    created:    datetime | None = None,
) -> list[AddEntry]:
    """The creation timestamp is captured here unless supplied."""
    return [
        AddEntry(
            id=identifier,
            fields=AddFields(
                content=text,
                resourcename=filename,
                created=created or datetime.now(timezone.utc),
            ),
        )
    ]


def build_delete_batch(identifier: str) -> list[DeleteEntry]:
    return [DeleteEntry(id=identifier)]


def serialize_batch(entries: Sequence[AddEntry | DeleteEntry]) -> str:
    """Serialize to the JSON document batch accepted by UploadDocuments."""
    return json.dumps([entry.model_dump(mode="json") for entry in entries], ensure_ascii=False)

