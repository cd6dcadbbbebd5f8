"""
Indexer error taxonomy.

  IndexerError
    ├── MalformedEventError     notification is missing a required field
    ├── ExtractionError         a format parser failed (recovered as empty text)
    ├── StorageError            S3 fetch / delete failed
    │     ├── ObjectNotFoundError
    │     └── ObjectAccessDeniedError
    └── IndexSubmitError        CloudSearch rejected or never received a batch

Collaborators translate botocore ClientError into these at their boundary;
the orchestrator catches IndexerError subclasses and never re-raises.
"""

from __future__ import annotations


class IndexerError(Exception):
    """Base class for every failure the pipeline knows how to report."""

    stage: str = "unknown"


class MalformedEventError(IndexerError):
    stage = "classify"


class ExtractionError(IndexerError):
    stage = "extract"

    def __init__(self, message: str, *, strategy: str = "") -> None:
        super().__init__(message)
        self.strategy = strategy


class StorageError(IndexerError):
    stage = "storage"

    def __init__(self, message: str, *, bucket: str = "", key: str = "", code: str = "") -> None:
        super().__init__(message)
        self.bucket = bucket
        self.key    = key
        self.code   = code


class ObjectNotFoundError(StorageError):
    pass


class ObjectAccessDeniedError(StorageError):
    pass


class IndexSubmitError(IndexerError):
    stage = "submit"

    def __init__(self, message: str, *, endpoint: str = "", code: str = "") -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.code     = code
