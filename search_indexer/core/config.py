"""
Indexer configuration via environment variables (12-factor).
Pydantic BaseSettings validates and coerces all values at cold start.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from search_indexer.indexing.identity import DEFAULT_IDENTITY_SECRET


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ------------------------------------------------------------------
    # AWS
    # ------------------------------------------------------------------
    # The Lambda deployment sets REGION; AWS_REGION is the runtime default.
    region: str = Field("", validation_alias=AliasChoices("REGION", "AWS_REGION"))

    s3_request_payer: str = "requester"

    # ------------------------------------------------------------------
    # CloudSearch
    # ------------------------------------------------------------------
    cloudsearch_endpoint_suffix: str = "cloudsearch.amazonaws.com"
    cloudsearch_api_version:     str = "2013-01-01"

    # HMAC key for document ids. Namespacing only, not a secret: changing it
    # orphans every document already in the domain.
    identity_secret: str = DEFAULT_IDENTITY_SECRET

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------
    log_level: str = "INFO"
    debug:     bool = False


@dataclass(frozen=True)
class PipelineConfig:
    """
    Explicit per-invocation configuration handed to the orchestrator.
    Built from Settings so the pipeline never reads the environment itself.
    """
    region:          str
    identity_secret: str = DEFAULT_IDENTITY_SECRET
    endpoint_suffix: str = "cloudsearch.amazonaws.com"

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            region=settings.region,
            identity_secret=settings.identity_secret,
            endpoint_suffix=settings.cloudsearch_endpoint_suffix,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
