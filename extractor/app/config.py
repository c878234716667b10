"""
Runtime configuration for the Extractor microservice.

This module centralizes environment-driven configuration: where document
references are resolved, resource limits for documents materialized in
memory, and the tuning knobs of the extraction pipeline.

Configuration is read-only at runtime. It is parsed once at startup and
invalid values fail fast with a pydantic ValidationError.
"""

from __future__ import annotations

import os
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


class ExtractorConfig(BaseModel):
    """
    Runtime configuration for the Extractor microservice.

    Configuration is environment-driven and immutable once loaded.
    """

    # ------------------------------------------------------------------
    # Document access
    # ------------------------------------------------------------------

    DOCUMENT_ROOT: Path | None = Field(
        None,
        description=(
            "Directory that document references are resolved against. "
            "When set, references may not point outside of it. "
            "When unset, references are used as given."
        ),
    )

    # ------------------------------------------------------------------
    # Safety and resource limits
    # ------------------------------------------------------------------

    MAX_PDF_SIZE_MB: int = Field(
        25,
        gt=0,
        description="Maximum size of a document materialized in memory",
    )

    HASH_CHUNK_SIZE: int = Field(
        8192,
        ge=1024,
        le=65536,
        description="Read window in bytes for hashing and stream inflation",
    )

    MAX_NAME_TREE_DEPTH: int = Field(
        32,
        ge=1,
        description="Maximum depth followed in the embedded-files name tree",
    )

    # ------------------------------------------------------------------
    # Page text extraction
    # ------------------------------------------------------------------

    SORT_BY_POSITION: bool = Field(
        True,
        description=(
            "Order page text by position on the page rather than "
            "content-stream order"
        ),
    )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level applied at startup",
    )

    # ------------------------------------------------------------------
    # Validators (Pydantic v2)
    # ------------------------------------------------------------------

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(
                f"Unsupported LOG_LEVEL '{v}'. "
                f"Allowed values: {sorted(allowed)}"
            )
        return level

    @field_validator("DOCUMENT_ROOT")
    @classmethod
    def document_root_must_be_directory(cls, v: Path | None) -> Path | None:
        if v is None:
            return v
        if not v.exists():
            raise ValueError(f"Configured DOCUMENT_ROOT does not exist: {v}")
        if not v.is_dir():
            raise ValueError(
                f"Configured DOCUMENT_ROOT is not a directory: {v}"
            )
        return v

    @property
    def max_document_bytes(self) -> int:
        return self.MAX_PDF_SIZE_MB * 1024 * 1024

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """
        Load configuration from environment variables.

        All values are parsed once at startup and must remain immutable.
        """

        def env_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.lower() in {"1", "true", "yes", "on"}

        document_root_env = os.getenv("EXTRACTOR_DOCUMENT_ROOT")

        return cls(
            DOCUMENT_ROOT=(
                Path(document_root_env)
                if document_root_env
                else None
            ),
            MAX_PDF_SIZE_MB=int(
                os.getenv("EXTRACTOR_MAX_PDF_SIZE_MB", "25")
            ),
            HASH_CHUNK_SIZE=int(
                os.getenv("EXTRACTOR_HASH_CHUNK_SIZE", "8192")
            ),
            MAX_NAME_TREE_DEPTH=int(
                os.getenv("EXTRACTOR_MAX_NAME_TREE_DEPTH", "32")
            ),
            SORT_BY_POSITION=env_bool(
                "EXTRACTOR_SORT_BY_POSITION", True
            ),
            LOG_LEVEL=os.getenv(
                "EXTRACTOR_LOG_LEVEL", "INFO"
            ),
        )

    model_config = {
        "frozen": True,
    }
