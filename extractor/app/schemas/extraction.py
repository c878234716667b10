from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class DocumentRequest(BaseModel):
    reference: str = Field(
        ...,
        min_length=1,
        description="Filesystem path or file:// URI of the document",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class ExtractionSource(str, Enum):
    """Which path of the pipeline produced an ExtractionResult."""

    EMBEDDED_PAYLOAD = "embedded_payload"
    PAGE_TEXT = "page_text"


class ExtractionResult(BaseModel):
    """
    Ordered text extracted from one document.

    - EMBEDDED_PAYLOAD: exactly one element, the decoded attachment.
    - PAGE_TEXT: one NFC-normalized element per page, in page order.
    """

    pages: List[str]
    source: ExtractionSource

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def embedded_payload_is_single(self) -> "ExtractionResult":
        if (
            self.source == ExtractionSource.EMBEDDED_PAYLOAD
            and len(self.pages) != 1
        ):
            raise ValueError(
                "An embedded payload result must contain exactly one element."
            )
        return self


class PageCountResult(BaseModel):
    page_count: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class FileHashResult(BaseModel):
    algorithm: str = "sha256"
    hash: str = Field(..., description="Lowercase hex digest of the raw file bytes")

    model_config = ConfigDict(frozen=True)


class TextFileResult(BaseModel):
    text: str

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[str] = None

    model_config = ConfigDict(frozen=True)
