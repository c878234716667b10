"""
Caller-visible error taxonomy.

Every error that crosses the service boundary carries a short
machine-readable code, a human-readable message, and a description of the
underlying cause for diagnostics. Structural-decode problems inside a PDF
(unsupported file specifications, corrupt archives, undecodable bytes) are
NOT represented here: they degrade to "try the next candidate" and are
only logged.
"""

from __future__ import annotations

from typing import Optional


class ExtractorError(Exception):
    """Base class for all caller-visible extraction errors."""

    code = "EXTRACTOR_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def details(self) -> Optional[str]:
        if self.cause is None:
            return None
        return repr(self.cause)


class DocumentAccessError(ExtractorError):
    """
    The document reference cannot be resolved, opened or read.

    Non-recoverable for the request. Missing documents map to 404,
    everything else (permissions, references outside the document root)
    to 403.
    """

    code = "DOCUMENT_ACCESS_ERROR"

    def __init__(
        self,
        reference: str,
        message: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause)
        self.reference = reference

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if isinstance(self.cause, FileNotFoundError):
            return 404
        return 403

    @property
    def details(self) -> Optional[str]:
        cause = repr(self.cause) if self.cause is not None else None
        if cause is None:
            return f"reference={self.reference!r}"
        return f"reference={self.reference!r}; cause={cause}"


class DocumentTooLargeError(ExtractorError):
    code = "DOCUMENT_TOO_LARGE"
    status_code = 413


class ExtractionError(ExtractorError):
    code = "EXTRACTION_ERROR"
    status_code = 422


class PageCountError(ExtractorError):
    code = "PAGE_COUNT_ERROR"
    status_code = 422


class HashError(ExtractorError):
    code = "HASH_ERROR"


class ReadTextError(ExtractorError):
    code = "READ_TEXT_ERROR"
