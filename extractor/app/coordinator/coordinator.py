"""
Boundary operations of the Extractor.

The coordinator maps a document reference to bytes, runs exactly one
operation on them, and translates failures into the caller-visible error
taxonomy. It holds no per-document state: every call opens and closes its
own stream and document handle, so concurrent calls never share anything
mutable.

Operations:
    extract_text_pages  embedded payload, else one string per page
    page_count          number of pages
    file_hash           SHA-256 of the raw file bytes
    read_text_file      raw file contents as UTF-8 text
"""

from __future__ import annotations

import logging
from typing import Optional

from extractor.app.config import ExtractorConfig
from extractor.app.documents import DocumentSource
from extractor.app.errors import (
    DocumentTooLargeError,
    ExtractionError,
    ExtractorError,
    HashError,
    PageCountError,
    ReadTextError,
)
from extractor.app.extraction.text_pages import extract_text_pages
from extractor.app.pdf.document import open_pdf
from extractor.app.schemas.extraction import (
    ExtractionResult,
    FileHashResult,
    PageCountResult,
    TextFileResult,
)
from extractor.app.utils.hashing import compute_file_hash

logger = logging.getLogger(__name__)


class ExtractionCoordinator:
    """
    Runs the boundary operations against referenced documents.

    Configuration is injected once at construction. No per-document state
    is kept, so the single instance on app.state serves every request.
    """

    def __init__(
        self,
        config: ExtractorConfig,
        source: Optional[DocumentSource] = None,
    ) -> None:
        self._config = config
        self._source = source if source is not None else DocumentSource(config)

    # ------------------------------------------------------------------
    # PDF operations
    # ------------------------------------------------------------------

    def extract_text_pages(self, reference: str) -> ExtractionResult:
        """
        Extract text from a PDF. No partial result is ever returned
        alongside an error.
        """
        data = self._source.read_bytes(reference)

        try:
            with open_pdf(
                data,
                sort_by_position=self._config.SORT_BY_POSITION,
                max_name_tree_depth=self._config.MAX_NAME_TREE_DEPTH,
            ) as document:
                return extract_text_pages(
                    document,
                    chunk_size=self._config.HASH_CHUNK_SIZE,
                )
        except ExtractorError:
            raise
        except Exception as exc:
            logger.warning("Text extraction failed for %r: %s", reference, exc)
            raise ExtractionError(
                f"Text extraction failed: {exc}",
                exc,
            ) from exc

    def page_count(self, reference: str) -> PageCountResult:
        data = self._source.read_bytes(reference)

        try:
            with open_pdf(data) as document:
                return PageCountResult(page_count=document.page_count)
        except ExtractorError:
            raise
        except Exception as exc:
            logger.warning("Page count failed for %r: %s", reference, exc)
            raise PageCountError(
                f"Cannot open document as PDF: {exc}",
                exc,
            ) from exc

    # ------------------------------------------------------------------
    # Raw file operations
    # ------------------------------------------------------------------

    def file_hash(self, reference: str) -> FileHashResult:
        with self._source.open(reference) as stream:
            try:
                digest = compute_file_hash(stream, self._config.HASH_CHUNK_SIZE)
            except OSError as exc:
                raise HashError(f"Failed to read document: {exc}", exc) from exc

        return FileHashResult(algorithm="sha256", hash=digest)

    def read_text_file(self, reference: str) -> TextFileResult:
        limit = self._config.max_document_bytes

        with self._source.open(reference) as stream:
            try:
                data = stream.read(limit + 1)
            except OSError as exc:
                raise ReadTextError(f"Failed to read document: {exc}", exc) from exc

        if len(data) > limit:
            raise DocumentTooLargeError(
                f"File exceeds maximum allowed size of "
                f"{self._config.MAX_PDF_SIZE_MB} MB"
            )

        return TextFileResult(text=data.decode("utf-8", errors="replace"))
