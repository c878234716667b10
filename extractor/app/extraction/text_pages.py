"""
Text extraction pipeline for one document.

    1. Embedded payload (attachment locator). If found, it is the sole
       result and page text is never rendered.
    2. Otherwise, NFC-normalized text of every page, in page order.
"""

from __future__ import annotations

import logging

from extractor.app.extraction.attachment_locator import find_embedded_text
from extractor.app.extraction.page_text import extract_pages
from extractor.app.extraction.payload_codec import DEFAULT_CHUNK_SIZE
from extractor.app.pdf.document import PdfDocument
from extractor.app.schemas.extraction import ExtractionResult, ExtractionSource

logger = logging.getLogger(__name__)


def extract_text_pages(
    document: PdfDocument,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ExtractionResult:
    payload = find_embedded_text(document, chunk_size)
    if payload is not None:
        logger.info("Using embedded payload (%d chars)", len(payload))
        return ExtractionResult(
            pages=[payload],
            source=ExtractionSource.EMBEDDED_PAYLOAD,
        )

    logger.info(
        "No embedded payload; extracting text from %d pages",
        document.page_count,
    )
    return ExtractionResult(
        pages=extract_pages(document),
        source=ExtractionSource.PAGE_TEXT,
    )
