"""
Visible page text extraction.

Fallback path used when a document carries no usable embedded payload.
Produces one string per page, in page order, each normalized to Unicode
NFC so that composed and decomposed glyph sequences compare equal.

Unlike attachment decoding, nothing is swallowed here: a page that fails
to render fails the whole document.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import List

from extractor.app.pdf.document import PdfDocument

logger = logging.getLogger(__name__)


def extract_pages(document: PdfDocument) -> List[str]:
    pages: List[str] = []

    for index in range(document.page_count):
        text = document.page_text(index)
        pages.append(unicodedata.normalize("NFC", text))

    logger.debug("Extracted text from %d pages", len(pages))
    return pages
