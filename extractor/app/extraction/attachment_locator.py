"""
Embedded payload discovery.

Receipts generated by machines often carry their data as an attached file
(typically JSON, sometimes zipped or gzipped). This module finds the first
such attachment that decodes into usable text.

SEARCH ORDER (first match wins)
-------------------------------
1. /Names -> /EmbeddedFiles name tree, depth-first: a node's own entries
   in stored order, then its kids in stored order.
2. /FileAttachment annotations, in page order, then annotation order.

Nothing found is not an error: the caller falls back to page text.

Every attachment goes through the same pipeline:

    classify_payload -> decode_container -> sanitize_text -> is_acceptable_text

Unsupported specifications, missing embedded streams and payloads that
are neither JSON-tagged nor JSON are skipped and only logged.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from extractor.app.extraction.payload_codec import (
    DEFAULT_CHUNK_SIZE,
    classify_payload,
    decode_container,
)
from extractor.app.extraction.text_sanitizer import (
    is_acceptable_text,
    sanitize_text,
)
from extractor.app.pdf.document import PdfDocument
from extractor.app.schemas.embedded_files import (
    FileSpecification,
    NameTreeNode,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Single specification
# ------------------------------------------------------------------

def decode_specification(
    spec: Optional[FileSpecification],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Optional[str]:
    """
    Decode one file specification into acceptable text, or None.
    """
    if spec is None:
        return None

    if spec.kind != "complex":
        logger.warning(
            "Skipping unsupported file specification (%s) %r",
            spec.form,
            spec.name,
        )
        return None

    embedded = spec.embedded_file
    if embedded is None:
        logger.debug("File specification %r has no embedded file", spec.name)
        return None

    data = embedded.read_bytes()
    kind = classify_payload(data, embedded.subtype)
    logger.debug(
        "Attachment %r: %d bytes, declared %r, classified %s",
        spec.name,
        len(data),
        embedded.subtype,
        kind.value,
    )

    text = sanitize_text(decode_container(data, kind, chunk_size))
    if not text:
        logger.info("Attachment %r is empty after sanitizing", spec.name)
        return None

    if not is_acceptable_text(text, embedded.subtype):
        logger.debug("Attachment %r is not a JSON payload; skipping", spec.name)
        return None

    return text


# ------------------------------------------------------------------
# Candidate sources
# ------------------------------------------------------------------

def search_name_tree(
    node: Optional[NameTreeNode],
    decode: Callable[[Optional[FileSpecification]], Optional[str]],
) -> Optional[str]:
    """Depth-first search: own entries first, then kids."""
    if node is None:
        return None

    for entry in node.entries:
        text = decode(entry.specification)
        if text is not None:
            return text

    for kid in node.kids:
        text = search_name_tree(kid, decode)
        if text is not None:
            return text

    return None


def _first_decoded(
    specs: Iterable[Optional[FileSpecification]],
    decode: Callable[[Optional[FileSpecification]], Optional[str]],
) -> Optional[str]:
    for spec in specs:
        text = decode(spec)
        if text is not None:
            return text
    return None


# ------------------------------------------------------------------
# Public entry point
# ------------------------------------------------------------------

def find_embedded_text(
    document: PdfDocument,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Optional[str]:
    """
    Return the text of the first decodable attachment, or None.
    """

    def decode(spec: Optional[FileSpecification]) -> Optional[str]:
        return decode_specification(spec, chunk_size)

    sources = (
        lambda: search_name_tree(document.embedded_files(), decode),
        lambda: _first_decoded(document.attachment_annotations(), decode),
    )

    for source in sources:
        text = source()
        if text is not None:
            return text

    return None
