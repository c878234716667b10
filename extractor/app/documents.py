"""
Document reference resolution and scoped byte-stream access.

A document reference is a filesystem path or a ``file://`` URI. When a
DOCUMENT_ROOT is configured, relative references resolve against it and
no reference may point outside of it.

All failures to reach the bytes of a document surface as
DocumentAccessError, carrying the reference and the underlying cause.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator
from urllib.parse import unquote, urlparse

from extractor.app.config import ExtractorConfig
from extractor.app.errors import DocumentAccessError, DocumentTooLargeError

logger = logging.getLogger(__name__)


class DocumentSource:
    """Maps document references to readable byte streams."""

    def __init__(self, config: ExtractorConfig) -> None:
        self._config = config

    def resolve(self, reference: str) -> Path:
        if reference.startswith("file://"):
            path = Path(unquote(urlparse(reference).path))
        else:
            path = Path(reference)

        root = self._config.DOCUMENT_ROOT
        if root is None:
            return path

        root = root.resolve()
        resolved = (root / path).resolve()
        if not resolved.is_relative_to(root):
            raise DocumentAccessError(
                reference,
                "Document reference points outside of the document root",
                PermissionError(str(resolved)),
            )
        return resolved

    @contextmanager
    def open(self, reference: str) -> Iterator[BinaryIO]:
        """Open the referenced document for binary reading."""
        path = self.resolve(reference)

        try:
            stream = path.open("rb")
        except OSError as exc:
            raise DocumentAccessError(
                reference,
                f"Cannot open document: {exc.strerror or exc}",
                exc,
            ) from exc

        with stream:
            yield stream

    def read_bytes(self, reference: str) -> bytes:
        """
        Read the whole document, bounded by MAX_PDF_SIZE_MB.
        """
        limit = self._config.max_document_bytes

        with self.open(reference) as stream:
            try:
                data = stream.read(limit + 1)
            except OSError as exc:
                raise DocumentAccessError(
                    reference,
                    f"Cannot read document: {exc.strerror or exc}",
                    exc,
                ) from exc

        if len(data) > limit:
            raise DocumentTooLargeError(
                f"Document exceeds maximum allowed size of "
                f"{self._config.MAX_PDF_SIZE_MB} MB"
            )

        logger.debug("Read %d bytes from %r", len(data), reference)
        return data
