"""
Embedded payload classification and container decoding.

Attachments embedded in receipts are frequently shipped compressed. This
module decides whether attachment bytes are a zip archive, a gzip stream
or raw bytes, and unpacks them.

Error handling policy:
    ``decode_container`` never raises for bad input. A corrupt or
    unsupported archive degrades to returning the original bytes
    unchanged; the text sanitizer downstream rejects whatever garbage
    remains. Only the specific exception types raised by zipfile, gzip
    and zlib for malformed data are caught. Anything else is a logic
    error and propagates.
"""

from __future__ import annotations

import gzip
import io
import logging
import zipfile
import zlib
from enum import Enum

logger = logging.getLogger(__name__)


ZIP_MAGIC = b"PK"
ZIP_MAGIC_THIRD_BYTES = (0x03, 0x05)
GZIP_MAGIC = b"\x1f\x8b"

TEXT_ENTRY_SUFFIXES = (".json", ".txt")

DEFAULT_CHUNK_SIZE = 8192


class PayloadKind(str, Enum):
    ZIP = "zip"
    GZIP = "gzip"
    RAW = "raw"


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _looks_like_zip(data: bytes) -> bool:
    return (
        len(data) > 4
        and data[:2] == ZIP_MAGIC
        and data[2] in ZIP_MAGIC_THIRD_BYTES
    )


def _looks_like_gzip(data: bytes) -> bool:
    return len(data) > 2 and data[:2] == GZIP_MAGIC


def classify_payload(data: bytes, declared_mime_type: str = "") -> PayloadKind:
    """
    Classify attachment bytes using the declared MIME type and magic bytes.

    The zip check runs first. The two magic-byte checks are mutually
    exclusive. A declared type mentioning "gzip" also contains "zip"; it
    only counts as a gzip hint.
    """
    mime = (declared_mime_type or "").lower()
    gzip_hint = "gzip" in mime
    zip_hint = "zip" in mime.replace("gzip", "")

    if zip_hint or _looks_like_zip(data):
        return PayloadKind.ZIP

    if gzip_hint or _looks_like_gzip(data):
        return PayloadKind.GZIP

    return PayloadKind.RAW


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _first_text_entry(data: bytes) -> bytes | None:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            if info.filename.lower().endswith(TEXT_ENTRY_SUFFIXES):
                logger.debug("Using zip entry %r", info.filename)
                return archive.read(info)
    return None


def _inflate_gzip(data: bytes, chunk_size: int) -> bytes:
    output = io.BytesIO()
    with gzip.GzipFile(fileobj=io.BytesIO(data)) as stream:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            output.write(chunk)
    return output.getvalue()


def decode_container(
    data: bytes,
    kind: PayloadKind,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """
    Unpack classified payload bytes.

    - ZIP:  contents of the first non-directory entry, in archive order,
            whose lowercased name ends in .json or .txt
    - GZIP: the fully inflated stream
    - RAW:  the input unchanged

    Returns the original bytes whenever unpacking is impossible.
    """
    if kind == PayloadKind.ZIP:
        try:
            entry = _first_text_entry(data)
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            OSError,
            RuntimeError,
            NotImplementedError,
            ValueError,
        ) as exc:
            logger.warning("Zip payload could not be read, using raw bytes: %s", exc)
            return data

        if entry is None:
            logger.debug("Zip payload has no .json/.txt entry, using raw bytes")
            return data
        return entry

    if kind == PayloadKind.GZIP:
        try:
            return _inflate_gzip(data, chunk_size)
        except (OSError, EOFError, zlib.error) as exc:
            logger.warning("Gzip payload could not be inflated, using raw bytes: %s", exc)
            return data

    return data
