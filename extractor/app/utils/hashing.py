"""
File hashing.

Hashes raw file bytes with SHA-256 using bounded chunked reads, so the
source stream never needs to be held in memory at once.
"""

import hashlib
from typing import BinaryIO

DEFAULT_CHUNK_SIZE = 8192


def compute_file_hash(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Return the lowercase hex SHA-256 digest of everything left in ``stream``.

    Read errors propagate to the caller.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    digest = hashlib.sha256()
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        digest.update(chunk)
    return digest.hexdigest()
