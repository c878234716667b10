import io

import pytest

from extractor.app.utils.hashing import compute_file_hash


def test_empty_input_known_vector():
    assert compute_file_hash(io.BytesIO(b"")) == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_abc_known_vector():
    assert compute_file_hash(io.BytesIO(b"abc")) == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_digest_is_lowercase_hex():
    digest = compute_file_hash(io.BytesIO(b"receipt"))

    assert len(digest) == 64
    assert digest == digest.lower()
    int(digest, 16)


def test_single_bit_change_changes_digest():
    original = bytearray(b"total=7.40;currency=EUR" * 500)
    flipped = bytearray(original)
    flipped[1234] ^= 0x01

    assert compute_file_hash(io.BytesIO(bytes(original))) != compute_file_hash(
        io.BytesIO(bytes(flipped))
    )


def test_chunk_size_does_not_affect_digest():
    data = bytes(range(256)) * 64

    assert compute_file_hash(io.BytesIO(data), chunk_size=7) == compute_file_hash(
        io.BytesIO(data), chunk_size=8192
    )


def test_rejects_non_positive_chunk_size():
    with pytest.raises(ValueError):
        compute_file_hash(io.BytesIO(b"x"), chunk_size=0)
