"""
Bincode wire format for keys and signatures.

Downstream consumers deserialize synthesized items with the same routines they
use for genuine ones, so the layout follows the `bincode` 1.x defaults
(`bincode::serialize`), which use fixed-width integers:

- a field element is its canonical value as a `u32`, 4 little-endian bytes,
- fixed-size arrays are written element by element with no length prefix,
- `Vec<T>` is written as its length as a `u64`, 8 little-endian bytes,
  followed by its elements.

See: https://docs.rs/bincode/1.3.3/bincode/config/index.html
"""

from __future__ import annotations

from typing import List, Tuple

from ..koalabear import Fp

U32_BYTES = 4
U64_BYTES = 8


def _encode_uint(value: int, size: int) -> bytes:
    if not 0 <= value < (1 << (8 * size)):
        raise ValueError(f"Value out of u{8 * size} range: {value}")
    return value.to_bytes(size, "little")


def _decode_uint(data: bytes, offset: int, size: int) -> Tuple[int, int]:
    end = offset + size
    if offset < 0 or end > len(data):
        raise ValueError(
            f"Unexpected EOF: u{8 * size} needs {size} bytes at offset {offset}, "
            f"{max(len(data) - offset, 0)} left"
        )
    return int.from_bytes(data[offset:end], "little"), size


def encode_u32(value: int) -> bytes:
    """
    Encode an unsigned 32-bit integer as 4 little-endian bytes.

    Raises:
        ValueError: If value is outside [0, 2^32).
    """
    return _encode_uint(value, U32_BYTES)


def decode_u32(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a `u32` starting at `offset`.

    Returns:
        A tuple of (decoded value, bytes consumed).

    Raises:
        ValueError: If fewer than 4 bytes remain.
    """
    return _decode_uint(data, offset, U32_BYTES)


def encode_u64(value: int) -> bytes:
    """
    Encode an unsigned 64-bit integer as 8 little-endian bytes.

    Raises:
        ValueError: If value is outside [0, 2^64).
    """
    return _encode_uint(value, U64_BYTES)


def decode_u64(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a `u64` starting at `offset`.

    Returns:
        A tuple of (decoded value, bytes consumed).

    Raises:
        ValueError: If fewer than 8 bytes remain.
    """
    return _decode_uint(data, offset, U64_BYTES)


def encode_field_array(elements: List[Fp]) -> bytes:
    """Encode a fixed-size array of field elements (no length prefix)."""
    return b"".join(fe.to_bincode_bytes() for fe in elements)


def decode_field_array(data: bytes, offset: int, count: int) -> Tuple[List[Fp], int]:
    """
    Decode `count` field elements starting at `offset`.

    Returns:
        A tuple of (elements, bytes consumed).
    """
    elements: List[Fp] = []
    cursor = offset
    for _ in range(count):
        fe, consumed = Fp.from_bincode_bytes(data, cursor)
        elements.append(fe)
        cursor += consumed
    return elements, cursor - offset


def encode_digest_vec(digests: List[List[Fp]]) -> bytes:
    """Encode a `Vec` of fixed-size digests: `u64` length, then each digest."""
    return encode_u64(len(digests)) + b"".join(encode_field_array(digest) for digest in digests)


def decode_digest_vec(
    data: bytes, offset: int, digest_len: int
) -> Tuple[List[List[Fp]], int]:
    """
    Decode a `Vec` of digests of `digest_len` elements each.

    Returns:
        A tuple of (digests, bytes consumed).

    Raises:
        ValueError: If the declared length runs past the end of `data`.
    """
    count, cursor_shift = decode_u64(data, offset)
    cursor = offset + cursor_shift

    if count * digest_len * U32_BYTES > len(data) - cursor:
        raise ValueError(f"Unexpected EOF: Vec declares {count} digests")

    digests: List[List[Fp]] = []
    for _ in range(count):
        digest, consumed = decode_field_array(data, cursor, digest_len)
        digests.append(digest)
        cursor += consumed
    return digests, cursor - offset
