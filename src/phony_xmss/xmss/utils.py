"""
Conversions between byte strings, integers and KoalaBear field vectors.

Every hash input of the scheme is a vector of field elements, and every
encoding digit is read out of a vector of field elements. These helpers are
the only place where the bit-level conventions of those conversions live.
"""

from __future__ import annotations

from typing import List, Sequence

from ..koalabear import Fp, P
from .exceptions import LengthMismatchError


def int_to_base_p(value: int, num_limbs: int) -> List[Fp]:
    """
    Decomposes a non-negative integer into a list of base-P field elements.

    This is a standard base conversion where each "digit" is an element of
    the prime field, least significant limb first.

    Args:
        value: The integer to decompose.
        num_limbs: The desired number of output field elements (limbs).

    Returns:
        A list of `num_limbs` field elements representing the integer.

    Raises:
        LengthMismatchError: If the integer needs more than `num_limbs` limbs.
    """
    if value < 0:
        raise ValueError(f"Cannot decompose a negative integer: {value}")
    if value >= P**num_limbs:
        raise LengthMismatchError(
            "int_to_base_p",
            expected=f"at most {num_limbs} base-P limbs",
            actual=_num_base_p_limbs(value),
        )

    limbs: List[Fp] = []
    acc = value
    for _ in range(num_limbs):
        limbs.append(Fp(value=acc % P))
        acc //= P
    return limbs


def _num_base_p_limbs(value: int) -> int:
    count = 0
    while value:
        value //= P
        count += 1
    return count


def encode_bytes_to_field(data: bytes, output_length: int) -> List[Fp]:
    """
    Encodes a byte string into `output_length` field elements.

    The bytes are read as one little-endian integer, which is then decomposed
    into its base-P representation.
    """
    return int_to_base_p(int.from_bytes(data, "little"), output_length)


def encode_int_to_field(value: int, separator: int, output_length: int) -> List[Fp]:
    """
    Packs `(value << 8) | separator` into `output_length` field elements.

    Only the message hash uses this shape; chain and tree hashes go through the
    tweak encoders of `tweak_hash`.
    """
    return int_to_base_p((value << 8) | separator, output_length)


def decode_digest_to_digits(digest: Sequence[Fp], num_digits: int, base: int) -> List[int]:
    """
    Reads `num_digits` base-`base` digits out of a field-element digest.

    The digest is interpreted as a big-endian base-P integer (first element is
    the most significant), then repeatedly reduced modulo `base`, emitting the
    least significant digit first.

    Raises:
        LengthMismatchError: If the digest is too short to carry `num_digits`
            uniformly distributed digits.
    """
    if base**num_digits > P ** len(digest):
        raise LengthMismatchError(
            "decode_digest_to_digits",
            expected=f"enough field elements for {num_digits} base-{base} digits",
            actual=len(digest),
        )

    acc = 0
    for fe in digest:
        acc = acc * P + fe.value

    digits: List[int] = []
    for _ in range(num_digits):
        digits.append(acc % base)
        acc //= base
    return digits


def bytes_to_chunks(data: bytes, chunk_size: int) -> List[int]:
    """
    Splits a byte string into `chunk_size`-bit digits.

    Bits are consumed least significant first, byte by byte. A trailing
    partial chunk, if any, is emitted as is.

    Example:
        >>> bytes_to_chunks(bytes([0b1110_0100]), 2)
        [0, 1, 2, 3]
    """
    if not 1 <= chunk_size <= 8:
        raise ValueError(f"chunk_size must be between 1 and 8, got {chunk_size}")

    mask = (1 << chunk_size) - 1
    chunks: List[int] = []
    acc = 0
    bits = 0
    for byte in data:
        acc |= byte << bits
        bits += 8
        while bits >= chunk_size:
            chunks.append(acc & mask)
            acc >>= chunk_size
            bits -= chunk_size
    if bits > 0:
        chunks.append(acc & mask)
    return chunks
