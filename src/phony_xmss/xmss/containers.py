"""
Data containers produced by the engine: PublicKey, Signature and VerificationItem.

Field counts and field order are identical to the real scheme's key and
signature types, so consumers cannot tell synthesized items from genuine ones.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from pydantic import Field

from phony_xmss.types import StrictBaseModel

from .bincode import (
    decode_digest_vec,
    decode_field_array,
    encode_digest_vec,
    encode_field_array,
)
from .constants import XmssConfig
from .types import HashDigest, HashTreeOpening, Parameter, Randomness

if TYPE_CHECKING:
    from .interface import PhonyXmssScheme


def _expect_consumed(kind: str, consumed: int, data: bytes) -> None:
    if consumed != len(data):
        raise ValueError(f"{kind}: {len(data) - consumed} trailing bytes after decoding")


class PublicKey(StrictBaseModel):
    """
    The public half of a synthesized key.

    Bincode layout: `root[HASH_LEN_FE] || parameter[PARAMETER_LEN]`, every element
    a little-endian `u32`, so the encoding is always
    `4 * (HASH_LEN_FE + PARAMETER_LEN)` bytes.
    """

    root: HashDigest
    """The Merkle root reached from the synthesized leaf."""
    parameter: Parameter
    """The public parameter `P` that personalizes the hash function."""

    def encode_bytes(self) -> bytes:
        """Serialize to the bincode layout."""
        return encode_field_array(self.root) + encode_field_array(self.parameter)

    @classmethod
    def decode_bytes(cls, data: bytes, config: XmssConfig) -> Self:
        """
        Deserialize from the bincode layout.

        Raises:
            ValueError: If the data is truncated, malformed or has trailing bytes.
        """
        root, offset = decode_field_array(data, 0, config.HASH_LEN_FE)
        parameter, consumed = decode_field_array(data, offset, config.PARAMETER_LEN)
        _expect_consumed("PublicKey", offset + consumed, data)
        return cls(root=root, parameter=parameter)


class Signature(StrictBaseModel):
    """
    A synthesized signature.

    Bincode layout: `path.siblings (Vec) || rho[RAND_LEN_FE] || hashes (Vec)`,
    each `Vec` prefixed by its length as a little-endian `u64`.
    """

    path: HashTreeOpening
    """The authentication co-path from the leaf to the root."""
    rho: Randomness
    """The randomness used to encode the message."""
    hashes: list[HashDigest]
    """The revealed chain values, one per Winternitz chain."""

    def encode_bytes(self) -> bytes:
        """Serialize to the bincode layout."""
        return (
            encode_digest_vec(self.path.siblings)
            + encode_field_array(self.rho)
            + encode_digest_vec(self.hashes)
        )

    @classmethod
    def decode_bytes(cls, data: bytes, config: XmssConfig) -> Self:
        """
        Deserialize from the bincode layout.

        Raises:
            ValueError: If the data is truncated, malformed or has trailing bytes.
        """
        siblings, offset = decode_digest_vec(data, 0, config.HASH_LEN_FE)
        rho, consumed = decode_field_array(data, offset, config.RAND_LEN_FE)
        offset += consumed
        hashes, consumed = decode_digest_vec(data, offset, config.HASH_LEN_FE)
        _expect_consumed("Signature", offset + consumed, data)
        return cls(path=HashTreeOpening(siblings=siblings), rho=rho, hashes=hashes)

    def verify(
        self,
        public_key: PublicKey,
        epoch: int,
        message: bytes,
        scheme: "PhonyXmssScheme",
    ) -> bool:
        """
        Verify the signature with the reference verifier of `scheme`.

        This is a convenience method that delegates to `scheme.verify()`.
        """
        return scheme.verify(public_key, epoch, message, self)


class VerificationItem(StrictBaseModel):
    """One benchmark input: a message, its epoch, and a key/signature pair for it."""

    message: bytes
    """The signed message."""
    epoch: int = Field(ge=0, lt=2**32)
    """The epoch the signature is bound to."""
    signature: Signature
    """The synthesized signature."""
    public_key: PublicKey
    """The synthesized public key."""
