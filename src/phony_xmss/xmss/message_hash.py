"""
Defines the message hash that feeds the Winternitz encoding.

All inputs (randomness, parameter, epoch, message) are encoded into field
elements, hashed with one width-24 Poseidon2 compression, and the digest is
read out as `NUM_CHUNKS` base-`BASE` digits.
"""

from __future__ import annotations

from typing import List

from ..koalabear import Fp
from .constants import (
    NODE_HASH_WIDTH,
    PROD_CONFIG,
    TEST_CONFIG,
    TWEAK_PREFIX_MESSAGE,
    XmssConfig,
)
from .exceptions import LengthMismatchError
from .poseidon import POSEIDON, PoseidonXmss
from .types import Parameter, Randomness
from .utils import decode_digest_to_digits, encode_bytes_to_field, encode_int_to_field


class MessageHasher:
    """An instance of the message hasher for a given config."""

    def __init__(self, config: XmssConfig, poseidon_hasher: PoseidonXmss):
        """Initializes the hasher with a specific parameter set."""
        self.config = config
        self.poseidon = poseidon_hasher

    def encode_message(self, message: bytes) -> List[Fp]:
        """
        Encodes a message into `MSG_LEN_FE` field elements.

        The message bytes are read as one little-endian integer and decomposed
        into base-P digits.

        Raises:
            LengthMismatchError: If the message is not `MESSAGE_LENGTH` bytes.
        """
        if len(message) != self.config.MESSAGE_LENGTH:
            raise LengthMismatchError(
                "message encoding", expected=self.config.MESSAGE_LENGTH, actual=len(message)
            )
        return encode_bytes_to_field(message, self.config.MSG_LEN_FE)

    def encode_epoch(self, epoch: int) -> List[Fp]:
        """Encodes `(epoch << 8) | MESSAGE_SEPARATOR` into `TWEAK_LEN_FE` elements."""
        return encode_int_to_field(epoch, TWEAK_PREFIX_MESSAGE.value, self.config.TWEAK_LEN_FE)

    def apply(
        self,
        parameter: Parameter,
        epoch: int,
        rho: Randomness,
        message: bytes,
    ) -> List[int]:
        """
        Hashes the inputs and returns the message digits.

        The hash input is `rho || parameter || epoch || message`.

        Returns:
            `NUM_CHUNKS` digits in `[0, BASE)`, least significant first.
        """
        config = self.config

        if len(rho) != config.RAND_LEN_FE:
            raise LengthMismatchError(
                "message hash rho", expected=config.RAND_LEN_FE, actual=len(rho)
            )
        if len(parameter) != config.PARAMETER_LEN:
            raise LengthMismatchError(
                "message hash parameter", expected=config.PARAMETER_LEN, actual=len(parameter)
            )

        combined_input = (
            list(rho) + list(parameter) + self.encode_epoch(epoch) + self.encode_message(message)
        )
        digest = self.poseidon.compress(combined_input, NODE_HASH_WIDTH, config.HASH_LEN_FE)

        return decode_digest_to_digits(digest, config.NUM_CHUNKS, config.BASE)


PROD_MESSAGE_HASHER = MessageHasher(PROD_CONFIG, POSEIDON)
"""An instance configured for production-level parameters."""

TEST_MESSAGE_HASHER = MessageHasher(TEST_CONFIG, POSEIDON)
"""A lightweight instance for test environments."""
