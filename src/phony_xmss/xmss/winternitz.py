"""
Implements the Winternitz encoding with checksum.

The message digits alone are not a safe codeword: lowering a digit lets a
forger walk that chain further. Appending the digits of
`sum(BASE - 1 - digit)` makes any such change raise the checksum, which would
require walking a checksum chain backwards.
"""

from typing import List

from .constants import PROD_CONFIG, TEST_CONFIG, XmssConfig
from .message_hash import (
    PROD_MESSAGE_HASHER,
    TEST_MESSAGE_HASHER,
    MessageHasher,
)
from .types import Parameter, Randomness
from .utils import bytes_to_chunks

CHECKSUM_BYTES: int = 8
"""The checksum is serialized as a little-endian 64-bit word before chunking."""


class WinternitzEncoder:
    """An instance of the Winternitz encoder for a given configuration."""

    def __init__(self, config: XmssConfig, message_hasher: MessageHasher):
        """Initializes the encoder with a specific parameter set."""
        self.config = config
        self.message_hasher = message_hasher

    def checksum_chunks(self, message_chunks: List[int]) -> List[int]:
        """
        Computes the checksum digits of a list of message digits.

        ### Checksum Algorithm

        1.  `checksum = sum(BASE - 1 - d)` over the message digits, as a plain
            integer.
        2.  The checksum is written as 8 little-endian bytes and split into
            `CHUNK_SIZE`-bit digits, least significant first.
        3.  The digits are zero-extended, then cut to `NUM_CHUNKS_CHECKSUM`.
            The configuration guarantees the cut only drops zero digits.
        """
        config = self.config
        checksum = sum(config.BASE - 1 - d for d in message_chunks)

        chunks = bytes_to_chunks(checksum.to_bytes(CHECKSUM_BYTES, "little"), config.CHUNK_SIZE)
        if len(chunks) < config.NUM_CHUNKS_CHECKSUM:
            chunks.extend([0] * (config.NUM_CHUNKS_CHECKSUM - len(chunks)))
        return chunks[: config.NUM_CHUNKS_CHECKSUM]

    def encode(
        self, parameter: Parameter, epoch: int, rho: Randomness, message: bytes
    ) -> List[int]:
        """
        Encodes a message into its Winternitz codeword.

        Returns:
            `DIMENSION` digits: the `NUM_CHUNKS` message digits followed by the
            `NUM_CHUNKS_CHECKSUM` checksum digits.
        """
        message_chunks = self.message_hasher.apply(parameter, epoch, rho, message)
        codeword = message_chunks + self.checksum_chunks(message_chunks)

        # Sanity check: one digit per chain.
        if len(codeword) != self.config.DIMENSION:
            raise RuntimeError("Encoding is broken: returned too many or too few chunks.")

        return codeword


PROD_WINTERNITZ_ENCODER = WinternitzEncoder(PROD_CONFIG, PROD_MESSAGE_HASHER)
"""An instance configured for production-level parameters."""

TEST_WINTERNITZ_ENCODER = WinternitzEncoder(TEST_CONFIG, TEST_MESSAGE_HASHER)
"""A lightweight instance for test environments."""
