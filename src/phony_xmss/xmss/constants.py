"""
Defines the cryptographic constants and configuration presets of the engine.

The production preset mirrors the Poseidon2 Winternitz instantiation (chunk
size 1) of the hash-based signature scheme whose verifier consumes the
synthesized items. Every constant here is part of the contract with that
verifier: changing one silently produces signatures that no longer verify.

A much smaller preset is provided for tests.
"""

from pydantic import BaseModel, ConfigDict, model_validator
from typing_extensions import Final

from ..config import PHONY_ENV
from ..koalabear import Fp, P
from .exceptions import ConfigurationError

CHAIN_HASH_WIDTH: Final = 16
"""Poseidon2 width used to hash a single digest (a hash-chain step)."""

NODE_HASH_WIDTH: Final = 24
"""Poseidon2 width used for the message hash, tree nodes and the leaf sponge."""

MAX_EPOCH_BITS: Final = 32
"""Epochs are unsigned 32-bit integers."""


class XmssConfig(BaseModel):
    """A model holding the configuration constants for one preset."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # --- Core Scheme Configuration ---
    MESSAGE_LENGTH: int
    """The length in bytes of every message."""

    LOG_LIFETIME: int
    """The height of the Merkle tree, i.e. the length of every co-path."""

    @property
    def LIFETIME(self) -> int:  # noqa: N802
        """The number of epochs (leaves) the tree can address."""
        return 1 << self.LOG_LIFETIME

    CHUNK_SIZE: int
    """The number of bits per encoding digit."""

    @property
    def BASE(self) -> int:  # noqa: N802
        """The alphabet size of the encoding digits, `2^CHUNK_SIZE`."""
        return 1 << self.CHUNK_SIZE

    NUM_CHUNKS: int
    """The number of digits read out of the message digest."""

    NUM_CHUNKS_CHECKSUM: int
    """The number of checksum digits appended after the message digits."""

    @property
    def DIMENSION(self) -> int:  # noqa: N802
        """The total number of Winternitz chains."""
        return self.NUM_CHUNKS + self.NUM_CHUNKS_CHECKSUM

    # --- Hash Input and Output Lengths (in field elements) ---
    PARAMETER_LEN: int
    """The length of the public parameter `P`."""

    TWEAK_LEN_FE: int
    """The length of an encoded tweak."""

    MSG_LEN_FE: int
    """The length of a message after being encoded into field elements."""

    RAND_LEN_FE: int
    """The length of the randomness `rho` used during message encoding."""

    HASH_LEN_FE: int
    """The output length of every hash: chain values, leaves, nodes and the root."""

    @model_validator(mode="after")
    def check_consistency(self) -> "XmssConfig":
        """Rejects presets that cannot yield verifiable signatures."""
        if not 1 <= self.CHUNK_SIZE <= 8:
            raise ConfigurationError(f"CHUNK_SIZE must be in [1, 8], got {self.CHUNK_SIZE}")
        if not 1 <= self.LOG_LIFETIME <= MAX_EPOCH_BITS:
            raise ConfigurationError(
                f"LOG_LIFETIME must be in [1, {MAX_EPOCH_BITS}], got {self.LOG_LIFETIME}"
            )

        # Chain indices occupy a single byte of the chain tweak.
        if self.DIMENSION > 256:
            raise ConfigurationError(f"at most 256 chains are addressable, got {self.DIMENSION}")

        # The checksum must be representable by the checksum digits.
        max_checksum = self.NUM_CHUNKS * (self.BASE - 1)
        if self.NUM_CHUNKS_CHECKSUM * self.CHUNK_SIZE > 64:
            raise ConfigurationError("checksum digits exceed the 64-bit checksum word")
        if max_checksum >= self.BASE**self.NUM_CHUNKS_CHECKSUM:
            raise ConfigurationError(
                f"checksum overflow: maximum checksum {max_checksum} does not fit in "
                f"{self.NUM_CHUNKS_CHECKSUM} base-{self.BASE} digits"
            )

        # Decoding and encoding must never need more precision than available.
        if self.BASE**self.NUM_CHUNKS > P**self.HASH_LEN_FE:
            raise ConfigurationError(
                f"a {self.HASH_LEN_FE}-element digest cannot supply "
                f"{self.NUM_CHUNKS} base-{self.BASE} digits"
            )
        if 256**self.MESSAGE_LENGTH > P**self.MSG_LEN_FE:
            raise ConfigurationError(
                f"{self.MESSAGE_LENGTH}-byte messages do not fit in {self.MSG_LEN_FE} elements"
            )
        max_epoch = (1 << MAX_EPOCH_BITS) - 1
        max_tweak = max(
            (max_epoch << 24) | (0xFF << 16) | (0xFF << 8) | 0xFF,
            (self.LOG_LIFETIME << 40) | (max_epoch << 8) | 0xFF,
        )
        if max_tweak >= P**self.TWEAK_LEN_FE:
            raise ConfigurationError(f"tweaks do not fit in {self.TWEAK_LEN_FE} elements")

        # Every hash input must fit in the state of its permutation.
        chain_input = self.PARAMETER_LEN + self.TWEAK_LEN_FE + self.HASH_LEN_FE
        node_input = self.PARAMETER_LEN + self.TWEAK_LEN_FE + 2 * self.HASH_LEN_FE
        message_input = (
            self.RAND_LEN_FE + self.PARAMETER_LEN + self.TWEAK_LEN_FE + self.MSG_LEN_FE
        )
        if chain_input > CHAIN_HASH_WIDTH:
            raise ConfigurationError(f"chain hash input of {chain_input} exceeds width 16")
        if node_input > NODE_HASH_WIDTH:
            raise ConfigurationError(f"tree node input of {node_input} exceeds width 24")
        if message_input > NODE_HASH_WIDTH:
            raise ConfigurationError(f"message hash input of {message_input} exceeds width 24")
        if message_input < self.HASH_LEN_FE:
            raise ConfigurationError("message hash input is shorter than a digest")

        return self


PROD_CONFIG: Final = XmssConfig(
    MESSAGE_LENGTH=32,
    LOG_LIFETIME=32,
    CHUNK_SIZE=1,
    NUM_CHUNKS=155,
    NUM_CHUNKS_CHECKSUM=8,
    PARAMETER_LEN=5,
    TWEAK_LEN_FE=2,
    MSG_LEN_FE=9,
    RAND_LEN_FE=5,
    HASH_LEN_FE=7,
)


TEST_CONFIG: Final = XmssConfig(
    MESSAGE_LENGTH=32,
    LOG_LIFETIME=8,
    CHUNK_SIZE=2,
    NUM_CHUNKS=8,
    NUM_CHUNKS_CHECKSUM=3,
    PARAMETER_LEN=5,
    TWEAK_LEN_FE=2,
    MSG_LEN_FE=9,
    RAND_LEN_FE=5,
    HASH_LEN_FE=7,
)


TARGET_CONFIG: Final = TEST_CONFIG if PHONY_ENV == "test" else PROD_CONFIG
"""The preset selected by the `PHONY_ENV` environment variable."""


TWEAK_PREFIX_CHAIN: Final = Fp(value=0x00)
"""The unique separator for tweaks used in Winternitz hash chains."""

TWEAK_PREFIX_TREE: Final = Fp(value=0x01)
"""The unique separator for tweaks used when hashing Merkle leaves and nodes."""

TWEAK_PREFIX_MESSAGE: Final = Fp(value=0x02)
"""The unique separator for the epoch tweak of the message hash."""
