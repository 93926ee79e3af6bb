"""
Seeded random data generator.

Every value a synthesis call draws (parameter, rho, chain starts, siblings)
comes from one SHAKE128 stream keyed by the caller's seed, so identical
inputs always produce identical output.
"""

import hashlib
from typing import List

from ..koalabear import Fp
from .constants import XmssConfig
from .types import HashDigest, Parameter, Randomness

RAND_DOMAIN_SEP: bytes = b"phony-xmss/rand"
"""Domain separator for the seeded stream."""

RAND_BYTES_PER_FE: int = 8
"""
Bytes of SHAKE128 output used per field element.

64 bits reduced modulo the 31-bit prime are statistically close to uniform.
"""

SEED_BITS: int = 64
"""Seeds are unsigned 64-bit integers."""


class Rand:
    """
    A deterministic source of field elements for one synthesis call.

    Each draw hashes `(domain, seed, draw counter)`, so the n-th draw depends
    only on the seed and on how many draws preceded it.
    """

    def __init__(self, config: XmssConfig, seed: int):
        """Initializes the stream for `seed`."""
        if not 0 <= seed < (1 << SEED_BITS):
            raise ValueError(f"seed must be an unsigned {SEED_BITS}-bit integer, got {seed}")
        self.config = config
        self.seed = seed
        self._prefix = RAND_DOMAIN_SEP + seed.to_bytes(SEED_BITS // 8, "little")
        self._counter = 0

    def field_elements(self, length: int) -> List[Fp]:
        """Draws `length` field elements."""
        block = hashlib.shake_128(self._prefix + self._counter.to_bytes(8, "little")).digest(
            length * RAND_BYTES_PER_FE
        )
        self._counter += 1
        return [
            Fp(value=int.from_bytes(block[i : i + RAND_BYTES_PER_FE], "big"))
            for i in range(0, len(block), RAND_BYTES_PER_FE)
        ]

    def parameter(self) -> Parameter:
        """Draws a public parameter."""
        return self.field_elements(self.config.PARAMETER_LEN)

    def domain(self) -> HashDigest:
        """Draws a hash digest."""
        return self.field_elements(self.config.HASH_LEN_FE)

    def rho(self) -> Randomness:
        """Draws randomness `rho` for message encoding."""
        return self.field_elements(self.config.RAND_LEN_FE)
