"""
Builds the Winternitz chains of one synthesized signature.

A real signer derives every chain start from its secret key. Here each chain
starts from a freshly drawn digest, which is all a verifier can observe: it
only ever sees the revealed value and recomputes the chain end from it.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .constants import PROD_CONFIG, TEST_CONFIG, XmssConfig
from .exceptions import LengthMismatchError
from .rand import Rand
from .tweak_hash import PROD_TWEAK_HASHER, TEST_TWEAK_HASHER, TweakHasher
from .types import HashDigest, Parameter

logger = logging.getLogger(__name__)


class ChainBuilder:
    """Builds revealed values and chain ends for a codeword."""

    def __init__(self, config: XmssConfig, hasher: TweakHasher):
        """Initializes the builder with a config and a tweakable hasher."""
        self.config = config
        self.hasher = hasher

    def walk(
        self,
        parameter: Parameter,
        epoch: int,
        chain_index: int,
        digit: int,
        start_digest: HashDigest,
    ) -> Tuple[HashDigest, HashDigest]:
        """
        Walks one chain from its start to its end.

        Args:
            parameter: The public parameter `P`.
            epoch: The signature epoch.
            chain_index: The index of the chain.
            digit: The codeword digit for this chain, in `[0, BASE)`.
            start_digest: The value at chain position 0.

        Returns:
            `(revealed, end)`: the value at position `digit`, which goes into
            the signature, and the value at position `BASE - 1`, which only
            feeds the leaf hash. Digit 0 reveals `start_digest` itself and
            digit `BASE - 1` reveals the end.
        """
        if not 0 <= digit < self.config.BASE:
            raise ValueError(f"Chain {chain_index}: digit {digit} outside [0, {self.config.BASE})")

        revealed = self.hasher.hash_chain(
            parameter=parameter,
            epoch=epoch,
            chain_index=chain_index,
            start_step=0,
            num_steps=digit,
            start_digest=start_digest,
        )
        end = self.hasher.hash_chain(
            parameter=parameter,
            epoch=epoch,
            chain_index=chain_index,
            start_step=digit,
            num_steps=self.config.BASE - 1 - digit,
            start_digest=revealed,
        )
        return revealed, end

    def build(
        self,
        rand: Rand,
        parameter: Parameter,
        epoch: int,
        codeword: List[int],
    ) -> Tuple[List[HashDigest], List[HashDigest]]:
        """
        Builds every chain of a codeword, each from a freshly drawn start.

        Returns:
            `(hashes, chain_ends)`, both indexed by chain.
        """
        if len(codeword) != self.config.DIMENSION:
            raise LengthMismatchError(
                "chain construction", expected=self.config.DIMENSION, actual=len(codeword)
            )

        hashes: List[HashDigest] = []
        chain_ends: List[HashDigest] = []
        for chain_index, digit in enumerate(codeword):
            revealed, end = self.walk(parameter, epoch, chain_index, digit, rand.domain())
            hashes.append(revealed)
            chain_ends.append(end)

        logger.debug("Built %d chains for epoch %d", len(hashes), epoch)
        return hashes, chain_ends


PROD_CHAIN_BUILDER = ChainBuilder(PROD_CONFIG, PROD_TWEAK_HASHER)
"""An instance configured for production-level parameters."""

TEST_CHAIN_BUILDER = ChainBuilder(TEST_CONFIG, TEST_TWEAK_HASHER)
"""A lightweight instance for test environments."""
