"""
Tweaks and the tweakable hash built on Poseidon2.

Each hash of a signature has an address: chain steps are addressed by
`(epoch, chain_index, step)`, the leaf and inner nodes by `(level, index)`.
The address is packed with a purpose byte (0x00 for chains, 0x01 for the tree,
0x02 for the message hash) and prepended to the hash input after the public
parameter, so two hashes at different addresses never share an input.

The routing by input size (width-16 compression, width-24 compression, or the
width-24 sponge) is fixed by the verifier and must be reproduced exactly.
"""

from __future__ import annotations

from typing import List

from pydantic import Field, model_validator

from phony_xmss.types import StrictBaseModel

from ..koalabear import Fp
from .constants import (
    CHAIN_HASH_WIDTH,
    NODE_HASH_WIDTH,
    PROD_CONFIG,
    TEST_CONFIG,
    TWEAK_PREFIX_CHAIN,
    TWEAK_PREFIX_MESSAGE,
    TWEAK_PREFIX_TREE,
    XmssConfig,
)
from .exceptions import ConfigurationError
from .poseidon import POSEIDON, PoseidonXmss
from .types import HashDigest, Parameter
from .utils import int_to_base_p


def check_tweak_separators(chain: int, tree: int, message: int) -> None:
    """
    Checks that the three hash-purpose separators are pairwise distinct.

    Raises:
        ConfigurationError: If two purposes share a separator.
    """
    separators = {"chain": chain, "tree": tree, "message": message}
    if len(set(separators.values())) != len(separators):
        raise ConfigurationError(f"tweak separators must be pairwise distinct, got {separators}")
    for name, value in separators.items():
        if not 0 <= value <= 0xFF:
            raise ConfigurationError(f"{name} tweak separator must fit in one byte, got {value}")


check_tweak_separators(
    TWEAK_PREFIX_CHAIN.value, TWEAK_PREFIX_TREE.value, TWEAK_PREFIX_MESSAGE.value
)


class TreeTweak(StrictBaseModel):
    """
    A tweak used for hashing the leaf and the internal nodes of the Merkle tree.

    Level 0 addresses the leaf itself; level `l > 0` addresses the parent
    nodes computed at height `l`.
    """

    level: int = Field(ge=0, le=0xFF, description="The level in the tree, 0 for the leaf.")
    index: int = Field(ge=0, lt=2**32, description="The node's index within that level.")


class ChainTweak(StrictBaseModel):
    """A tweak used for one step of one Winternitz hash chain."""

    epoch: int = Field(ge=0, lt=2**32, description="The signature epoch.")
    chain_index: int = Field(ge=0, le=0xFF, description="The index of the hash chain.")
    step: int = Field(ge=1, le=0xFF, description="The 1-based position reached by this step.")


def encode_tweak(tweak: TreeTweak | ChainTweak, length: int) -> List[Fp]:
    """
    Encodes a tweak into `length` field elements.

    ### Encoding Algorithm

    1.  **Packing**: the tweak's coordinates and its separator are packed into
        one integer:
        - tree:  `(level << 40) | (index << 8) | TREE_SEPARATOR`
        - chain: `(epoch << 24) | (chain_index << 16) | (step << 8) | CHAIN_SEPARATOR`

    2.  **Decomposition**: the integer is decomposed into base-P digits.

    Raises:
        TypeError: If `tweak` is neither a `TreeTweak` nor a `ChainTweak`.
    """
    if isinstance(tweak, TreeTweak):
        acc = (tweak.level << 40) | (tweak.index << 8) | TWEAK_PREFIX_TREE.value
    elif isinstance(tweak, ChainTweak):
        acc = (
            (tweak.epoch << 24)
            | (tweak.chain_index << 16)
            | (tweak.step << 8)
            | TWEAK_PREFIX_CHAIN.value
        )
    else:
        raise TypeError(f"Unsupported tweak type: {type(tweak).__name__}")

    return int_to_base_p(acc, length)


class TweakHasher(StrictBaseModel):
    """An instance of the tweakable hasher for a given config."""

    config: XmssConfig
    """Configuration parameters for the hasher."""

    poseidon: PoseidonXmss
    """Poseidon2 engine used for hashing."""

    @model_validator(mode="after")
    def enforce_strict_types(self) -> "TweakHasher":
        """Reject subclasses to prevent type confusion."""
        if type(self.config) is not XmssConfig:
            raise TypeError("config must be exactly XmssConfig, not a subclass")
        if type(self.poseidon) is not PoseidonXmss:
            raise TypeError("poseidon must be exactly PoseidonXmss, not a subclass")
        return self

    def apply(
        self,
        parameter: Parameter,
        tweak: TreeTweak | ChainTweak,
        message_parts: List[HashDigest],
    ) -> HashDigest:
        """
        Applies the tweakable Poseidon2 hash function to one or more digests.

        ### Hashing Algorithm

        The input is `parameter || encoded_tweak || parts...`, routed by size:
        - one digest (a chain step): width-16 compression,
        - two digests (a tree node): width-24 compression,
        - more digests: width-24 sponge whose capacity is
          `parameter || encoded_tweak` and whose input is the flattened parts.

        Merkle leaves go through `apply_leaf` instead.

        Returns:
            A new hash digest of `HASH_LEN_FE` field elements.
        """
        if not message_parts:
            raise ValueError("At least one digest is required.")

        if len(message_parts) == 1:
            return self._compress(parameter, tweak, message_parts, CHAIN_HASH_WIDTH)
        if len(message_parts) == 2:
            return self._compress(parameter, tweak, message_parts, NODE_HASH_WIDTH)
        return self._sponge(parameter, tweak, message_parts)

    def apply_leaf(
        self,
        parameter: Parameter,
        tweak: TreeTweak,
        leaf_parts: List[HashDigest],
    ) -> HashDigest:
        """
        Hashes the chain ends of one epoch into a Merkle leaf.

        Leaves never use the width-16 permutation: up to two chain ends go
        through width-24 compression, more through the width-24 sponge. With
        three or more chain ends this agrees with `apply`.
        """
        if not leaf_parts:
            raise ValueError("At least one digest is required.")

        if len(leaf_parts) <= 2:
            return self._compress(parameter, tweak, leaf_parts, NODE_HASH_WIDTH)
        return self._sponge(parameter, tweak, leaf_parts)

    def _compress(
        self,
        parameter: Parameter,
        tweak: TreeTweak | ChainTweak,
        parts: List[HashDigest],
        width: int,
    ) -> HashDigest:
        encoded_tweak = encode_tweak(tweak, self.config.TWEAK_LEN_FE)
        input_vec = list(parameter) + encoded_tweak + [fe for part in parts for fe in part]
        return self.poseidon.compress(input_vec, width, self.config.HASH_LEN_FE)

    def _sponge(
        self,
        parameter: Parameter,
        tweak: TreeTweak | ChainTweak,
        parts: List[HashDigest],
    ) -> HashDigest:
        capacity_value = list(parameter) + encode_tweak(tweak, self.config.TWEAK_LEN_FE)
        flattened = [fe for part in parts for fe in part]
        return self.poseidon.sponge(
            capacity_value, flattened, NODE_HASH_WIDTH, self.config.HASH_LEN_FE
        )

    def hash_chain(
        self,
        parameter: Parameter,
        epoch: int,
        chain_index: int,
        start_step: int,
        num_steps: int,
        start_digest: HashDigest,
    ) -> HashDigest:
        """
        Walks a Winternitz hash chain for `num_steps` steps.

        Step `i` (0-based) is tweaked with position `start_step + i + 1`.
        Zero steps return `start_digest` unchanged.

        Args:
            parameter: The public parameter `P`.
            epoch: The signature epoch, part of the tweak.
            chain_index: The index of the hash chain, part of the tweak.
            start_step: The chain position of `start_digest`.
            num_steps: The number of hashing steps to perform.
            start_digest: The digest to begin hashing from.

        Returns:
            The digest at position `start_step + num_steps`.
        """
        if num_steps < 0:
            raise ValueError(f"num_steps must be non-negative, got {num_steps}")

        current_digest = start_digest
        for i in range(num_steps):
            tweak = ChainTweak(epoch=epoch, chain_index=chain_index, step=start_step + i + 1)
            current_digest = self.apply(parameter, tweak, [current_digest])
        return current_digest


PROD_TWEAK_HASHER = TweakHasher(config=PROD_CONFIG, poseidon=POSEIDON)
"""An instance configured for production-level parameters."""

TEST_TWEAK_HASHER = TweakHasher(config=TEST_CONFIG, poseidon=POSEIDON)
"""A lightweight instance for test environments."""
