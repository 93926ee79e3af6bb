"""
Builds and checks single-leaf Merkle authentication paths.

### Why a Single Path Is Enough

A verifier never sees the tree, only one leaf (recomputed from the signature)
and the siblings on the way to the root. So instead of materializing
`2^LOG_LIFETIME` leaves, the builder hashes the one leaf it has, draws every
sibling at random, and climbs `LOG_LIFETIME` levels. The node it ends on is,
by construction, the root that this path opens to.

The left/right order and the tweak of every parent must be exactly the ones
the verifier uses, otherwise the recomputed root differs.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .constants import PROD_CONFIG, TEST_CONFIG, XmssConfig
from .rand import Rand
from .tweak_hash import (
    PROD_TWEAK_HASHER,
    TEST_TWEAK_HASHER,
    TreeTweak,
    TweakHasher,
)
from .types import HashDigest, HashTreeOpening, Parameter

logger = logging.getLogger(__name__)


class MerkleTree:
    """An instance of the Merkle path handler for a given config."""

    def __init__(self, config: XmssConfig, hasher: TweakHasher):
        """Initializes with a config and a tweakable hasher."""
        self.config = config
        self.hasher = hasher

    def hash_leaf(
        self, parameter: Parameter, position: int, leaf_parts: List[HashDigest]
    ) -> HashDigest:
        """Hashes the chain ends of one epoch into its leaf (level 0, index `position`)."""
        return self.hasher.apply_leaf(parameter, TreeTweak(level=0, index=position), leaf_parts)

    def _parent(
        self,
        parameter: Parameter,
        level: int,
        position: int,
        current_node: HashDigest,
        sibling_node: HashDigest,
    ) -> HashDigest:
        """
        Hashes a node with its sibling into their parent.

        `position` is the index of `current_node` within `level`; an even
        position makes it the left child. The parent is tweaked with
        `(level + 1, position // 2)`.
        """
        if position % 2 == 0:
            children = [current_node, sibling_node]
        else:
            children = [sibling_node, current_node]
        parent_tweak = TreeTweak(level=level + 1, index=position // 2)
        return self.hasher.apply(parameter, parent_tweak, children)

    def build_path(
        self,
        rand: Rand,
        parameter: Parameter,
        position: int,
        leaf_parts: List[HashDigest],
    ) -> Tuple[HashTreeOpening, HashDigest]:
        """
        Builds an authentication path for one leaf with random siblings.

        ### Construction Algorithm

        1.  **Leaf**: the chain ends are hashed into the leaf at `position`.
        2.  **Climb**: at each of the `LOG_LIFETIME` levels a sibling is drawn,
            the current node is combined with it, and the sibling is recorded.
        3.  **Root**: the last node computed is the root.

        Args:
            rand: The seeded generator siblings are drawn from.
            parameter: The public parameter `P` for the hash function.
            position: The leaf index, i.e. the epoch.
            leaf_parts: The chain ends forming the leaf.

        Returns:
            `(opening, root)`, with exactly `LOG_LIFETIME` siblings.
        """
        if not 0 <= position < self.config.LIFETIME:
            raise ValueError(f"Position {position} outside a tree of {self.config.LIFETIME} leaves")

        current_node = self.hash_leaf(parameter, position, leaf_parts)
        current_position = position
        siblings: List[HashDigest] = []

        for level in range(self.config.LOG_LIFETIME):
            sibling_node = rand.domain()
            current_node = self._parent(
                parameter, level, current_position, current_node, sibling_node
            )
            siblings.append(sibling_node)
            current_position //= 2

        logger.debug("Built a %d-level path for leaf %d", len(siblings), position)
        return HashTreeOpening(siblings=siblings), current_node

    def verify_path(
        self,
        parameter: Parameter,
        root: HashDigest,
        position: int,
        leaf_parts: List[HashDigest],
        opening: HashTreeOpening,
    ) -> bool:
        """
        Verifies a Merkle authentication path against a known root.

        ### Verification Algorithm

        1.  **Leaf Computation**: `leaf_parts` are hashed into the leaf.
        2.  **Bottom-Up Reconstruction**: each sibling is combined with the
            current node, ordered by the parity of the current position.
        3.  **Final Comparison**: the path is valid if and only if the last node
            equals `root`.

        Args:
            parameter: The public parameter `P` for the hash function.
            root: The trusted Merkle root from the public key.
            position: The index of the leaf being verified.
            leaf_parts: The digests that constitute the leaf.
            opening: The sibling path.

        Returns:
            `True` if the path reconstructs `root`, `False` otherwise.
        """
        if len(opening.siblings) != self.config.LOG_LIFETIME:
            return False
        if not 0 <= position < self.config.LIFETIME:
            return False

        current_node = self.hash_leaf(parameter, position, leaf_parts)
        current_position = position
        for level, sibling_node in enumerate(opening.siblings):
            current_node = self._parent(
                parameter, level, current_position, current_node, sibling_node
            )
            current_position //= 2

        return current_node == root


PROD_MERKLE_TREE = MerkleTree(PROD_CONFIG, PROD_TWEAK_HASHER)
"""An instance configured for production-level parameters."""

TEST_MERKLE_TREE = MerkleTree(TEST_CONFIG, TEST_TWEAK_HASHER)
"""A lightweight instance for test environments."""
