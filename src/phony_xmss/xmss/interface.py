"""
Defines the public interface of the phony XMSS engine.

`synthesize` produces a public key and a signature for one `(epoch, message)`
pair without ever generating a secret key or a full tree. `verify` is a
reference verifier following the real scheme's verification algorithm; the
engine is correct exactly when every synthesized pair passes it.
"""

from __future__ import annotations

import logging
from typing import Tuple

from ..config import PHONY_ENV
from .chains import PROD_CHAIN_BUILDER, TEST_CHAIN_BUILDER, ChainBuilder
from .constants import MAX_EPOCH_BITS, PROD_CONFIG, TEST_CONFIG, XmssConfig
from .containers import PublicKey, Signature
from .merkle_tree import PROD_MERKLE_TREE, TEST_MERKLE_TREE, MerkleTree
from .rand import Rand
from .tweak_hash import PROD_TWEAK_HASHER, TEST_TWEAK_HASHER, TweakHasher
from .winternitz import (
    PROD_WINTERNITZ_ENCODER,
    TEST_WINTERNITZ_ENCODER,
    WinternitzEncoder,
)

logger = logging.getLogger(__name__)


class PhonyXmssScheme:
    """An instance of the phony XMSS engine for a given config."""

    def __init__(
        self,
        config: XmssConfig,
        hasher: TweakHasher,
        encoder: WinternitzEncoder,
        chains: ChainBuilder,
        merkle_tree: MerkleTree,
    ):
        """Initializes the engine with all its required components."""
        self.config = config
        self.hasher = hasher
        self.encoder = encoder
        self.chains = chains
        self.merkle_tree = merkle_tree

    def _check_epoch(self, epoch: int) -> None:
        if not 0 <= epoch < (1 << MAX_EPOCH_BITS):
            raise ValueError(f"epoch must be an unsigned {MAX_EPOCH_BITS}-bit integer, got {epoch}")
        if epoch >= self.config.LIFETIME:
            raise ValueError(f"epoch {epoch} is outside the lifetime of {self.config.LIFETIME}")

    def synthesize(self, epoch: int, message: bytes, seed: int) -> Tuple[PublicKey, Signature]:
        """
        Synthesizes a public key and a signature that verify for `(epoch, message)`.

        ### Synthesis Algorithm

        1.  **Randomness**: a generator is seeded with `seed`; the parameter
            is drawn first, then `rho`.
        2.  **Encoding**: the message is encoded into its Winternitz codeword
            under `(parameter, epoch, rho)`.
        3.  **Chains**: every chain starts at a fresh random digest. The value
            after `x_i` steps is revealed and the chain is completed to its end.
        4.  **Tree**: the chain ends are hashed into the leaf at index `epoch`,
            random siblings are drawn up to the root.
        5.  **Assembly**: the public key is `(root, parameter)`, the signature is
            `(co-path, rho, revealed hashes)`.

        Identical inputs always produce identical outputs.

        Args:
            epoch: The epoch the signature is bound to, below `LIFETIME`.
            message: A message of exactly `MESSAGE_LENGTH` bytes.
            seed: An unsigned 64-bit seed for every random draw.

        Returns:
            A tuple `(public_key, signature)`.

        Raises:
            ValueError: If `epoch` or `seed` is out of range.
            LengthMismatchError: If the message length is wrong.
        """
        self._check_epoch(epoch)
        rand = Rand(self.config, seed)

        parameter = rand.parameter()
        rho = rand.rho()

        codeword = self.encoder.encode(parameter, epoch, rho, message)
        hashes, chain_ends = self.chains.build(rand, parameter, epoch, codeword)
        path, root = self.merkle_tree.build_path(rand, parameter, epoch, chain_ends)

        logger.debug("Synthesized signature for epoch %d with seed %d", epoch, seed)
        return (
            PublicKey(root=root, parameter=parameter),
            Signature(path=path, rho=rho, hashes=hashes),
        )

    def verify(self, pk: PublicKey, epoch: int, message: bytes, sig: Signature) -> bool:
        r"""
        Verifies a signature against a public key, message, and epoch.

        ### Verification Algorithm

        1.  **Re-encode Message**: the codeword $x = (x_1, \dots, x_v)$ is
            recomputed from `pk.parameter`, `epoch`, `sig.rho` and `message`.

        2.  **Complete Chains**: each revealed value $y_i$ sits at position
            $x_i$ of its chain; hashing it `BASE - 1 - x_i` more times yields
            the chain end.

        3.  **Compute Merkle Leaf**: the chain ends are hashed into the leaf
            for `epoch`.

        4.  **Verify Merkle Path**: the co-path leads from that leaf to a
            candidate root, which must equal `pk.root`.

        Args:
            pk: The public key to verify against.
            epoch: The epoch the signature corresponds to.
            message: The message that was supposedly signed.
            sig: The signature to be verified.

        Returns:
            `True` if the signature is valid, `False` otherwise, including when
            any length or range is malformed.
        """
        config = self.config

        if not 0 <= epoch < min(config.LIFETIME, 1 << MAX_EPOCH_BITS):
            return False
        if len(message) != config.MESSAGE_LENGTH:
            return False
        if len(pk.parameter) != config.PARAMETER_LEN or len(pk.root) != config.HASH_LEN_FE:
            return False
        if len(sig.rho) != config.RAND_LEN_FE or len(sig.hashes) != config.DIMENSION:
            return False
        if any(len(digest) != config.HASH_LEN_FE for digest in sig.hashes):
            return False
        if any(len(digest) != config.HASH_LEN_FE for digest in sig.path.siblings):
            return False

        codeword = self.encoder.encode(pk.parameter, epoch, sig.rho, message)

        chain_ends = [
            self.hasher.hash_chain(
                parameter=pk.parameter,
                epoch=epoch,
                chain_index=chain_index,
                start_step=xi,
                num_steps=config.BASE - 1 - xi,
                start_digest=sig.hashes[chain_index],
            )
            for chain_index, xi in enumerate(codeword)
        ]

        return self.merkle_tree.verify_path(
            parameter=pk.parameter,
            root=pk.root,
            position=epoch,
            leaf_parts=chain_ends,
            opening=sig.path,
        )


PROD_SCHEME = PhonyXmssScheme(
    PROD_CONFIG,
    PROD_TWEAK_HASHER,
    PROD_WINTERNITZ_ENCODER,
    PROD_CHAIN_BUILDER,
    PROD_MERKLE_TREE,
)
"""An instance configured for production-level parameters."""

TEST_SCHEME = PhonyXmssScheme(
    TEST_CONFIG,
    TEST_TWEAK_HASHER,
    TEST_WINTERNITZ_ENCODER,
    TEST_CHAIN_BUILDER,
    TEST_MERKLE_TREE,
)
"""A lightweight instance for test environments."""

TARGET_SCHEME = TEST_SCHEME if PHONY_ENV == "test" else PROD_SCHEME
"""The instance selected by `PHONY_ENV`."""
