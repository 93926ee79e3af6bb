"""Base types shared by the encoder, the chain builder and the tree builder."""

from typing import List

from pydantic import Field

from phony_xmss.types import StrictBaseModel

from ..koalabear import Fp

HashDigest = List[Fp]
"""
A hash digest: `HASH_LEN_FE` field elements.

Chain values, leaves, internal nodes and the root all share this shape.
"""

Parameter = List[Fp]
"""The public parameter `P`, mixed into every hash of one key."""

Randomness = List[Fp]
"""The randomness `rho`, mixed into the message hash of one signature."""


class HashTreeOpening(StrictBaseModel):
    """
    A Merkle authentication path.

    It contains the sibling of every node on the way from the leaf to the root,
    lowest level first.
    """

    siblings: List[HashDigest] = Field(description="Sibling hashes, from bottom to top.")
