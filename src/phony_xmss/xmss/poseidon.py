"""
Defines the two Poseidon2 hashing modes used by the scheme.

1.  **Compression Mode**: a fixed-input-size mode for hashing small inputs
    such as one chain value, a pair of tree nodes, or the message hash input.
2.  **Sponge Mode**: a variable-input-size mode for hashing the many chain
    ends that form a Merkle tree leaf.

Both modes must match the verifier bit for bit: the padding, the feed-forward
rule and the placement of the capacity inside the sponge state are all part of
the public algorithm.
"""

from __future__ import annotations

from typing import List

from ..koalabear import Fp
from ..poseidon2.permutation import (
    PARAMS_16,
    PARAMS_24,
    Poseidon2Params,
    permute,
)
from .exceptions import LengthMismatchError


class PoseidonXmss:
    """An instance of the Poseidon2 hash engine for the scheme."""

    def __init__(self, params16: Poseidon2Params, params24: Poseidon2Params):
        """Initializes the hasher with specific Poseidon2 permutations."""
        self.params16 = params16
        self.params24 = params24

    def _params(self, width: int) -> Poseidon2Params:
        if width == self.params16.width:
            return self.params16
        if width == self.params24.width:
            return self.params24
        raise ValueError(f"Width must be 16 or 24, got {width}")

    def compress(self, input_vec: List[Fp], width: int, output_len: int) -> List[Fp]:
        """
        Implements the Poseidon2 hash in **compression mode**.

        The function computes `Truncate(Permute(padded_input) + padded_input)`:

        1.  **Padding**: `input_vec` is padded with zeros to the full state `width`.
        2.  **Permutation**: the permutation is applied to the padded state.
        3.  **Feed-Forward**: the padded input is added back element-wise, which
            makes the construction non-invertible.
        4.  **Truncation**: the first `output_len` elements are returned.

        Args:
            input_vec: The list of field elements to be hashed.
            width: The state width of the Poseidon2 permutation (16 or 24).
            output_len: The number of field elements in the output digest.

        Returns:
            A hash digest of `output_len` field elements.

        Raises:
            LengthMismatchError: Unless `output_len <= len(input_vec) <= width`.
        """
        params = self._params(width)

        if len(input_vec) > width:
            raise LengthMismatchError(
                "poseidon compress input", expected=f"at most {width}", actual=len(input_vec)
            )
        if len(input_vec) < output_len:
            raise LengthMismatchError(
                "poseidon compress input",
                expected=f"at least {output_len}",
                actual=len(input_vec),
            )

        padded_input = list(input_vec) + [Fp(value=0)] * (width - len(input_vec))

        permuted_state = permute(padded_input, params)

        final_state = [p + i for p, i in zip(permuted_state, padded_input, strict=True)]

        return final_state[:output_len]

    def sponge(
        self,
        capacity_value: List[Fp],
        input_vec: List[Fp],
        width: int,
        output_len: int,
    ) -> List[Fp]:
        """
        Implements the Poseidon2 hash using the **sponge construction**.

        ### Sponge Algorithm

        1.  **Initialization**: the first `len(capacity_value)` state slots hold
            the domain-separating `capacity_value`; the remaining slots form the
            `rate` and start at zero.

        2.  **Absorbing**: the input is zero-padded to a multiple of the rate and
            processed block by block. Each block is added into the rate slots,
            then the whole state is permuted.

        3.  **Squeezing**: the first `output_len` elements of the final state
            are the digest.

        Args:
            capacity_value: The domain-separating prefix of the state.
            input_vec: The input data of arbitrary length.
            width: The width of the Poseidon2 permutation.
            output_len: The number of field elements in the final output digest.

        Returns:
            A hash digest of `output_len` field elements.
        """
        params = self._params(width)

        capacity_len = len(capacity_value)
        if capacity_len >= width:
            raise LengthMismatchError(
                "poseidon sponge capacity", expected=f"less than {width}", actual=capacity_len
            )
        if output_len > width:
            raise LengthMismatchError(
                "poseidon sponge output", expected=f"at most {width}", actual=output_len
            )
        rate = width - capacity_len

        num_extra = (rate - (len(input_vec) % rate)) % rate
        padded_input = list(input_vec) + [Fp(value=0)] * num_extra

        state = list(capacity_value) + [Fp(value=0)] * rate

        for i in range(0, len(padded_input), rate):
            chunk = padded_input[i : i + rate]
            for j in range(rate):
                state[capacity_len + j] += chunk[j]
            state = permute(state, params)

        return state[:output_len]


POSEIDON = PoseidonXmss(PARAMS_16, PARAMS_24)
"""The shared hash engine. Its permutation tables are built on first use."""
