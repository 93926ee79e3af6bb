"""
Poseidon2 over KoalaBear, for the two state widths the scheme hashes with.

Reference: Grassi, Khovratovich, Schofnegger, "Poseidon2: A Faster Version of
the Poseidon Hash Function" (https://eprint.iacr.org/2023/323).

Callers pass and receive `Fp` vectors; between the first and the last layer
the state is a plain list of canonical integers.
"""

from itertools import chain
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..koalabear.field import Fp, P
from .constants import round_constants

S_BOX_DEGREE = 3
"""Cubing is a permutation of KoalaBear since 3 does not divide `P - 1`."""


class Poseidon2Params(BaseModel):
    """Shape of one Poseidon2 instance: state width, round counts, internal diagonal."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    width: int = Field(gt=0, description="State width t.")
    rounds_f: int = Field(gt=0, description="Full rounds, split evenly around the partial ones.")
    rounds_p: int = Field(ge=0, description="Partial rounds (S-box on the first lane only).")
    internal_diag_vectors: List[Fp] = Field(
        min_length=1,
        description="Diagonal D of the internal matrix J + D.",
    )

    @model_validator(mode="after")
    def check_shape(self) -> "Poseidon2Params":
        """Ensures the configuration is usable by the permutation."""
        if len(self.internal_diag_vectors) != self.width:
            raise ValueError(
                f"internal_diag_vectors has {len(self.internal_diag_vectors)} entries "
                f"for width {self.width}"
            )
        if self.width % 4 != 0:
            raise ValueError("Width must be a multiple of 4 for the M4-based external layer.")
        if self.rounds_f % 2 != 0:
            raise ValueError("The number of full rounds must be even.")
        return self

    @property
    def round_constants(self) -> tuple[int, ...]:
        """The shared round-constant table, built on first access."""
        return round_constants(self.width, self.rounds_f, self.rounds_p)

    @property
    def diagonal(self) -> tuple[int, ...]:
        """`internal_diag_vectors` as canonical integers."""
        return tuple(fe.value for fe in self.internal_diag_vectors)


def _diag(*entries: Fp | int) -> List[Fp]:
    return [e if isinstance(e, Fp) else Fp(value=e) for e in entries]


_HALF = Fp(value=1) / 2

PARAMS_16 = Poseidon2Params(
    width=16,
    rounds_f=8,
    rounds_p=20,
    internal_diag_vectors=_diag(
        -2, 1, 2, _HALF, 3, 4, -_HALF, -3, -4,
        Fp(value=1) / 2**8,
        Fp(value=1) / 8,
        Fp(value=1) / 2**24,
        -(Fp(value=1) / 2**8),
        -(Fp(value=1) / 8),
        -(Fp(value=1) / 16),
        -(Fp(value=1) / 2**24),
    ),
)  # fmt: skip
"""Width-16 instance, used for single-digest chain hashing."""

PARAMS_24 = Poseidon2Params(
    width=24,
    rounds_f=8,
    rounds_p=23,
    internal_diag_vectors=_diag(
        -2, 1, 2, _HALF, 3, 4, -_HALF, -3, -4,
        Fp(value=1) / 2**8,
        Fp(value=1) / 4,
        Fp(value=1) / 8,
        Fp(value=1) / 16,
        Fp(value=1) / 32,
        Fp(value=1) / 64,
        Fp(value=1) / 2**24,
        -(Fp(value=1) / 2**8),
        -(Fp(value=1) / 8),
        -(Fp(value=1) / 16),
        -(Fp(value=1) / 32),
        -(Fp(value=1) / 64),
        -(Fp(value=1) / 2**7),
        -(Fp(value=1) / 2**9),
        -(Fp(value=1) / 2**24),
    ),
)  # fmt: skip
"""Width-24 instance, used for message hashing, tree nodes and the leaf sponge."""


def _apply_m4(a: int, b: int, c: int, d: int) -> List[int]:
    """
    Multiplies one 4-lane block by

        [2 3 1 1]
        [1 2 3 1]
        [1 1 2 3]
        [3 1 1 2]
    """
    return [
        (2 * a + 3 * b + c + d) % P,
        (a + 2 * b + 3 * c + d) % P,
        (a + b + 2 * c + 3 * d) % P,
        (3 * a + b + c + 2 * d) % P,
    ]


def external_linear_layer(state: List[int], width: int) -> List[int]:
    """
    Multiplies the state by M_E = circ(2*M4, M4, ..., M4).

    M4 is applied blockwise, then every lane gets the sum of the lanes with
    the same offset in all blocks (paper, Appendix B).
    """
    blocks = list(chain.from_iterable(_apply_m4(*state[i : i + 4]) for i in range(0, width, 4)))
    column_sums = [sum(blocks[k::4]) for k in range(4)]
    return [(x + column_sums[i % 4]) % P for i, x in enumerate(blocks)]


def internal_linear_layer(state: List[int], diag: tuple[int, ...]) -> List[int]:
    """Multiplies the state by M_I = J + D, i.e. `sum(state) + d_i * s_i` per lane."""
    total = sum(state)
    return [(total + d * s) % P for s, d in zip(state, diag, strict=True)]


def _full_round(state: List[int], constants: tuple[int, ...], offset: int) -> List[int]:
    width = len(state)
    sboxed = [pow(x + constants[offset + i], S_BOX_DEGREE, P) for i, x in enumerate(state)]
    return external_linear_layer(sboxed, width)


def permute(state: List[Fp], params: Poseidon2Params) -> List[Fp]:
    """
    Applies the Poseidon2 permutation described by `params`.

    Layer order: M_E, then `rounds_f / 2` full rounds, `rounds_p` partial
    rounds, and the remaining `rounds_f / 2` full rounds. Round constants are
    consumed in that order.

    Raises:
        ValueError: If `state` does not have `params.width` elements.
    """
    width = params.width
    if len(state) != width:
        raise ValueError(f"Input state must have length {width}, got {len(state)}")

    constants = params.round_constants
    diag = params.diagonal
    half_rounds_f = params.rounds_f // 2
    offset = 0

    s = external_linear_layer([fe.value for fe in state], width)

    for _ in range(half_rounds_f):
        s = _full_round(s, constants, offset)
        offset += width

    for _ in range(params.rounds_p):
        s[0] = pow(s[0] + constants[offset], S_BOX_DEGREE, P)
        offset += 1
        s = internal_linear_layer(s, diag)

    for _ in range(half_rounds_f):
        s = _full_round(s, constants, offset)
        offset += width

    return [Fp(value=x) for x in s]
