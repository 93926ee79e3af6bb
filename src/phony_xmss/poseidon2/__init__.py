"""The Poseidon2 permutation over the KoalaBear field."""

from .constants import ROUND_CONSTANTS_16, ROUND_CONSTANTS_24, round_constants
from .permutation import (
    PARAMS_16,
    PARAMS_24,
    Poseidon2Params,
    permute,
)

__all__ = [
    "permute",
    "round_constants",
    "ROUND_CONSTANTS_16",
    "ROUND_CONSTANTS_24",
    "Poseidon2Params",
    "PARAMS_16",
    "PARAMS_24",
]
