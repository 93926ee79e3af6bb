"""The KoalaBear prime field."""

from .field import P, P_BITS, P_BYTES, Fp

__all__ = [
    "P",
    "P_BITS",
    "P_BYTES",
    "Fp",
]
