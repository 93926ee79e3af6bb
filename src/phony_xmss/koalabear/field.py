"""
Arithmetic in the KoalaBear prime field.

Every hash input and output of the engine is a vector of these elements. The
modulus `P = 2^31 - 2^24 + 1` satisfies `gcd(3, P - 1) = 1`, so cubing is a
bijection and serves as the Poseidon2 S-box.
"""

from typing import Self

from pydantic import Field, field_validator

from phony_xmss.types import StrictBaseModel

P: int = 2**31 - 2**24 + 1
"""The KoalaBear modulus."""

P_BITS: int = P.bit_length()
"""Bit length of the modulus (31)."""

P_BYTES: int = (P_BITS + 7) // 8
"""Width of the fixed-size little-endian encoding (4 bytes)."""


def _as_int(operand: "Fp | int") -> int:
    return operand.value if isinstance(operand, Fp) else operand


class Fp(StrictBaseModel):
    """
    A KoalaBear field element in canonical form.

    Construction reduces any integer modulo `P`, so `Fp(value=-1)` is `P - 1`.
    Arithmetic accepts another element or a plain integer on either side.
    """

    value: int = Field(ge=0, lt=P, description="Canonical representative in [0, P)")

    @field_validator("value", mode="before")
    @classmethod
    def canonicalize(cls, v: int) -> int:
        """Maps any integer to its canonical representative."""
        return v % P

    def __add__(self, other: "Fp | int") -> Self:
        return type(self)(value=self.value + _as_int(other))

    __radd__ = __add__

    def __sub__(self, other: "Fp | int") -> Self:
        return type(self)(value=self.value - _as_int(other))

    def __rsub__(self, other: int) -> Self:
        return type(self)(value=other - self.value)

    def __neg__(self) -> Self:
        return type(self)(value=-self.value)

    def __mul__(self, other: "Fp | int") -> Self:
        return type(self)(value=self.value * _as_int(other))

    __rmul__ = __mul__

    def __pow__(self, exponent: int) -> Self:
        return type(self)(value=pow(self.value, exponent, P))

    def inverse(self) -> Self:
        """
        Returns the multiplicative inverse.

        Raises:
            ZeroDivisionError: For the zero element.
        """
        if self.value == 0:
            raise ZeroDivisionError("zero has no inverse in Fp")
        return type(self)(value=pow(self.value, -1, P))

    def __truediv__(self, other: "Fp | int") -> Self:
        return self * type(self)(value=_as_int(other)).inverse()

    def __int__(self) -> int:
        return self.value

    def __bytes__(self) -> bytes:
        """The 4-byte little-endian encoding."""
        return self.value.to_bytes(P_BYTES, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Parses the 4-byte little-endian encoding.

        Raises:
            ValueError: If `data` is not 4 bytes or holds a value `>= P`.
        """
        if len(data) != P_BYTES:
            raise ValueError(f"field element needs {P_BYTES} bytes, got {len(data)}")
        value = int.from_bytes(data, "little")
        if value >= P:
            raise ValueError(f"non-canonical field element 0x{value:08x} (modulus 0x{P:08x})")
        return cls(value=value)

    def to_bincode_bytes(self) -> bytes:
        """The bincode form: the canonical value as a fixed-width `u32`."""
        from phony_xmss.xmss import bincode

        return bincode.encode_u32(self.value)

    @classmethod
    def from_bincode_bytes(cls, data: bytes, offset: int = 0) -> tuple[Self, int]:
        """
        Parses one element from its bincode `u32` at `offset`.

        Returns:
            The element and the number of bytes consumed.

        Raises:
            ValueError: If fewer than 4 bytes remain or the value is `>= P`.
        """
        from phony_xmss.xmss import bincode

        value, consumed = bincode.decode_u32(data, offset)
        if value >= P:
            raise ValueError(f"non-canonical field element {value} (modulus {P})")
        return cls(value=value), consumed
