"""Exception hierarchy for the phony XMSS engine."""

from __future__ import annotations


class SynthesisError(Exception):
    """
    Base exception for all engine errors.

    The engine has no untrusted input: every error signals a programming or
    configuration mistake and recurs identically on retry.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class LengthMismatchError(SynthesisError):
    """
    Raised when a vector or byte string does not have the length a stage requires.

    Attributes:
        stage: The pipeline stage that detected the mismatch.
        expected: Description of the expected length or bound.
        actual: The observed length.
    """

    def __init__(self, stage: str, *, expected: int | str, actual: int) -> None:
        self.stage = stage
        self.expected = expected
        self.actual = actual
        super().__init__(f"{stage}: expected length {expected}, got {actual}")


class ConfigurationError(SynthesisError):
    """
    Raised when a parameter preset cannot produce verifiable output.

    Attributes:
        detail: Which constraint of the preset is violated.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid XMSS configuration: {detail}")
