"""
This package synthesizes Winternitz/XMSS public keys and signatures that a
standard verifier accepts, without generating secret keys or full trees.

It exposes the data containers, the engine and the batch helpers.
"""

from .batch import deterministic_message, generate_phony_batch, generate_phony_item
from .constants import PROD_CONFIG, TARGET_CONFIG, TEST_CONFIG, XmssConfig
from .containers import PublicKey, Signature, VerificationItem
from .exceptions import ConfigurationError, LengthMismatchError, SynthesisError
from .interface import PROD_SCHEME, TARGET_SCHEME, TEST_SCHEME, PhonyXmssScheme
from .types import HashTreeOpening

__all__ = [
    "PhonyXmssScheme",
    "PublicKey",
    "Signature",
    "VerificationItem",
    "HashTreeOpening",
    "XmssConfig",
    "PROD_CONFIG",
    "TEST_CONFIG",
    "TARGET_CONFIG",
    "PROD_SCHEME",
    "TEST_SCHEME",
    "TARGET_SCHEME",
    "SynthesisError",
    "LengthMismatchError",
    "ConfigurationError",
    "deterministic_message",
    "generate_phony_item",
    "generate_phony_batch",
]
