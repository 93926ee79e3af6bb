"""
Tests for the message hash feeding the Winternitz encoding.
"""

import pytest

from phony_xmss.koalabear import Fp, P
from phony_xmss.xmss.constants import NODE_HASH_WIDTH, PROD_CONFIG, TEST_CONFIG
from phony_xmss.xmss.exceptions import LengthMismatchError
from phony_xmss.xmss.message_hash import PROD_MESSAGE_HASHER, TEST_MESSAGE_HASHER
from phony_xmss.xmss.poseidon import POSEIDON
from phony_xmss.xmss.utils import decode_digest_to_digits

PARAMETER = [Fp(value=11 * (i + 1)) for i in range(5)]
RHO = [Fp(value=7 * (i + 1)) for i in range(5)]
MESSAGE = bytes(range(32))


def test_encode_message_length() -> None:
    """Messages become `MSG_LEN_FE` little-endian base-P limbs."""
    limbs = TEST_MESSAGE_HASHER.encode_message(MESSAGE)
    assert len(limbs) == TEST_CONFIG.MSG_LEN_FE
    assert sum(fe.value * P**i for i, fe in enumerate(limbs)) == int.from_bytes(
        MESSAGE, "little"
    )


@pytest.mark.parametrize("length", [0, 31, 33])
def test_encode_message_rejects_wrong_length(length: int) -> None:
    """Only `MESSAGE_LENGTH`-byte messages are accepted."""
    with pytest.raises(LengthMismatchError, match="message encoding"):
        TEST_MESSAGE_HASHER.encode_message(b"\x00" * length)


def test_encode_epoch() -> None:
    """The epoch is tagged with the message separator."""
    assert TEST_MESSAGE_HASHER.encode_epoch(1) == [Fp(value=0x102), Fp(value=0)]


def test_apply_matches_construction() -> None:
    """The digits come from compressing `rho || parameter || epoch || message`."""
    epoch = 42
    combined = (
        RHO
        + PARAMETER
        + TEST_MESSAGE_HASHER.encode_epoch(epoch)
        + TEST_MESSAGE_HASHER.encode_message(MESSAGE)
    )
    digest = POSEIDON.compress(combined, NODE_HASH_WIDTH, TEST_CONFIG.HASH_LEN_FE)
    expected = decode_digest_to_digits(digest, TEST_CONFIG.NUM_CHUNKS, TEST_CONFIG.BASE)

    assert TEST_MESSAGE_HASHER.apply(PARAMETER, epoch, RHO, MESSAGE) == expected


def test_apply_digit_ranges() -> None:
    """Production digits are bits, test digits are base-4."""
    prod = PROD_MESSAGE_HASHER.apply(PARAMETER, 0, RHO, MESSAGE)
    assert len(prod) == PROD_CONFIG.NUM_CHUNKS
    assert set(prod) <= {0, 1}

    test = TEST_MESSAGE_HASHER.apply(PARAMETER, 0, RHO, MESSAGE)
    assert len(test) == TEST_CONFIG.NUM_CHUNKS
    assert all(0 <= d < 4 for d in test)


def test_apply_depends_on_every_input() -> None:
    """Changing rho, parameter, epoch or message changes the digits."""
    base = PROD_MESSAGE_HASHER.apply(PARAMETER, 0, RHO, MESSAGE)
    other_rho = [RHO[0] + Fp(value=1)] + RHO[1:]
    other_parameter = [PARAMETER[0] + Fp(value=1)] + PARAMETER[1:]
    other_message = b"\x01" + MESSAGE[1:]

    assert PROD_MESSAGE_HASHER.apply(PARAMETER, 0, other_rho, MESSAGE) != base
    assert PROD_MESSAGE_HASHER.apply(other_parameter, 0, RHO, MESSAGE) != base
    assert PROD_MESSAGE_HASHER.apply(PARAMETER, 1, RHO, MESSAGE) != base
    assert PROD_MESSAGE_HASHER.apply(PARAMETER, 0, RHO, other_message) != base


def test_apply_rejects_wrong_rho_and_parameter() -> None:
    """Randomness and parameter lengths are checked."""
    with pytest.raises(LengthMismatchError, match="rho"):
        TEST_MESSAGE_HASHER.apply(PARAMETER, 0, RHO[:4], MESSAGE)
    with pytest.raises(LengthMismatchError, match="parameter"):
        TEST_MESSAGE_HASHER.apply(PARAMETER[:4], 0, RHO, MESSAGE)
