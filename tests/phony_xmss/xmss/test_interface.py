"""
End-to-end tests for the phony XMSS engine.
"""

import random

import pytest

from phony_xmss.koalabear import Fp
from phony_xmss.xmss.constants import PROD_CONFIG, TEST_CONFIG
from phony_xmss.xmss.containers import PublicKey, Signature
from phony_xmss.xmss.exceptions import LengthMismatchError
from phony_xmss.xmss.interface import PROD_SCHEME, TEST_SCHEME, PhonyXmssScheme
from phony_xmss.xmss.rand import Rand
from phony_xmss.xmss.types import HashTreeOpening


def _test_correctness_roundtrip(
    scheme: PhonyXmssScheme, epoch: int, message: bytes, seed: int
) -> None:
    """
    A helper to perform a full synthesize -> verify roundtrip.

    It also checks that verification fails for a tampered message or epoch.
    """
    pk, sig = scheme.synthesize(epoch, message, seed)

    assert scheme.verify(pk, epoch, message, sig), "Verification of a synthesized pair failed"
    assert sig.verify(pk, epoch, message, scheme)

    tampered_message = bytes([message[0] ^ 1]) + message[1:]
    assert not scheme.verify(pk, epoch, tampered_message, sig)

    wrong_epoch = epoch ^ 1
    if wrong_epoch < scheme.config.LIFETIME:
        assert not scheme.verify(pk, wrong_epoch, message, sig)


@pytest.mark.parametrize(
    "epoch, message, seed",
    [
        pytest.param(0, b"\x00" * 32, 0, id="epoch 0, zero message, seed 0"),
        pytest.param(2**32 - 1, b"\x00" * 32, 0, id="largest epoch", marks=pytest.mark.slow),
        pytest.param(
            2**31 + 12345, bytes(range(32)), 2**64 - 1, id="distinct bytes, largest seed"
        ),
    ],
)
def test_prod_roundtrip(epoch: int, message: bytes, seed: int) -> None:
    """Synthesized production pairs verify."""
    _test_correctness_roundtrip(PROD_SCHEME, epoch, message, seed)


@pytest.mark.parametrize(
    "epoch, message, seed",
    [
        pytest.param(0, b"\x00" * 32, 0, id="epoch 0"),
        pytest.param(TEST_CONFIG.LIFETIME - 1, b"\xff" * 32, 1, id="last epoch"),
        pytest.param(77, bytes(range(32)), 123456789, id="distinct bytes"),
    ],
)
def test_test_preset_roundtrip(epoch: int, message: bytes, seed: int) -> None:
    """Synthesized test-preset pairs verify."""
    _test_correctness_roundtrip(TEST_SCHEME, epoch, message, seed)


@pytest.mark.slow
def test_random_triples_verify() -> None:
    """1000 random (epoch, message, seed) triples all verify."""
    rng = random.Random(0xC0FFEE)
    for _ in range(1000):
        epoch = rng.randrange(TEST_CONFIG.LIFETIME)
        message = bytes(rng.randrange(256) for _ in range(TEST_CONFIG.MESSAGE_LENGTH))
        seed = rng.randrange(2**64)
        pk, sig = TEST_SCHEME.synthesize(epoch, message, seed)
        assert TEST_SCHEME.verify(pk, epoch, message, sig), (epoch, message.hex(), seed)


def test_synthesis_is_deterministic() -> None:
    """Identical inputs give byte-identical outputs."""
    first = TEST_SCHEME.synthesize(10, b"\x2a" * 32, 99)
    second = TEST_SCHEME.synthesize(10, b"\x2a" * 32, 99)
    assert first == second
    assert first[0].encode_bytes() == second[0].encode_bytes()
    assert first[1].encode_bytes() == second[1].encode_bytes()


def test_seed_sensitivity() -> None:
    """Different seeds give different roots, parameters and randomness."""
    pk_a, sig_a = TEST_SCHEME.synthesize(10, b"\x2a" * 32, 1)
    pk_b, sig_b = TEST_SCHEME.synthesize(10, b"\x2a" * 32, 2)
    assert pk_a.root != pk_b.root
    assert pk_a.parameter != pk_b.parameter
    assert sig_a.rho != sig_b.rho


def test_draw_order() -> None:
    """The parameter is drawn first, then rho, then the chain starts."""
    pk, sig = TEST_SCHEME.synthesize(0, b"\x00" * 32, 42)
    rand = Rand(TEST_CONFIG, 42)
    assert pk.parameter == rand.parameter()
    assert sig.rho == rand.rho()


def test_shapes() -> None:
    """Every vector has the length the verifier expects."""
    for scheme, config in [(TEST_SCHEME, TEST_CONFIG), (PROD_SCHEME, PROD_CONFIG)]:
        pk, sig = scheme.synthesize(3, b"\x01" * 32, 3)
        assert len(pk.root) == config.HASH_LEN_FE
        assert len(pk.parameter) == config.PARAMETER_LEN
        assert len(sig.rho) == config.RAND_LEN_FE
        assert len(sig.hashes) == config.DIMENSION
        assert len(sig.path.siblings) == config.LOG_LIFETIME
        assert all(len(d) == config.HASH_LEN_FE for d in sig.hashes + sig.path.siblings)


@pytest.mark.parametrize(
    "epoch, seed",
    [
        pytest.param(-1, 0, id="negative epoch"),
        pytest.param(TEST_CONFIG.LIFETIME, 0, id="epoch beyond lifetime"),
        pytest.param(0, -1, id="negative seed"),
        pytest.param(0, 2**64, id="seed beyond u64"),
    ],
)
def test_synthesize_rejects_out_of_range_inputs(epoch: int, seed: int) -> None:
    """Epochs and seeds outside their ranges are rejected."""
    with pytest.raises(ValueError):
        TEST_SCHEME.synthesize(epoch, b"\x00" * 32, seed)


def test_prod_rejects_epoch_beyond_u32() -> None:
    """Epochs are unsigned 32-bit integers."""
    with pytest.raises(ValueError, match="32-bit"):
        PROD_SCHEME.synthesize(2**32, b"\x00" * 32, 0)


def test_synthesize_rejects_wrong_message_length() -> None:
    """Messages must be exactly `MESSAGE_LENGTH` bytes."""
    with pytest.raises(LengthMismatchError, match="message encoding"):
        TEST_SCHEME.synthesize(0, b"\x00" * 31, 0)


def test_verify_rejects_malformed_inputs() -> None:
    """Malformed lengths make verification fail instead of raising."""
    message = b"\x05" * 32
    pk, sig = TEST_SCHEME.synthesize(4, message, 4)

    assert not TEST_SCHEME.verify(pk, 4, message[:-1], sig)
    assert not TEST_SCHEME.verify(pk, TEST_CONFIG.LIFETIME, message, sig)
    assert not TEST_SCHEME.verify(pk, -1, message, sig)

    short_pk = PublicKey(root=pk.root[:-1], parameter=pk.parameter)
    assert not TEST_SCHEME.verify(short_pk, 4, message, sig)

    short_hashes = Signature(path=sig.path, rho=sig.rho, hashes=sig.hashes[:-1])
    assert not TEST_SCHEME.verify(pk, 4, message, short_hashes)

    short_path = Signature(
        path=HashTreeOpening(siblings=sig.path.siblings[:-1]), rho=sig.rho, hashes=sig.hashes
    )
    assert not TEST_SCHEME.verify(pk, 4, message, short_path)

    bad_digest = Signature(
        path=sig.path, rho=sig.rho, hashes=[sig.hashes[0][:-1]] + sig.hashes[1:]
    )
    assert not TEST_SCHEME.verify(pk, 4, message, bad_digest)


def test_verify_rejects_tampered_hash() -> None:
    """Changing one revealed chain value breaks verification."""
    message = b"\x06" * 32
    pk, sig = TEST_SCHEME.synthesize(9, message, 9)
    hashes = list(sig.hashes)
    hashes[2] = [hashes[2][0] + Fp(value=1)] + hashes[2][1:]
    tampered = Signature(path=sig.path, rho=sig.rho, hashes=hashes)
    assert not TEST_SCHEME.verify(pk, 9, message, tampered)
