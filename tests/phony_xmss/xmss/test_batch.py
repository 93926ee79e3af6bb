"""
Tests for batch generation of verification items.
"""

import logging

import pytest

from phony_xmss.xmss.batch import (
    deterministic_message,
    generate_phony_batch,
    generate_phony_item,
)
from phony_xmss.xmss.interface import TEST_SCHEME


def test_deterministic_message() -> None:
    """Byte `k` of message `i` is `(i + k) mod 256`."""
    assert deterministic_message(0) == bytes(range(32))
    assert deterministic_message(250)[:8] == bytes([250, 251, 252, 253, 254, 255, 0, 1])
    assert len(deterministic_message(3, 16)) == 16


def test_generate_item_verifies() -> None:
    """A generated item verifies with its own key and epoch."""
    item = generate_phony_item(5, b"\x10" * 32, 5, TEST_SCHEME)
    assert item.epoch == 5
    assert item.message == b"\x10" * 32
    assert TEST_SCHEME.verify(item.public_key, item.epoch, item.message, item.signature)


def test_batch_in_process(caplog: pytest.LogCaptureFixture) -> None:
    """Item `i` is synthesized for epoch `i`, seed `i` and message `i`."""
    with caplog.at_level(logging.INFO, logger="phony_xmss.xmss.batch"):
        items = generate_phony_batch(4, max_workers=1, scheme=TEST_SCHEME)

    assert [item.epoch for item in items] == [0, 1, 2, 3]
    for index, item in enumerate(items):
        assert item.message == deterministic_message(index)
        assert item == generate_phony_item(index, deterministic_message(index), index, TEST_SCHEME)
        assert TEST_SCHEME.verify(item.public_key, item.epoch, item.message, item.signature)

    assert "Generated 4 verification items" in caplog.text


@pytest.mark.slow
def test_batch_process_pool_matches_serial() -> None:
    """The process pool produces the same items, in the same order."""
    serial = generate_phony_batch(6, max_workers=1, scheme=TEST_SCHEME)
    parallel = generate_phony_batch(6, max_workers=2, scheme=TEST_SCHEME)
    assert parallel == serial


def test_batch_edge_cases() -> None:
    """Empty batches are allowed; invalid sizes are not."""
    assert generate_phony_batch(0, max_workers=1, scheme=TEST_SCHEME) == []
    with pytest.raises(ValueError, match="non-negative"):
        generate_phony_batch(-1, scheme=TEST_SCHEME)
    with pytest.raises(ValueError, match="exceeds the lifetime"):
        generate_phony_batch(TEST_SCHEME.config.LIFETIME + 1, scheme=TEST_SCHEME)
    with pytest.raises(ValueError, match="max_workers"):
        generate_phony_batch(2, max_workers=0, scheme=TEST_SCHEME)
