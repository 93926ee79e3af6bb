"""
Batch generation of verification items for benchmarks.

Item `i` of a batch is synthesized for epoch `i`, seed `i` and the message
`deterministic_message(i)`, so a batch depends only on its size and preset.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import List

from .containers import VerificationItem
from .interface import TARGET_SCHEME, PhonyXmssScheme

logger = logging.getLogger(__name__)


def deterministic_message(index: int, length: int = 32) -> bytes:
    """
    Builds the benchmark message for item `index`.

    Byte `k` is `(index + k) mod 256`.

    >>> deterministic_message(255, 3)
    b'\\xff\\x00\\x01'
    """
    return bytes((index + k) % 256 for k in range(length))


def generate_phony_item(
    epoch: int, message: bytes, seed: int, scheme: PhonyXmssScheme = TARGET_SCHEME
) -> VerificationItem:
    """Synthesizes one key/signature pair and wraps it into a verification item."""
    public_key, signature = scheme.synthesize(epoch, message, seed)
    return VerificationItem(
        message=message, epoch=epoch, signature=signature, public_key=public_key
    )


def _generate_indexed_item(scheme: PhonyXmssScheme, index: int) -> VerificationItem:
    """Generate item `index` (module-level for pickling in ProcessPoolExecutor)."""
    message = deterministic_message(index, scheme.config.MESSAGE_LENGTH)
    item = generate_phony_item(index, message, index, scheme)
    logger.debug("Generated item #%d", index)
    return item


def generate_phony_batch(
    count: int,
    max_workers: int | None = None,
    scheme: PhonyXmssScheme = TARGET_SCHEME,
) -> List[VerificationItem]:
    """
    Generates `count` verification items, in index order.

    Items are independent, so they are spread over a process pool. Passing
    `max_workers=1` keeps everything in the calling process.

    Args:
        count: Number of items to generate.
        max_workers: Pool size, defaulting to the number of CPU cores.
        scheme: The engine instance to synthesize with.

    Returns:
        The items, item `i` bound to epoch `i`.

    Raises:
        ValueError: If `count` is negative or exceeds the scheme's lifetime.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if count > scheme.config.LIFETIME:
        raise ValueError(f"count {count} exceeds the lifetime of {scheme.config.LIFETIME}")

    num_workers = max_workers if max_workers is not None else (os.cpu_count() or 1)
    if num_workers < 1:
        raise ValueError(f"max_workers must be positive, got {num_workers}")

    worker_func = partial(_generate_indexed_item, scheme)
    if num_workers == 1 or count <= 1:
        items = [worker_func(index) for index in range(count)]
    else:
        with ProcessPoolExecutor(max_workers=num_workers) as executor:
            items = list(executor.map(worker_func, range(count)))

    logger.info("Generated %d verification items using %d workers", len(items), num_workers)
    return items
