"""Operating-system entropy for picking non-deterministic seeds.

Only consulted to choose a seed; generators never read from it mid-stream.
"""

from __future__ import annotations

import logging
import os

from .source import to_int64

logger = logging.getLogger(__name__)


class EntropyUnavailableError(OSError):
    """The OS random device could not be read."""


def fill(buf: bytearray | memoryview) -> int:
    """Fill ``buf`` with random bytes from the OS. Returns the byte count."""
    n = len(buf)
    try:
        data = os.urandom(n)
    except NotImplementedError as e:
        raise EntropyUnavailableError("no OS randomness source") from e
    except OSError as e:
        raise EntropyUnavailableError(
            f"reading {n} bytes of OS randomness failed: {e}"
        ) from e
    buf[:] = data
    return n


def random_seed() -> int:
    """Signed 64-bit seed drawn from OS entropy."""
    buf = bytearray(8)
    fill(buf)
    return to_int64(int.from_bytes(buf, "little"))


def seed_from_entropy(fallback: int | None = None) -> int:
    """Entropy seed, or ``fallback`` if entropy is unavailable.

    Without a fallback the ``EntropyUnavailableError`` propagates.
    """
    try:
        return random_seed()
    except EntropyUnavailableError:
        if fallback is None:
            raise
        logger.warning(
            "OS entropy unavailable; seeding with fallback %d", fallback
        )
        return fallback
