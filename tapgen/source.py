"""Raw integer sources: the additive tap generator and its locked wrapper.

The generator is the Mitchell/Reeds additive lagged-Fibonacci scheme: a
607-word feedback register with two read positions 273 words apart. Each
draw adds the words under ``feed`` and ``tap``, writes the sum back at
``feed`` and returns it.

Two sharing disciplines are provided:
- ``RngSource`` is unsynchronized and must have exactly one owner at a
  time (one per thread, or guarded by the caller).
- ``LockedSource`` wraps any ``Source`` and holds a lock for the duration
  of each state mutation, so one instance can be shared between threads.

Both produce the same sequence for the same seed; ``LockedSource`` adds no
draws of its own.
"""

from __future__ import annotations

import threading
from typing import Protocol

from .cooked import RNG_COOKED

RNG_LEN = 607
RNG_TAP = 273

MASK63 = (1 << 63) - 1
MASK64 = (1 << 64) - 1
INT32_MAX = (1 << 31) - 1

# Substitute for seeds that reduce to 0 mod INT32_MAX; Park-Miller has a
# fixed point at 0.
_ZERO_SEED = 89482311

# Park-Miller multiplier with Schrage's decomposition (M = A*Q + R).
_SEED_A = 48271
_SEED_Q = 44488
_SEED_R = 3399

# Auxiliary outputs discarded before the first table word is built.
_WARMUP = 20

_COOKED_U64 = tuple(v & MASK64 for v in RNG_COOKED)


class Source(Protocol):
    def next63(self) -> int:
        """Next value in [0, 2**63)."""
        ...

    def next64(self) -> int:
        """Next value in [0, 2**64)."""
        ...

    def reseed(self, seed: int) -> None:
        """Reset to the deterministic state for ``seed``."""
        ...


def to_int64(value: int) -> int:
    """Wrap an arbitrary Python int to a signed 64-bit value."""
    value &= MASK64
    if value >> 63:
        value -= 1 << 64
    return value


def _seedrand(x: int) -> int:
    """One step of x <- 48271 * x mod (2**31 - 1)."""
    hi = x // _SEED_Q
    lo = x % _SEED_Q
    x = _SEED_A * lo - _SEED_R * hi
    if x < 0:
        x += INT32_MAX
    return x


def _reduce_seed(seed: int) -> int:
    seed = to_int64(seed) % INT32_MAX
    if seed == 0:
        seed = _ZERO_SEED
    return seed


def _build_table(seed: int) -> list[int]:
    """Park-Miller bootstrap for a seed already reduced to [1, 2**31 - 2].

    After ``_WARMUP`` discarded steps, each word is assembled from three
    consecutive outputs and XORed with the cooked word at that index.
    """
    vec = [0] * RNG_LEN
    x = seed
    for i in range(-_WARMUP, RNG_LEN):
        x = _seedrand(x)
        if i >= 0:
            u = (x << 40) & MASK64
            x = _seedrand(x)
            u ^= x << 20
            x = _seedrand(x)
            u ^= x
            vec[i] = u ^ _COOKED_U64[i]
    return vec


# Register for the default seed, copied on every reseed to it.
_DEFAULT_TABLE = tuple(_build_table(1))


def bootstrap_table(seed: int) -> list[int]:
    """Build the initial feedback register for ``seed``.

    The seed is reduced mod 2**31 - 1. Seeds reducing to 1 copy a
    precomputed register; others run the Park-Miller bootstrap.
    """
    seed = _reduce_seed(seed)
    if seed == 1:
        return list(_DEFAULT_TABLE)
    return _build_table(seed)


class RngSource:
    """Unsynchronized tap generator.

    Not safe for concurrent use: share it between threads only through
    ``LockedSource``.
    """

    __slots__ = ("_tap", "_feed", "_vec")

    def __init__(self, seed: int = 1) -> None:
        self._tap = 0
        self._feed = RNG_LEN - RNG_TAP
        self._vec: list[int] = []
        self.reseed(seed)

    def reseed(self, seed: int) -> None:
        self._tap = 0
        self._feed = RNG_LEN - RNG_TAP
        self._vec = bootstrap_table(seed)

    def next64(self) -> int:
        tap = self._tap - 1
        if tap < 0:
            tap += RNG_LEN
        feed = self._feed - 1
        if feed < 0:
            feed += RNG_LEN
        self._tap = tap
        self._feed = feed

        vec = self._vec
        x = (vec[feed] + vec[tap]) & MASK64
        vec[feed] = x
        return x

    def next63(self) -> int:
        return self.next64() & MASK63

    @classmethod
    def from_state(
        cls, vec: list[int], tap: int = 0, feed: int = RNG_LEN - RNG_TAP
    ) -> RngSource:
        """Generator over an explicit register, bypassing the bootstrap."""
        if len(vec) != RNG_LEN:
            raise ValueError(
                f"register must hold {RNG_LEN} words, got {len(vec)}"
            )
        src = cls.__new__(cls)
        src._tap = tap % RNG_LEN
        src._feed = feed % RNG_LEN
        src._vec = [v & MASK64 for v in vec]
        return src

    def state(self) -> tuple[int, int, list[int]]:
        """(tap, feed, copy of the register)."""
        return self._tap, self._feed, list(self._vec)

    def clone(self) -> RngSource:
        """Independent copy positioned at the same point in the stream."""
        tap, feed, vec = self.state()
        return RngSource.from_state(vec, tap, feed)


class LockedSource:
    """Mutex-guarded decorator over another ``Source``.

    Every call holds the lock only while the wrapped source mutates its
    state. Draws from several threads serialize into one sequence
    identical to single-threaded draws from the same seed; which thread
    receives which value is unspecified.
    """

    def __init__(self, inner: Source | None = None, seed: int = 1) -> None:
        self._inner: Source = inner if inner is not None else RngSource(seed)
        self._lock = threading.Lock()

    def next63(self) -> int:
        with self._lock:
            return self._inner.next63()

    def next64(self) -> int:
        with self._lock:
            return self._inner.next64()

    def reseed(self, seed: int) -> None:
        with self._lock:
            self._inner.reseed(seed)
