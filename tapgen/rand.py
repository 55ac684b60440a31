"""Derived random values built on any ``Source``.

``Rand`` owns one source and holds no other state, so every operation here
is a pure function of the source's stream. Bit layouts, rejection bounds
and draw counts follow the reference generator exactly; changing any of
them changes downstream sequences.
"""

from __future__ import annotations

from typing import Any, MutableSequence

import numpy as np

from .normal import Normal
from .source import INT32_MAX, MASK63, RngSource, Source
from .zipf import Zipf

_TWO63 = float(1 << 63)

# Above this index shuffle reduces with int64n; below it, int32n. The
# threshold is 2**31 - 2, the largest index whose bound i + 1 int32n accepts.
_SHUFFLE_INT64_ABOVE = INT32_MAX - 1


class Rand:
    """Random values derived from one ``Source``.

    Safe to share between threads exactly when its source is (a
    ``LockedSource``). Over an ``RngSource`` keep one owner per ``Rand``.
    """

    def __init__(self, src: Source | None = None) -> None:
        self.src: Source = src if src is not None else RngSource(1)

    def seed(self, seed: int) -> None:
        """Reset the source to the deterministic state for ``seed``."""
        self.src.reseed(seed)

    def int64(self) -> int:
        """Non-negative 63-bit integer."""
        return self.src.next63()

    def uint64(self) -> int:
        """Unsigned 64-bit integer."""
        return self.src.next64()

    def int32(self) -> int:
        """Non-negative 31-bit integer (top bits of one 63-bit draw)."""
        return self.src.next63() >> 32

    def uint32(self) -> int:
        """Unsigned 32-bit integer (top bits of one 63-bit draw)."""
        return self.src.next63() >> 31

    def int32n(self, n: int) -> int:
        """Uniform integer in [0, n) for 0 < n <= 2**31 - 1.

        Powers of two are masked from a single draw. Otherwise draws above
        the largest multiple of n are rejected, so there is no modulo bias.
        """
        if n <= 0 or n > INT32_MAX:
            raise ValueError(f"invalid argument to int32n: {n}")
        if n & (n - 1) == 0:
            return self.int32() & (n - 1)
        limit = INT32_MAX - (1 << 31) % n
        v = self.int32()
        while v > limit:
            v = self.int32()
        return v % n

    def int64n(self, n: int) -> int:
        """Uniform integer in [0, n) for 0 < n <= 2**63 - 1."""
        if n <= 0 or n > MASK63:
            raise ValueError(f"invalid argument to int64n: {n}")
        if n & (n - 1) == 0:
            return self.int64() & (n - 1)
        limit = MASK63 - (1 << 63) % n
        v = self.int64()
        while v > limit:
            v = self.int64()
        return v % n

    def intn(self, n: int) -> int:
        """Uniform integer in [0, n), using the 31-bit reducer when n fits."""
        if n <= 0:
            raise ValueError(f"invalid argument to intn: {n}")
        if n <= INT32_MAX:
            return self.int32n(n)
        return self.int64n(n)

    def float64(self) -> float:
        """Float in [0.0, 1.0); a draw that rounds up to 1.0 is redrawn."""
        while True:
            f = float(self.int64()) / _TWO63
            if f != 1.0:
                return f

    def float32(self) -> float:
        """``float64()`` rounded to single precision, still in [0.0, 1.0)."""
        while True:
            f = np.float32(self.float64())
            if f != 1.0:
                return float(f)

    def shuffle(self, seq: MutableSequence[Any]) -> None:
        """Fisher-Yates shuffle in place, walking the index down to 1.

        Sequences of length 0 or 1 are left alone and consume no draws.
        """
        i = len(seq) - 1
        while i > _SHUFFLE_INT64_ABOVE:
            j = self.int64n(i + 1)
            seq[i], seq[j] = seq[j], seq[i]
            i -= 1
        while i > 0:
            j = self.int32n(i + 1)
            seq[i], seq[j] = seq[j], seq[i]
            i -= 1

    def perm(self, n: int) -> list[int]:
        """Random permutation of range(n) (inside-out Fisher-Yates)."""
        if n < 0:
            raise ValueError(f"invalid argument to perm: {n}")
        m = [0] * n
        for i in range(n):
            j = self.intn(i + 1)
            m[i] = m[j]
            m[j] = i
        return m

    def new_normal(self) -> Normal:
        return Normal(self)

    def new_zipf(self, s: float, v: int, offset: float = 1.0) -> Zipf:
        return Zipf(self, s, v, offset)

    def norm_float64(self) -> float:
        """One standard-normal draw."""
        return self.new_normal().draw()
