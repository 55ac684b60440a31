"""Tests for the derived operations on Rand."""

from __future__ import annotations

import numpy as np
import pytest

from . import rand as rand_module
from .rand import Rand
from .source import INT32_MAX, MASK63, LockedSource, RngSource


class ScriptedSource:
    """Source that replays fixed 63-bit values, for boundary cases."""

    def __init__(self, values: list[int]) -> None:
        self.values = list(values)
        self.draws = 0

    def next63(self) -> int:
        self.draws += 1
        return self.values.pop(0)

    def next64(self) -> int:
        return self.next63()

    def reseed(self, seed: int) -> None:
        pass


def _twins(seed: int = 1) -> tuple[Rand, RngSource]:
    return Rand(RngSource(seed)), RngSource(seed)


# --- raw accessors ---


def test_default_source_is_seed_one():
    assert Rand().int64() == 5577006791947779410


def test_int32_uint32_shift_one_draw():
    r, twin = _twins()
    for _ in range(200):
        assert r.int32() == twin.next63() >> 32
        assert r.uint32() == twin.next63() >> 31


def test_int32_seed1_first():
    assert Rand(RngSource(1)).int32() == 1298498081


def test_uint64_low_bits_match_int64():
    a = Rand(RngSource(1))
    b = Rand(RngSource(1))
    for _ in range(100):
        assert a.uint64() & MASK63 == b.int64()


def test_seed_resets_source():
    r = Rand(RngSource(77))
    r.int64()
    r.seed(1)
    assert r.int64() == 5577006791947779410


# --- bounded integers ---


def test_first_bounded_values_seed1():
    assert Rand(RngSource(1)).int32n(100) == 81
    assert Rand(RngSource(1)).int64n(100) == 10


@pytest.mark.parametrize("n", [0, -1, -100, INT32_MAX + 1])
def test_int32n_rejects_bad_bound(n):
    r = Rand(RngSource(1))
    with pytest.raises(ValueError):
        r.int32n(n)
    # No draw consumed
    assert r.int64() == 5577006791947779410


@pytest.mark.parametrize("n", [0, -1, MASK63 + 1])
def test_int64n_rejects_bad_bound(n):
    r = Rand(RngSource(1))
    with pytest.raises(ValueError):
        r.int64n(n)
    assert r.int64() == 5577006791947779410


@pytest.mark.parametrize("n", [0, -5])
def test_intn_rejects_bad_bound(n):
    with pytest.raises(ValueError):
        Rand(RngSource(1)).intn(n)


@pytest.mark.parametrize(
    "n", [1, 2, 3, 7, 10, 100, 1000003, 1 << 30, (1 << 30) + 1, INT32_MAX]
)
def test_int32n_in_range(n):
    r = Rand(RngSource(n))
    for _ in range(500):
        v = r.int32n(n)
        assert 0 <= v < n


@pytest.mark.parametrize(
    "n", [1, 3, 100, 1 << 40, (1 << 62) + 1, 1000000000000000007, MASK63]
)
def test_int64n_in_range(n):
    r = Rand(RngSource(n % 1000))
    for _ in range(500):
        v = r.int64n(n)
        assert 0 <= v < n


def test_power_of_two_masks_single_draw():
    r, twin = _twins(5)
    for _ in range(100):
        assert r.int32n(16) == (twin.next63() >> 32) & 15
        assert r.int64n(1 << 40) == twin.next63() & ((1 << 40) - 1)


def test_int32n_one_consumes_a_draw():
    r, twin = _twins()
    assert r.int32n(1) == 0
    twin.next63()
    assert r.int64() == twin.next63()


def test_int32n_rejects_above_largest_multiple():
    """n = 2**30 + 1 rejects roughly half of all draws."""
    n = (1 << 30) + 1
    limit = INT32_MAX - (1 << 31) % n
    assert limit == 1 << 30

    r, twin = _twins(11)
    rejected = 0
    for _ in range(200):
        v = twin.next63() >> 32
        while v > limit:
            rejected += 1
            v = twin.next63() >> 32
        assert r.int32n(n) == v % n
    assert rejected > 0


def test_int64n_rejects_above_largest_multiple():
    n = (1 << 62) + 1
    limit = MASK63 - (1 << 63) % n
    r, twin = _twins(13)
    for _ in range(200):
        v = twin.next63()
        while v > limit:
            v = twin.next63()
        assert r.int64n(n) == v % n


def test_power_of_two_uniform_chi_square():
    r = Rand(RngSource(2024))
    n = 8
    draws = 80000
    counts = [0] * n
    for _ in range(draws):
        counts[r.int32n(n)] += 1
    expected = draws / n
    chi2 = sum((c - expected) ** 2 / expected for c in counts)
    # df=7; 99.99th percentile is ~29.9
    assert chi2 < 29.9


def test_non_power_of_two_uniform_chi_square():
    r = Rand(RngSource(2025))
    n = 10
    draws = 100000
    counts = [0] * n
    for _ in range(draws):
        counts[r.int64n(n)] += 1
    expected = draws / n
    chi2 = sum((c - expected) ** 2 / expected for c in counts)
    # df=9; 99.99th percentile is ~33.7
    assert chi2 < 33.7


def test_intn_dispatches_on_width():
    a = Rand(RngSource(1))
    b = Rand(RngSource(1))
    assert a.intn(100) == b.int32n(100)
    assert a.intn(1 << 40) == b.int64n(1 << 40)
    assert a.intn(INT32_MAX) == b.int32n(INT32_MAX)


# --- floats ---


def test_float64_in_unit_interval():
    r = Rand(RngSource(3))
    for _ in range(10000):
        f = r.float64()
        assert 0.0 <= f < 1.0


def test_float64_seed1_first():
    assert Rand(RngSource(1)).float64() == 0.6046602879796196


def test_float64_redraws_on_one():
    # 2**63 - 1 rounds to 2**63 in double precision
    src = ScriptedSource([MASK63, 0])
    assert Rand(src).float64() == 0.0
    assert src.draws == 2


def test_float32_is_rounded_float64():
    a = Rand(RngSource(8))
    b = Rand(RngSource(8))
    for _ in range(1000):
        f = a.float32()
        assert f == float(np.float32(b.float64()))
        assert 0.0 <= f < 1.0


def test_float32_redraws_when_rounding_to_one():
    # 1 - 2**-26 is below 1.0 in double but rounds to 1.0 in single
    src = ScriptedSource([(1 << 63) - (1 << 37), 1 << 62])
    assert Rand(src).float32() == 0.5
    assert src.draws == 2


# --- shuffle and perm ---


def test_shuffle_is_permutation():
    r = Rand(RngSource(4))
    items = list(range(100))
    r.shuffle(items)
    assert sorted(items) == list(range(100))
    assert items != list(range(100))


def test_shuffle_seed1_reference():
    r = Rand(RngSource(1))
    items = list(range(1, 21))
    r.shuffle(items)
    assert items == [
        13, 16, 9, 11, 6, 10, 14, 3, 8, 18, 7, 5, 1, 19, 4, 20, 17, 12, 15, 2
    ]


@pytest.mark.parametrize("items", [[], ["only"]])
def test_shuffle_short_sequences_draw_nothing(items):
    r, twin = _twins()
    before = list(items)
    r.shuffle(items)
    assert items == before
    assert r.int64() == twin.next63()


def test_shuffle_uses_int32n_per_index():
    r = Rand(RngSource(6))
    twin = Rand(RngSource(6))
    items = list(range(10))
    r.shuffle(items)

    expected = list(range(10))
    for i in range(9, 0, -1):
        j = twin.int32n(i + 1)
        expected[i], expected[j] = expected[j], expected[i]
    assert items == expected


def test_shuffle_large_index_branch_uses_int64n(monkeypatch):
    monkeypatch.setattr(rand_module, "_SHUFFLE_INT64_ABOVE", 5)
    r = Rand(RngSource(6))
    twin = Rand(RngSource(6))
    items = list(range(10))
    r.shuffle(items)

    expected = list(range(10))
    for i in range(9, 0, -1):
        j = twin.int64n(i + 1) if i > 5 else twin.int32n(i + 1)
        expected[i], expected[j] = expected[j], expected[i]
    assert items == expected


def test_shuffle_int32_branch_covers_every_int32n_bound():
    assert rand_module._SHUFFLE_INT64_ABOVE == (1 << 31) - 2
    # The largest index on the int32n branch still has a valid bound
    r = Rand(RngSource(1))
    assert 0 <= r.int32n(rand_module._SHUFFLE_INT64_ABOVE + 1) <= INT32_MAX


def test_perm():
    r = Rand(RngSource(1))
    assert r.perm(10) == [9, 4, 2, 6, 8, 0, 3, 1, 7, 5]
    assert r.perm(0) == []
    p = r.perm(50)
    assert sorted(p) == list(range(50))


def test_perm_rejects_negative():
    with pytest.raises(ValueError):
        Rand(RngSource(1)).perm(-1)


# --- source independence ---


def test_locked_and_unlocked_rand_agree():
    a = Rand(RngSource(31))
    b = Rand(LockedSource(seed=31))
    for _ in range(100):
        assert a.int32n(1000) == b.int32n(1000)
        assert a.float64() == b.float64()
        assert a.uint64() == b.uint64()
