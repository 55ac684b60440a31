"""Zipf-distributed integers by rejection-inversion.

W. Hormann, G. Derflinger, "Rejection-Inversion to Generate Variates from
Monotone Discrete Distributions" (1996). Draws k in [0, v) with
P(k) proportional to (offset + k) ** -s.

Each draw loops until acceptance with no iteration cap; for valid parameters
the loop terminates almost surely.

The arithmetic follows IEEE semantics: log(0) is -inf and an overflowing exp
is +inf, so very large exponents (where every term past rank 0 underflows)
still construct and draw rank 0. If offset ** -s itself underflows there is
no representable mass left and draw never returns. Exponents within a few
ulps of 1 lose precision in 1 - s, and draws may then fall outside [0, v);
keep s - 1 well above machine epsilon.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .rand import Rand


def _log(x: float) -> float:
    # log(0) is -inf; math.log raises instead.
    if x == 0.0:
        return -math.inf
    return math.log(x)


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


class Zipf:
    def __init__(
        self, rand: Rand, s: float, v: int, offset: float = 1.0
    ) -> None:
        """
        Args:
            rand: Uniform source consumed by ``draw``.
            s: Exponent, must be > 1.
            v: Domain size, must be >= 1; draws fall in [0, v).
            offset: Added to each rank before exponentiation, must be >= 1.

        Raises:
            ValueError: On any out-of-range parameter.
        """
        if not s > 1.0:
            raise ValueError(f"zipf exponent must be > 1, got {s}")
        if v < 1:
            raise ValueError(f"zipf domain size must be >= 1, got {v}")
        if not offset >= 1.0:
            raise ValueError(f"zipf offset must be >= 1, got {offset}")

        self.rand = rand
        self.s = float(s)
        self.v = int(v)
        self.offset = float(offset)

        self._imax = float(self.v - 1)
        self._one_minus_q = 1.0 - self.s
        self._one_minus_q_inv = 1.0 / self._one_minus_q
        self._hxm = self._h(self._imax + 0.5)
        self._hx0_minus_hxm = (
            self._h(0.5)
            - _exp(_log(self.offset) * -self.s)
            - self._hxm
        )
        self._squeeze = 1.0 - self._hinv(
            self._h(1.5) - _exp(-self.s * _log(self.offset + 1.0))
        )

    def _h(self, x: float) -> float:
        return (
            _exp(self._one_minus_q * _log(self.offset + x))
            * self._one_minus_q_inv
        )

    def _hinv(self, x: float) -> float:
        return (
            _exp(self._one_minus_q_inv * _log(self._one_minus_q * x))
            - self.offset
        )

    def draw(self) -> int:
        while True:
            ur = self._hxm + self.rand.float64() * self._hx0_minus_hxm
            x = self._hinv(ur)
            if not math.isfinite(x):
                continue
            k = math.floor(x + 0.5)
            if k - x <= self._squeeze:
                return int(k)
            if ur >= self._h(k + 0.5) - _exp(
                -_log(k + self.offset) * self.s
            ):
                return int(k)
