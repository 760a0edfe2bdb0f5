"""
Online mean and variance accumulator.

Welford's recurrence (Knuth, TAOCP vol. 2, 3rd ed., p. 232) keeps the sum of
squared deviations directly, which stays numerically stable for the very long
histories a baseline bucket accumulates.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import Tuple


@dataclass
class RunningStat:
    """
    Incremental mean/variance of pushed values.

    mean() is 0 before the first push; variance() is Bessel-corrected and 0
    until two values have been pushed.
    """

    _n: int = 0
    _m: float = 0.0
    _s: float = 0.0

    def push(self, x: float) -> None:
        x = float(x)
        self._n += 1
        new_m = self._m + (x - self._m) / self._n
        self._s += (x - self._m) * (x - new_m)
        self._m = new_m

    def mean(self) -> float:
        return self._m if self._n > 0 else 0.0

    def variance(self) -> float:
        return self._s / (self._n - 1) if self._n > 1 else 0.0

    def stdev(self) -> float:
        return sqrt(self.variance())

    def count(self) -> int:
        return self._n

    def state(self) -> Tuple[int, float, float]:
        return self._n, self._m, self._s

    @classmethod
    def from_state(cls, n: int, m: float, s: float) -> "RunningStat":
        """Rebuild an accumulator from a persisted (n, m, s) triple."""
        n = int(n)
        if n <= 0:
            return cls()
        return cls(_n=n, _m=float(m), _s=max(float(s), 0.0))
