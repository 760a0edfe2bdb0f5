"""
Expected business level at a given moment.

Two interchangeable strategies:

- NeighborInterpolationEstimator blends the current hour's bucket with the
  closer adjacent hour, wrapping across midnight into the neighboring day's
  weekday/weekend class.
- SpectralSmoothingEstimator treats the 24 hourly means (and stdevs) as a
  periodic signal, keeps only the low harmonics, and evaluates the smoothed
  curve at the exact fractional hour.

Both fall back to overall statistics when the hourly buckets are too sparse,
and to an artificially high sentinel during cold start so nothing can fire.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Tuple

import numpy as np

from magnetophon.core.config import EstimatorConfig
from magnetophon.core.exceptions import ConfigurationError

from .curve import HOURS_PER_DAY, BaselineBusinessCurve, is_weekend, weekday_index
from .schema import BaselineEstimate, EstimateSource

logger = logging.getLogger(__name__)


def neighbor_bucket(wday: int, hour: int, minute: int) -> Tuple[int, int, float]:
    """
    Pick the interpolation neighbor of bucket (wday, hour).

    Returns (neighbor_wday, neighbor_hour, weight_a) where weight_a is the
    weight of the current bucket; the neighbor gets 1 - weight_a.
    """
    if minute >= 30:
        weight_a = (90.0 - minute) / 60
        if hour == HOURS_PER_DAY - 1:
            return (wday + 1) % 7, 0, weight_a
        return wday, hour + 1, weight_a

    weight_a = (31.0 + minute) / 60
    if hour == 0:
        return (wday - 1) % 7, HOURS_PER_DAY - 1, weight_a
    return wday, hour - 1, weight_a


class BaselineEstimator(ABC):
    """
    Base class holding the shared fallback chain.
    """

    method: str = ""

    def __init__(
        self,
        min_bucket_observations: int = 1,
        min_coverage_seconds: float = 3600.0,
        sentinel_value: float = 1e9,
    ) -> None:
        self.min_bucket_observations = min_bucket_observations
        self.min_coverage_seconds = min_coverage_seconds
        self.sentinel_value = sentinel_value

    @abstractmethod
    def estimate(
        self,
        curve: BaselineBusinessCurve,
        moment: datetime,
        coverage_seconds: float,
    ) -> BaselineEstimate:
        """Expected mean and stdev of business at moment."""

    def _fallback(
        self,
        curve: BaselineBusinessCurve,
        coverage_seconds: float,
        primary_mean: float,
        neighbor_mean: Optional[float] = None,
    ) -> BaselineEstimate:
        if coverage_seconds >= self.min_coverage_seconds and curve.overall.count() > 0:
            logger.debug("Hourly buckets too sparse; using overall statistics")
            return BaselineEstimate(
                mean=curve.overall.mean(),
                stdev=curve.overall.stdev(),
                source=EstimateSource.OVERALL,
                method=self.method,
                primary_mean=primary_mean,
                neighbor_mean=neighbor_mean,
            )

        logger.debug(
            "Only %.0fs of coverage; using sentinel estimate to suppress notifications",
            coverage_seconds,
        )
        return BaselineEstimate(
            mean=self.sentinel_value,
            stdev=self.sentinel_value,
            source=EstimateSource.SENTINEL,
            method=self.method,
            primary_mean=primary_mean,
            neighbor_mean=neighbor_mean,
        )


class NeighborInterpolationEstimator(BaselineEstimator):
    """
    Weighted blend of the current and the adjacent hourly bucket.
    """

    method = "neighbor"

    def estimate(self, curve, moment, coverage_seconds):
        wday = weekday_index(moment)
        a = curve.bucket(wday, moment.hour)
        b_wday, b_hour, weight_a = neighbor_bucket(wday, moment.hour, moment.minute)
        b = curve.bucket(b_wday, b_hour)
        weight_b = 1.0 - weight_a

        if a.count() < self.min_bucket_observations or b.count() < self.min_bucket_observations:
            return self._fallback(curve, coverage_seconds, a.mean(), b.mean())

        return BaselineEstimate(
            mean=weight_a * a.mean() + weight_b * b.mean(),
            stdev=weight_a * a.stdev() + weight_b * b.stdev(),
            source=EstimateSource.PRIMARY,
            method=self.method,
            primary_mean=a.mean(),
            neighbor_mean=b.mean(),
        )


def low_pass(values: np.ndarray, position: float, harmonics: int) -> float:
    """
    Evaluate the low-harmonic Fourier reconstruction of a 24-hour profile.

    values[h] is taken to describe the center of hour h (h + 0.5). Coefficients
    are computed by direct summation, which is plenty for 24 samples.
    """
    values = np.asarray(values, dtype=np.float64)
    n = values.size
    omega = 2.0 * np.pi / n
    centers = np.arange(n) + 0.5

    result = values.mean()
    for k in range(1, harmonics + 1):
        a_k = 2.0 / n * np.sum(values * np.cos(k * omega * centers))
        b_k = 2.0 / n * np.sum(values * np.sin(k * omega * centers))
        result += a_k * np.cos(k * omega * position) + b_k * np.sin(k * omega * position)
    return float(result)


class SpectralSmoothingEstimator(BaselineEstimator):
    """
    Low-order Fourier smoothing of the hourly profile for the moment's day class.

    Requires every hourly bucket of that class to be populated.
    """

    method = "spectral"

    def __init__(self, harmonics: int = 3, **kwargs) -> None:
        super().__init__(**kwargs)
        if not 0 <= harmonics < HOURS_PER_DAY // 2:
            raise ConfigurationError(f"Harmonics must be in [0, 11], got {harmonics}")
        self.harmonics = harmonics

    def estimate(self, curve, moment, coverage_seconds):
        hours = curve.hours(is_weekend(weekday_index(moment)))
        primary_mean = hours[moment.hour].mean()

        if any(h.count() < self.min_bucket_observations for h in hours):
            return self._fallback(curve, coverage_seconds, primary_mean)

        position = moment.hour + moment.minute / 60.0 + moment.second / 3600.0
        means = np.array([h.mean() for h in hours])
        stdevs = np.array([h.stdev() for h in hours])

        return BaselineEstimate(
            mean=low_pass(means, position, self.harmonics),
            stdev=max(low_pass(stdevs, position, self.harmonics), 0.0),
            source=EstimateSource.PRIMARY,
            method=self.method,
            primary_mean=primary_mean,
        )


def build_estimator(settings: EstimatorConfig, policy: str) -> BaselineEstimator:
    common = dict(
        min_bucket_observations=settings.bucket_observations(policy),
        min_coverage_seconds=settings.min_coverage_seconds,
        sentinel_value=settings.sentinel_value,
    )
    if settings.strategy == "neighbor":
        return NeighborInterpolationEstimator(**common)
    if settings.strategy == "spectral":
        return SpectralSmoothingEstimator(harmonics=settings.harmonics, **common)
    raise ConfigurationError(f"Unknown estimator strategy: {settings.strategy}")
