"""
Calibrated notification trigger with hysteresis.

The threshold is derived from a desired long-run notification period: with
roughly `events_per_hour` evaluations per hour and one notification wanted
every `return_period_hours`, a single evaluation should exceed the threshold
with probability p = 1 / (events_per_hour * return_period_hours). Under a
normal approximation that is mean + z * stdev with z = Phi^-1(1 - p).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import log, sqrt
from typing import Tuple

from magnetophon.baseline.schema import BaselineEstimate, EstimateSource

from .schema import TriggerDecision

logger = logging.getLogger(__name__)


def standard_normal_inverse_cdf(p: float) -> float:
    """
    Approximate inverse CDF of the standard normal distribution.

    Abramowitz and Stegun formula 26.2.23, absolute error below 4.5e-4.
    Returns 0 for p outside (0, 1).
    """
    if p <= 0 or p >= 1:
        return 0.0

    t = sqrt(-2 * log(p if p < 0.5 else 1 - p))
    approximation = t - ((0.010328 * t + 0.802853) * t + 2.515517) / (
        ((0.001308 * t + 0.189269) * t + 1.432788) * t + 1
    )
    return -approximation if p < 0.5 else approximation


@dataclass
class AnomalyTrigger:
    """
    Two-state (armed/triggered) trigger.

    Fires at most once per excursion: after firing it stays triggered until
    business falls below mean + hysteresis_sigma * stdev.
    """

    return_period_hours: float
    hysteresis_sigma: float = 1.0
    triggered: bool = False

    def calibrate(self, estimate: BaselineEstimate, events_per_hour: float) -> Tuple[float, float]:
        """Return (threshold, z) for the given estimate and event rate."""
        expected = events_per_hour * self.return_period_hours
        p = 1.0 / expected if expected > 0 else 1.0
        z = standard_normal_inverse_cdf(1.0 - p)
        return estimate.mean + z * estimate.stdev, z

    def evaluate(
        self,
        business: float,
        estimate: BaselineEstimate,
        events_per_hour: float,
    ) -> TriggerDecision:
        threshold, z = self.calibrate(estimate, events_per_hour)
        fired = False

        if not self.triggered:
            if business > threshold and estimate.source != EstimateSource.SENTINEL:
                self.triggered = True
                fired = True
                logger.info(
                    "Business %.4g exceeded threshold %.4g (z=%.3f)", business, threshold, z
                )
        elif business < estimate.mean + self.hysteresis_sigma * estimate.stdev:
            self.triggered = False
            logger.debug("Business %.4g back within band; trigger re-armed", business)

        return TriggerDecision(
            threshold=threshold,
            z_score=z,
            triggered=self.triggered,
            fired=fired,
        )
