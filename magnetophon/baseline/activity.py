"""
Channel business recurrences.

Two families are supported and selected once per deployment:

- toggle: every simulated second of silence decays business towards 0 and
  every second of activity decays it towards 1. Each second is pushed into the
  baseline, so the curve describes a smoothed duty cycle.
- summary: the whole interval is reduced to one activity scalar and blended
  into business with the exponential tail weight of the elapsed interval. One
  sample is pushed per interval.

The two produce incompatible business scales; never mix them within one
baseline history.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from magnetophon.core.config import RecurrenceConfig
from magnetophon.core.exceptions import ConfigurationError

from .curve import BaselineBusinessCurve
from .running_stat import RunningStat
from .schema import ActivityInterval


@dataclass
class ActivityUpdate:
    """Outcome of feeding one interval into the model."""

    business: float
    bucket: Optional[RunningStat]
    samples: int


class Recurrence(ABC):
    """Business update rule."""

    name: str = ""

    def __init__(self, decay: float) -> None:
        if not 0.0 < decay < 1.0:
            raise ConfigurationError(f"Decay must be in (0, 1), got {decay}")
        self.decay = decay

    @abstractmethod
    def apply(
        self,
        business: float,
        event: ActivityInterval,
        curve: Optional[BaselineBusinessCurve],
    ) -> ActivityUpdate:
        """Advance business over the interval, pushing samples into curve if given."""

    @property
    def scale(self) -> str:
        """Tag identifying the business scale this rule produces."""
        return self.name

    def coverage_seconds(self, curve: BaselineBusinessCurve, elapsed: float) -> float:
        return elapsed


class ToggleDecayRecurrence(Recurrence):
    """
    Per-second exponential toggle decay.

    Silence seconds precede start_time; activity seconds follow it. Each
    simulated second lands in the bucket of its own local hour.
    """

    name = "toggle"

    def apply(self, business, event, curve):
        bucket = None
        moment = event.start_time - timedelta(seconds=event.seconds_off)
        one_second = timedelta(seconds=1)

        for _ in range(event.seconds_off):
            business -= business * self.decay
            if curve is not None:
                bucket = curve.push_at(business, moment)
            moment += one_second

        for _ in range(event.seconds_on):
            business += (1.0 - business) * self.decay
            if curve is not None:
                bucket = curve.push_at(business, moment)
            moment += one_second

        samples = event.seconds_off + event.seconds_on if curve is not None else 0
        return ActivityUpdate(business=business, bucket=bucket, samples=samples)

    def coverage_seconds(self, curve, elapsed):
        # one sample per second, including history restored from a snapshot
        return max(float(curve.overall.count()), elapsed)


class EventSummaryRecurrence(Recurrence):
    """
    One blended sample per interval.

    business = (1 - w) * activity + w * business, with
    w = (1 - decay) ** (seconds_on + seconds_off).
    """

    name = "summary"
    metrics = ("throughput", "fourth_root")

    def __init__(self, decay: float, activity_metric: str = "throughput") -> None:
        super().__init__(decay)
        if activity_metric not in self.metrics:
            raise ConfigurationError(f"Unknown activity metric: {activity_metric}")
        self.activity_metric = activity_metric

    @property
    def scale(self) -> str:
        return f"{self.name}:{self.activity_metric}"

    def activity(self, seconds_on: int, seconds_off: int) -> float:
        if self.activity_metric == "fourth_root":
            return float(seconds_on) ** 0.25
        span = seconds_on + seconds_off + 1.0
        transmissions_per_hour = 3600.0 / span  # how often
        duty_cycle = (seconds_on + 1.0) / span  # for how long
        return transmissions_per_hour * duty_cycle

    def apply(self, business, event, curve):
        activity = self.activity(event.seconds_on, event.seconds_off)
        tail_weight = (1.0 - self.decay) ** (event.seconds_on + event.seconds_off)
        business = (1.0 - tail_weight) * activity + tail_weight * business

        bucket = None
        if curve is not None:
            bucket = curve.push_at(business, event.start_time)
        return ActivityUpdate(business=business, bucket=bucket, samples=0 if bucket is None else 1)


def build_recurrence(settings: RecurrenceConfig) -> Recurrence:
    if settings.policy == "toggle":
        return ToggleDecayRecurrence(settings.decay)
    if settings.policy == "summary":
        return EventSummaryRecurrence(settings.decay, settings.activity_metric)
    raise ConfigurationError(f"Unknown recurrence policy: {settings.policy}")


class ActivityModel:
    """
    Owns the business scalar and the event/coverage counters.

    Replay and live processing go through the same update so that a rebuilt
    history is identical to one accumulated live.
    """

    def __init__(self, recurrence: Recurrence, business: float = 0.0) -> None:
        self.recurrence = recurrence
        self.business = business
        self.events = 0
        self.elapsed_seconds = 0.0

    @classmethod
    def from_config(cls, settings: RecurrenceConfig) -> "ActivityModel":
        return cls(build_recurrence(settings))

    @property
    def policy(self) -> str:
        return self.recurrence.name

    @property
    def scale(self) -> str:
        return self.recurrence.scale

    def update(
        self,
        event: ActivityInterval,
        curve: BaselineBusinessCurve,
        push: bool = True,
    ) -> ActivityUpdate:
        result = self.recurrence.apply(self.business, event, curve if push else None)
        self.business = result.business
        self.events += 1
        self.elapsed_seconds += event.seconds_off + event.seconds_on
        return result

    def events_per_hour(self, curve: Optional[BaselineBusinessCurve] = None) -> float:
        """
        Observed interval rate.

        With a curve, elapsed time is the recurrence's coverage, so the
        per-second rule counts restored snapshot samples as elapsed seconds.
        """
        seconds = self.elapsed_seconds if curve is None else self.coverage_seconds(curve)
        if seconds <= 0:
            return 0.0
        return self.events / (seconds / 3600.0)

    def coverage_seconds(self, curve: BaselineBusinessCurve) -> float:
        return self.recurrence.coverage_seconds(curve, self.elapsed_seconds)
