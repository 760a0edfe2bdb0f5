"""
Activity monitoring engine.

Consumes ActivityInterval events one at a time: updates business, pushes it
into the baseline curve, estimates the expected level at the interval's start,
and evaluates the trigger. All mutable state lives in an explicit
MonitorContext so replay and tests are deterministic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from magnetophon.baseline.activity import ActivityModel
from magnetophon.baseline.curve import BaselineBusinessCurve
from magnetophon.baseline.estimators import BaselineEstimator, build_estimator
from magnetophon.baseline.schema import ActivityInterval
from magnetophon.core.config import Config, config as default_config

from .schema import EventRecord, ProcessResult
from .trigger import AnomalyTrigger

logger = logging.getLogger(__name__)


@dataclass
class MonitorContext:
    """
    Owned monitor state: the baseline, business model and trigger.
    """

    curve: BaselineBusinessCurve
    activity: ActivityModel
    trigger: AnomalyTrigger

    @classmethod
    def from_config(
        cls,
        settings: Config,
        curve: Optional[BaselineBusinessCurve] = None,
    ) -> "MonitorContext":
        return cls(
            curve=curve or BaselineBusinessCurve(),
            activity=ActivityModel.from_config(settings.recurrence),
            trigger=AnomalyTrigger(
                return_period_hours=settings.trigger.return_period_hours,
                hysteresis_sigma=settings.trigger.hysteresis_sigma,
            ),
        )


class MonitorEngine:
    """
    Single-stream processing pipeline.

    Notes:
    - One interval is fully processed before the next is accepted.
    - "Now" is the interval's start time, sampled once per event.
    - Replay uses the same recurrence as live processing but never evaluates
      the trigger.
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        context: Optional[MonitorContext] = None,
        estimator: Optional[BaselineEstimator] = None,
    ) -> None:
        self.settings = settings or default_config
        self.context = context or MonitorContext.from_config(self.settings)
        self.estimator = estimator or build_estimator(
            self.settings.estimator, self.context.activity.policy
        )

    @property
    def curve(self) -> BaselineBusinessCurve:
        return self.context.curve

    @property
    def business(self) -> float:
        return self.context.activity.business

    def process_interval(self, event: ActivityInterval) -> ProcessResult:
        ctx = self.context
        ctx.activity.update(event, ctx.curve)

        coverage = ctx.activity.coverage_seconds(ctx.curve)
        estimate = self.estimator.estimate(ctx.curve, event.start_time, coverage)
        decision = ctx.trigger.evaluate(
            ctx.activity.business, estimate, ctx.activity.events_per_hour(ctx.curve)
        )

        neighbor_mean = estimate.neighbor_mean
        if neighbor_mean is None:
            neighbor_mean = ctx.curve.overall.mean()

        record = EventRecord(
            start_time=event.start_time,
            label=event.name,
            seconds_off=event.seconds_off,
            seconds_on=event.seconds_on,
            business=ctx.activity.business,
            interpolated_mean=estimate.mean,
            interpolated_stdev=estimate.stdev,
            triggered=decision.triggered,
            fired=decision.fired,
            a_mean=estimate.primary_mean,
            b_mean=neighbor_mean,
            o_mean=ctx.curve.overall.mean(),
            threshold=decision.threshold,
            estimate_source=estimate.source,
        )

        logger.info(
            "%s off=%ds on=%ds business=%.4g expected=%.4g±%.4g (%s) threshold=%.4g triggered=%s",
            record.label,
            record.seconds_off,
            record.seconds_on,
            record.business,
            record.interpolated_mean,
            record.interpolated_stdev,
            record.estimate_source.value,
            record.threshold,
            record.triggered,
        )

        return ProcessResult(
            record=record,
            notify=decision.fired,
            notable=event.name if decision.fired else None,
        )

    def replay(
        self,
        events: Iterable[ActivityInterval],
        skip_before: Optional[datetime] = None,
    ) -> int:
        """
        Rebuild business (and the curve) from historical intervals.

        Intervals starting at or before skip_before are already represented in
        a loaded snapshot; they advance business without being pushed again.

        Returns:
            Number of intervals replayed
        """
        ctx = self.context
        replayed = 0
        previous: Optional[datetime] = None

        for event in events:
            if previous is not None and event.start_time < previous:
                logger.warning(
                    "Replay interval %s is out of chronological order", event.name
                )
            previous = event.start_time

            push = skip_before is None or event.start_time > skip_before
            ctx.activity.update(event, ctx.curve, push=push)
            replayed += 1

        logger.info(
            "Replayed %d intervals; business=%.4g, %d baseline samples",
            replayed,
            ctx.activity.business,
            ctx.curve.overall.count(),
        )
        return replayed
