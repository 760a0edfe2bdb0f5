"""
Persistence schedule for the baseline curve.

Decides, per processed event, whether the curve should be snapshotted (every
N events) and whether the daily per-hour summary is due (first event of a new
calendar day). Persistence failures are logged and left to the next
scheduled occasion; they never touch the in-memory curve.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol

from magnetophon.baseline.curve import BaselineBusinessCurve
from magnetophon.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class CurveStore(Protocol):
    def save(self, curve: BaselineBusinessCurve, as_of: datetime) -> None: ...


class CurveDump(Protocol):
    def append(self, curve: BaselineBusinessCurve, label: str) -> None: ...


@dataclass
class SnapshotPlan:
    snapshot: bool = False
    daily_dump: bool = False

    @property
    def any(self) -> bool:
        return self.snapshot or self.daily_dump


class SnapshotScheduler:
    """
    Count- and calendar-based persistence trigger.

    Args:
        every_n_events: snapshot after this many processed events
        daily_dump: whether to emit the daily per-hour summary
        store: binary snapshot collaborator
        dump: daily summary collaborator
        started: date the scheduler counts the first day from
    """

    def __init__(
        self,
        every_n_events: int = 10,
        daily_dump: bool = True,
        store: Optional[CurveStore] = None,
        dump: Optional[CurveDump] = None,
        started: Optional[date] = None,
    ) -> None:
        self.every_n_events = every_n_events
        self.daily_dump = daily_dump
        self.store = store
        self.dump = dump
        self._since_snapshot = 0
        self._last_dump_date = started or date.today()

    def observe(self, now: datetime) -> SnapshotPlan:
        plan = SnapshotPlan()

        self._since_snapshot += 1
        if self._since_snapshot >= self.every_n_events:
            self._since_snapshot = 0
            plan.snapshot = True

        if self.daily_dump and now.date() != self._last_dump_date:
            self._last_dump_date = now.date()
            plan.daily_dump = True

        return plan

    def run(
        self,
        plan: SnapshotPlan,
        curve: BaselineBusinessCurve,
        now: datetime,
        label: str = "",
    ) -> None:
        if plan.snapshot and self.store is not None:
            try:
                self.store.save(curve, as_of=now)
            except PersistenceError as exc:
                logger.error("Baseline snapshot failed, will retry on schedule: %s", exc)

        if plan.daily_dump and self.dump is not None:
            try:
                self.dump.append(curve, label=label or now.strftime("%Y-%m-%d %H.%M.%S"))
            except PersistenceError as exc:
                logger.error("Daily baseline dump failed, will retry tomorrow: %s", exc)

    def handle(self, curve: BaselineBusinessCurve, now: datetime, label: str = "") -> SnapshotPlan:
        plan = self.observe(now)
        if plan.any:
            self.run(plan, curve, now, label=label)
        return plan
