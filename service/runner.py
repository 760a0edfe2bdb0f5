"""
Monitor service: wires the engine to its collaborators.

Startup restores the baseline snapshot (if any) and replays the event log to
rebuild business. Each interval is then processed by the engine, appended to
the event log, announced if it fired the trigger, and offered to the
persistence schedule. Collaborator failures are logged and never stop the
stream.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from magnetophon.anomaly import MonitorContext, MonitorEngine, ProcessResult, SnapshotScheduler
from magnetophon.baseline.schema import ActivityInterval
from magnetophon.core.config import Config, config as default_config
from magnetophon.core.exceptions import NotificationError, PersistenceError
from magnetophon.data import EventLog, SnapshotStore, StatsDump

from .notify import CommandNotifier

logger = logging.getLogger(__name__)


class MonitorService:
    def __init__(
        self,
        engine: MonitorEngine,
        event_log: EventLog,
        scheduler: SnapshotScheduler,
        notifier: Optional[CommandNotifier] = None,
    ) -> None:
        self.engine = engine
        self.event_log = event_log
        self.scheduler = scheduler
        self.notifier = notifier

    @classmethod
    def bootstrap(
        cls,
        settings: Optional[Config] = None,
        started: Optional[date] = None,
    ) -> "MonitorService":
        """
        Build a service from configuration, restoring persisted state.
        """
        settings = settings or default_config
        context = MonitorContext.from_config(settings)
        store = SnapshotStore(settings.paths.snapshot, scale=context.activity.scale)
        snapshot = store.load()
        if snapshot:
            context.curve = snapshot.curve

        engine = MonitorEngine(settings=settings, context=context)

        event_log = EventLog(settings.paths.events_csv)
        engine.replay(event_log.replay(), skip_before=snapshot.as_of if snapshot else None)
        try:
            event_log.ensure_exists()
        except PersistenceError as e:
            logger.error("%s", e)

        scheduler = SnapshotScheduler(
            every_n_events=settings.snapshot.every_n_events,
            daily_dump=settings.snapshot.daily_dump,
            store=store,
            dump=StatsDump(settings.paths.stats_csv),
            started=started,
        )
        return cls(
            engine=engine,
            event_log=event_log,
            scheduler=scheduler,
            notifier=CommandNotifier(settings.notify.command),
        )

    def handle(self, event: ActivityInterval) -> ProcessResult:
        result = self.engine.process_interval(event)

        try:
            self.event_log.append(result.record)
        except PersistenceError as e:
            logger.error("Event not logged: %s", e)

        if result.notify and self.notifier is not None:
            try:
                self.notifier.notify(result.notable or event.name)
            except NotificationError as e:
                # the trigger stays in its triggered state; no retry for this excursion
                logger.error("%s", e)

        self.scheduler.handle(self.engine.curve, event.start_time, label=event.name)
        return result
