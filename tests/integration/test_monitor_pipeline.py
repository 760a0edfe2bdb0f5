"""
Integration tests for the complete monitoring pipeline.

Exercises the flow: event log history → replay → live intervals → trigger →
notification → event log, snapshot and daily dump, then a restart that
restores the snapshot.
"""

from datetime import timedelta

import numpy as np
import pandas as pd
import pytest

from magnetophon.anomaly.schema import EVENT_LOG_COLUMNS
from magnetophon.baseline.schema import EstimateSource
from service.runner import MonitorService


class RecordingNotifier:
    def __init__(self):
        self.notables = []

    def notify(self, notable):
        self.notables.append(notable)


@pytest.mark.integration
class TestMonitorPipeline:
    """Test end-to-end processing against a replayed history."""

    @pytest.fixture
    def service(self, settings, history_csv, steady_history):
        service = MonitorService.bootstrap(settings, started=steady_history[0].start_time.date())
        service.notifier = RecordingNotifier()
        return service

    @pytest.fixture
    def live_events(self, steady_history, sequence):
        """Six routine intervals, a burst of three, then twenty routine ones."""
        last = steady_history[-1]
        clock = last.start_time + timedelta(seconds=last.seconds_on)

        routine = sequence(clock, [(590, 10), (560, 40)], repeat=6)
        clock = routine[-1].start_time + timedelta(seconds=routine[-1].seconds_on)
        burst = sequence(clock, [(5, 5)], repeat=3)
        clock = burst[-1].start_time + timedelta(seconds=burst[-1].seconds_on)
        recovery = sequence(clock, [(590, 10), (560, 40)], repeat=20)
        return routine + burst + recovery

    def test_bootstrap_replays_history(self, service, steady_history):
        activity = service.engine.context.activity

        assert activity.events == len(steady_history)
        assert service.engine.curve.overall.count() == len(steady_history)
        assert all(b.count() > 0 for b in service.engine.curve.weekday)
        assert all(b.count() > 0 for b in service.engine.curve.weekend)
        assert activity.events_per_hour(service.engine.curve) == pytest.approx(6.0)

    def test_single_notification_for_burst(self, service, live_events):
        results = [service.handle(event) for event in live_events]

        fired = [i for i, r in enumerate(results) if r.notify]
        assert fired == [6]
        assert service.notifier.notables == [live_events[6].name]
        assert all(r.record.estimate_source == EstimateSource.PRIMARY for r in results)
        assert not results[-1].record.triggered

    def test_outputs_are_persisted(self, service, settings, live_events, history_csv):
        for event in live_events:
            service.handle(event)

        log = pd.read_csv(history_csv)
        assert list(log.columns) == EVENT_LOG_COLUMNS
        live_rows = log.dropna(subset=["business"])
        assert len(live_rows) == len(live_events)
        assert live_rows["triggered"].astype(int).tolist()[6] == 1

        stats = pd.read_csv(settings.paths.stats_csv)
        assert len(stats) == 24

        assert settings.paths.snapshot.exists()

    def test_restart_restores_snapshot(self, service, settings, live_events, steady_history):
        for event in live_events[:20]:
            service.handle(event)
        # snapshot taken after the 20th live event
        saved_curve = service.engine.curve.to_array()
        saved_business = service.engine.business

        restarted = MonitorService.bootstrap(settings, started=live_events[19].start_time.date())

        assert np.array_equal(restarted.engine.curve.to_array(), saved_curve)
        assert restarted.engine.business == pytest.approx(saved_business)
        assert restarted.engine.context.activity.events == len(steady_history) + 20
