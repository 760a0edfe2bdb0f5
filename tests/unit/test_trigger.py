"""
Unit tests for threshold calibration and the hysteresis trigger.
"""

from math import isclose

import pytest

from magnetophon.anomaly.trigger import AnomalyTrigger, standard_normal_inverse_cdf
from magnetophon.baseline.schema import BaselineEstimate, EstimateSource


def _estimate(mean=10.0, stdev=2.0, source=EstimateSource.PRIMARY) -> BaselineEstimate:
    return BaselineEstimate(mean=mean, stdev=stdev, source=source, method="neighbor", primary_mean=mean)


class TestInverseCdf:
    @pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 1.5])
    def test_outside_open_interval(self, p):
        assert standard_normal_inverse_cdf(p) == 0.0

    @pytest.mark.parametrize(
        "p,expected",
        [(0.5, 0.0), (0.8413447, 1.0), (0.975, 1.959964), (0.99865, 3.0), (0.01, -2.326348)],
    )
    def test_known_quantiles(self, p, expected):
        assert abs(standard_normal_inverse_cdf(p) - expected) < 4.5e-4

    def test_antisymmetric(self):
        assert isclose(standard_normal_inverse_cdf(0.1), -standard_normal_inverse_cdf(0.9))


class TestCalibration:
    def test_weekly_return_period(self):
        trigger = AnomalyTrigger(return_period_hours=168)

        threshold, z = trigger.calibrate(_estimate(), events_per_hour=1.0)

        assert 2.4 < z < 3.0
        assert isclose(threshold, 10.0 + z * 2.0)

    def test_no_rate_means_plain_mean(self):
        trigger = AnomalyTrigger(return_period_hours=168)

        threshold, z = trigger.calibrate(_estimate(), events_per_hour=0.0)

        assert z == 0.0
        assert threshold == 10.0


class TestEvaluate:
    def test_three_sigma_fires(self):
        trigger = AnomalyTrigger(return_period_hours=168)

        decision = trigger.evaluate(16.0, _estimate(), events_per_hour=1.0)

        assert decision.fired
        assert decision.triggered
        assert trigger.triggered

    def test_mean_never_fires(self):
        trigger = AnomalyTrigger(return_period_hours=168)

        decision = trigger.evaluate(10.0, _estimate(), events_per_hour=1.0)

        assert not decision.fired
        assert not trigger.triggered

    def test_one_notification_per_excursion(self):
        trigger = AnomalyTrigger(return_period_hours=168)
        estimate = _estimate()

        # fire, hover between the band and the threshold, exceed again, re-arm
        values = [16.0, 14.0, 13.0, 15.5, 20.0, 12.5]
        decisions = [trigger.evaluate(v, estimate, events_per_hour=1.0) for v in values]

        assert [d.fired for d in decisions] == [True, False, False, False, False, False]
        assert all(d.triggered for d in decisions)

        rearm = trigger.evaluate(11.9, estimate, events_per_hour=1.0)
        assert not rearm.triggered
        assert not rearm.fired

        again = trigger.evaluate(16.0, estimate, events_per_hour=1.0)
        assert again.fired

    def test_hysteresis_band_width(self):
        trigger = AnomalyTrigger(return_period_hours=168, hysteresis_sigma=2.0)
        estimate = _estimate()
        trigger.evaluate(30.0, estimate, events_per_hour=1.0)

        assert trigger.evaluate(14.5, estimate, events_per_hour=1.0).triggered
        assert not trigger.evaluate(13.9, estimate, events_per_hour=1.0).triggered

    def test_sentinel_never_fires(self):
        trigger = AnomalyTrigger(return_period_hours=1)
        sentinel = _estimate(mean=1e9, stdev=1e9, source=EstimateSource.SENTINEL)

        # one event per hour and a one-hour period gives p = 1 and z = 0
        decision = trigger.evaluate(5e9, sentinel, events_per_hour=1.0)

        assert not decision.fired
        assert not trigger.triggered
