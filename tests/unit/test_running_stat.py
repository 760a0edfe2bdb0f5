"""
Unit tests for the online mean/variance accumulator.
"""

import random
import statistics
from math import isclose

import pytest

from magnetophon.baseline.running_stat import RunningStat


def _pushed(values) -> RunningStat:
    stat = RunningStat()
    for v in values:
        stat.push(v)
    return stat


def test_empty_stat_is_zero():
    stat = RunningStat()

    assert stat.count() == 0
    assert stat.mean() == 0.0
    assert stat.variance() == 0.0
    assert stat.stdev() == 0.0


def test_single_value_has_zero_variance():
    stat = _pushed([42.0])

    assert stat.count() == 1
    assert stat.mean() == 42.0
    assert stat.variance() == 0.0


def test_known_sequence():
    stat = _pushed([10, 20, 30])

    assert stat.count() == 3
    assert isclose(stat.mean(), 20.0)
    assert isclose(stat.stdev(), 10.0)


@pytest.mark.parametrize("seed", [1, 7, 2025])
def test_matches_sample_statistics(seed):
    rng = random.Random(seed)
    values = [rng.gauss(50.0, 12.0) for _ in range(500)]
    stat = _pushed(values)

    assert isclose(stat.mean(), statistics.fmean(values), rel_tol=1e-9)
    assert isclose(stat.variance(), statistics.variance(values), rel_tol=1e-9)


def test_order_independent():
    rng = random.Random(3)
    values = [rng.uniform(-5.0, 5.0) for _ in range(200)]
    shuffled = list(values)
    rng.shuffle(shuffled)

    a = _pushed(values)
    b = _pushed(shuffled)

    assert isclose(a.mean(), b.mean(), rel_tol=1e-9, abs_tol=1e-12)
    assert isclose(a.variance(), b.variance(), rel_tol=1e-9)


def test_stable_for_large_offset():
    # naive sum-of-squares loses all precision here
    values = [1e9 + v for v in (4.0, 7.0, 13.0, 16.0)]
    stat = _pushed(values)

    assert isclose(stat.mean(), 1e9 + 10.0)
    assert isclose(stat.variance(), 30.0, rel_tol=1e-6)


def test_state_reconstruction():
    stat = _pushed([1.5, 2.5, 9.0])
    rebuilt = RunningStat.from_state(*stat.state())

    assert rebuilt.count() == 3
    assert rebuilt.mean() == stat.mean()
    assert rebuilt.variance() == stat.variance()

    rebuilt.push(4.0)
    stat.push(4.0)
    assert rebuilt.state() == stat.state()


def test_from_empty_state():
    assert RunningStat.from_state(0, 123.0, 4.0).state() == (0, 0.0, 0.0)
