"""
Pytest configuration and shared fixtures.

Provides isolated configuration instances, interval factories and synthetic
history for unit and integration tests.
"""

import pytest
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Tuple

import pandas as pd

from magnetophon.anomaly.schema import EVENT_LOG_COLUMNS
from magnetophon.baseline.schema import LABEL_FORMAT, ActivityInterval
from magnetophon.core.config import Config, PathsConfig


@pytest.fixture
def settings(tmp_path: Path) -> Config:
    """
    Fixture providing a configuration rooted in a temporary directory.

    Uses explicit values (not from .env) so tests run consistently regardless
    of the environment.
    """
    return Config(
        log_level="WARNING",
        logs_dir=tmp_path / "logs",
        paths=PathsConfig(
            events_csv=tmp_path / "magnetophon.csv",
            stats_csv=tmp_path / "magnetophon.stats.csv",
            snapshot=tmp_path / "magnetophon.baseline.npz",
            recordings_dir=tmp_path / "recordings",
        ),
    )


@pytest.fixture
def make_interval() -> Callable[..., ActivityInterval]:
    """Factory for ActivityInterval with sensible defaults."""

    def _make(start: datetime, seconds_off: int = 590, seconds_on: int = 10) -> ActivityInterval:
        return ActivityInterval(start_time=start, seconds_off=seconds_off, seconds_on=seconds_on)

    return _make


def interval_sequence(
    start: datetime,
    pattern: List[Tuple[int, int]],
    repeat: int,
) -> List[ActivityInterval]:
    """
    Chronological intervals cycling through (seconds_off, seconds_on) pairs.

    Each interval starts seconds_off after the previous one ended.
    """
    events = []
    clock = start
    for i in range(repeat):
        seconds_off, seconds_on = pattern[i % len(pattern)]
        begin = clock + timedelta(seconds=seconds_off)
        events.append(
            ActivityInterval(start_time=begin, seconds_off=seconds_off, seconds_on=seconds_on)
        )
        clock = begin + timedelta(seconds=seconds_on)
    return events


@pytest.fixture
def sequence() -> Callable[..., List[ActivityInterval]]:
    return interval_sequence


@pytest.fixture
def steady_history() -> List[ActivityInterval]:
    """
    Two weeks of transmissions every 10 minutes, alternating short and long.

    Starts Monday 2025-02-03 00:00 so every hour of both day classes is covered.
    """
    return interval_sequence(datetime(2025, 2, 3), [(590, 10), (560, 40)], repeat=14 * 24 * 6)


@pytest.fixture
def history_csv(tmp_path: Path, steady_history: List[ActivityInterval]) -> Path:
    """
    Fixture writing steady_history in event log format with pandas.

    Only the replayed columns are filled in; the rest stay empty as in a log
    imported from another tool.
    """
    df = pd.DataFrame(
        {
            "datetime": [e.start_time.strftime(LABEL_FORMAT) for e in steady_history],
            "seconds_off": [e.seconds_off for e in steady_history],
            "seconds_on": [e.seconds_on for e in steady_history],
        }
    )
    df = df.reindex(columns=EVENT_LOG_COLUMNS)
    path = tmp_path / "magnetophon.csv"
    df.to_csv(path, index=False)
    return path


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (deferred CI)"
    )
