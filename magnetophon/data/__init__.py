"""
Data module: event log, historical replay, and baseline persistence.

    Capture → ActivityInterval
        ↓
    Engine → EventRecord ──→ EventLog (magnetophon.csv)
        ↓                         ↑ replay on startup
    BaselineBusinessCurve ──→ SnapshotStore (binary, every N events)
                          └─→ StatsDump (daily per-hour summary)
"""

from magnetophon.data.history import EventLog, parse_interval_row
from magnetophon.data.snapshot import Snapshot, SnapshotStore
from magnetophon.data.stats_dump import StatsDump

__all__ = [
    "EventLog",
    "Snapshot",
    "SnapshotStore",
    "StatsDump",
    "parse_interval_row",
]
