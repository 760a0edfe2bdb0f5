"""
Anomaly module: calibrated trigger, monitoring engine and persistence schedule.
"""

from .engine import MonitorContext, MonitorEngine
from .scheduler import SnapshotPlan, SnapshotScheduler
from .schema import EVENT_LOG_COLUMNS, EventRecord, ProcessResult, TriggerDecision
from .trigger import AnomalyTrigger, standard_normal_inverse_cdf

__all__ = [
    "AnomalyTrigger",
    "EVENT_LOG_COLUMNS",
    "EventRecord",
    "MonitorContext",
    "MonitorEngine",
    "ProcessResult",
    "SnapshotPlan",
    "SnapshotScheduler",
    "TriggerDecision",
    "standard_normal_inverse_cdf",
]
