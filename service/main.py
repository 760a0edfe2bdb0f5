"""
Command-line audio activity monitor.

Records audio above a level threshold into time-stamped files, keeps the
per-interval history in the event log, and launches the notification command
when channel business is unusually high for the time of day.
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv

from magnetophon.anomaly import SnapshotPlan
from magnetophon.capture import IntervalDetector, RecordingWriter
from magnetophon.core.config import Config
from magnetophon.core.exceptions import CaptureError
from magnetophon.core.logging_config import setup_logging

from .runner import MonitorService

logger = logging.getLogger(__name__)


def _positive(value: Optional[float], name: str) -> Optional[float]:
    if value is None:
        return None
    if value > 0:
        return value
    logger.warning("Unexpected %s: %s; keeping the default", name, value)
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Magnetophon audio activity monitor")
    parser.add_argument(
        "--return-period",
        type=float,
        help="Average hours between notifications (default 168, one per week)",
    )
    parser.add_argument("--rms-threshold", type=float, help="Activity level threshold (int16 units)")
    parser.add_argument(
        "--decay-seconds",
        type=float,
        help="Business decay time constant in seconds (decay = 1/N, default 600)",
    )
    parser.add_argument("--policy", choices=["toggle", "summary"], help="Business recurrence")
    parser.add_argument("--strategy", choices=["neighbor", "spectral"], help="Baseline estimator")
    parser.add_argument("--device", type=int, help="Input device index")
    parser.add_argument(
        "--replay-only",
        action="store_true",
        help="Rebuild state from history, print the baseline summary and exit",
    )
    return parser


def apply_arguments(settings: Config, args: argparse.Namespace) -> Config:
    return_period = _positive(args.return_period, "hours between notifications")
    if return_period is not None:
        settings.trigger.return_period_hours = return_period

    rms_threshold = _positive(args.rms_threshold, "RMS threshold")
    if rms_threshold is not None:
        settings.capture.rms_threshold = rms_threshold

    decay_seconds = _positive(args.decay_seconds, "decay constant")
    if decay_seconds is not None:
        if decay_seconds > 1:
            settings.recurrence.decay = 1.0 / decay_seconds
        else:
            logger.warning("Decay constant must exceed 1 second; keeping the default")

    if args.policy:
        settings.recurrence.policy = args.policy
    if args.strategy:
        settings.estimator.strategy = args.strategy
    return settings


def run(service: MonitorService, settings: Config, device: Optional[int] = None) -> None:
    # sounddevice needs PortAudio at import time
    from magnetophon.capture.recorder import SoundDeviceRecorder

    detector = IntervalDetector(
        rms_threshold=settings.capture.rms_threshold,
        sample_rate=settings.capture.sample_rate,
        started=datetime.now(),
    )
    writer = RecordingWriter(settings.paths.recordings_dir, settings.capture.sample_rate)

    with SoundDeviceRecorder(settings.capture, device=device) as recorder:
        for timestamp, block in recorder.blocks():
            transmission = detector.feed(block, timestamp)
            if transmission is None:
                continue
            try:
                writer.write(transmission)
            except CaptureError as e:
                logger.error("%s", e)
            service.handle(transmission.interval)


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)

    settings = apply_arguments(Config(), args)
    setup_logging(settings=settings)

    service = MonitorService.bootstrap(settings)

    if args.replay_only:
        print(service.engine.curve.summary_frame().to_string(index=False))
        return

    try:
        run(service, settings, device=args.device)
    except CaptureError as e:
        logger.error("Audio capture failed: %s", e)
    except KeyboardInterrupt:
        logger.info("Interrupted")

    logger.info("Saving baseline snapshot")
    service.scheduler.run(SnapshotPlan(snapshot=True), service.engine.curve, datetime.now())


if __name__ == "__main__":
    main()
