"""
Unit tests for level-gated transmission detection and recording files.
"""

from datetime import datetime, timedelta

import numpy as np
import soundfile as sf

from magnetophon.capture.detector import DetectorState, IntervalDetector, block_level
from magnetophon.capture.writer import RecordingWriter

T0 = datetime(2025, 2, 10, 10, 0, 0)
RATE = 10
QUIET = np.zeros(5, dtype=np.int16)
LOUD = np.array([-2000, 2000, -2000, 2000, -2000], dtype=np.int16)


def _feed(detector, blocks):
    """Feed (seconds_after_t0, block) pairs and collect completed transmissions."""
    done = []
    for offset, block in blocks:
        result = detector.feed(block, T0 + timedelta(seconds=offset))
        if result is not None:
            done.append(result)
    return done


def test_block_level():
    assert block_level(QUIET) == 0.0
    assert block_level(np.array([7], dtype=np.int16)) == 0.0
    assert block_level(LOUD) > 2000


def test_quiet_stream_produces_nothing():
    detector = IntervalDetector(rms_threshold=1000, sample_rate=RATE, started=T0)

    assert _feed(detector, [(i * 0.5, QUIET) for i in range(20)]) == []
    assert detector.state == DetectorState.WAITING


def test_transmission_boundaries():
    detector = IntervalDetector(rms_threshold=1000, sample_rate=RATE, started=T0)
    blocks = [(0.0, QUIET), (10.0, LOUD), (10.5, LOUD), (11.0, LOUD), (11.5, LOUD), (12.0, QUIET)]

    done = _feed(detector, blocks)

    assert len(done) == 1
    interval = done[0].interval
    assert interval.start_time == T0 + timedelta(seconds=10)
    assert interval.seconds_off == 10
    assert interval.seconds_on == 2
    assert done[0].samples.size == 20
    assert detector.state == DetectorState.WAITING


def test_silence_measured_from_previous_end():
    detector = IntervalDetector(rms_threshold=1000, sample_rate=RATE, started=T0)
    blocks = [(10.0, LOUD), (10.5, QUIET), (20.5, LOUD), (21.0, QUIET)]

    done = _feed(detector, blocks)

    assert [t.interval.seconds_off for t in done] == [10, 10]
    # half a second of audio rounds down to zero whole seconds
    assert [t.interval.seconds_on for t in done] == [0, 0]


def test_open_transmission_not_emitted():
    detector = IntervalDetector(rms_threshold=1000, sample_rate=RATE, started=T0)

    assert _feed(detector, [(1.0, LOUD), (1.5, LOUD)]) == []
    assert detector.state == DetectorState.RECORDING


def test_writer_round_trip(tmp_path):
    detector = IntervalDetector(rms_threshold=1000, sample_rate=RATE, started=T0)
    transmission = _feed(detector, [(3.0, LOUD), (3.5, LOUD), (4.0, QUIET)])[0]
    writer = RecordingWriter(tmp_path / "recordings", sample_rate=RATE)

    path = writer.write(transmission)

    assert path.name == "2025-02-10 10.00.03.aiff"
    data, rate = sf.read(str(path), dtype="int16")
    assert rate == RATE
    assert np.array_equal(data, transmission.samples)
