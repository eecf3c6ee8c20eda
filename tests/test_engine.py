import threading

import numpy as np
import pytest

from vibewatch.baseline.model import NO_BASELINE
from vibewatch.config import DetectorConfig
from vibewatch.detection.engine import SpectralChangeDetector, handle_batch
from vibewatch.detection.types import (
    ALERT,
    CHANGE,
    DEGENERATE_SPECTRUM,
    INSUFFICIENT_SAMPLES,
    SAMPLES_SEEN,
    Sample,
)


def _batch(amplitudes, t0: float = 0.0):
    # deliver out of order to exercise the sort
    samples = [Sample(t=t0 + i, amplitude=float(a)) for i, a in enumerate(amplitudes)]
    return list(reversed(samples))


def _kinds(events):
    return [e.kind for e in events]


def _change(events):
    return next(e for e in events if e.kind == CHANGE)


def test_cosine_then_dc_scenario() -> None:
    config = DetectorConfig(window_size=4, change_threshold_pct=8.0)
    detector = SpectralChangeDetector(config)

    first = detector.process_batch(_batch([1, 0, -1, 0]))
    assert _kinds(first) == [SAMPLES_SEEN, CHANGE]
    assert _change(first).payload == {"change_percent": None, "compared": False}
    assert np.allclose(detector.state.spectrum, [0.0, 2.0, 0.0, 2.0])

    second = detector.process_batch(_batch([1, 0, -1, 0], t0=4.0))
    change = _change(second)
    assert change.payload["compared"] is True
    assert change.payload["change_percent"] == pytest.approx(0.0, abs=1e-9)
    assert ALERT not in _kinds(second)

    third = detector.process_batch(_batch([1, 1, 1, 1], t0=8.0))
    change = _change(third)
    assert change.payload["compared"] is True
    assert change.payload["change_percent"] == pytest.approx(100.0)
    alert = next(e for e in third if e.kind == ALERT)
    assert alert.payload["alert"] is True
    assert alert.batch_seq == 3


def test_pure_sine_window_yields_degenerate_comparison() -> None:
    config = DetectorConfig(window_size=4)
    state, events = handle_batch(_batch([0, 1, 0, -1]), NO_BASELINE, config, batch_seq=1)
    assert _change(events).payload["compared"] is False

    state, events = handle_batch(_batch([0, 1, 0, -1]), state, config, batch_seq=2)
    assert DEGENERATE_SPECTRUM in _kinds(events)
    assert CHANGE not in _kinds(events)
    assert state.has_baseline

    # the DC batch after it still fails against the zero baseline, then recovers
    state, events = handle_batch(_batch([1, 1, 1, 1]), state, config, batch_seq=3)
    assert DEGENERATE_SPECTRUM in _kinds(events)
    state, events = handle_batch(_batch([1, 1, 1, 1]), state, config, batch_seq=4)
    assert _change(events).payload["compared"] is True


def test_short_batch_is_skipped_without_touching_baseline() -> None:
    config = DetectorConfig(window_size=4)
    state, _ = handle_batch(_batch([1, 0, -1, 0]), NO_BASELINE, config)
    before = state
    state, events = handle_batch(_batch([1, 1, 1]), state, config)
    assert state is before
    assert _kinds(events) == [SAMPLES_SEEN, INSUFFICIENT_SAMPLES]
    skipped = events[1].payload
    assert skipped["insufficient_samples"] is True
    assert skipped["samples_seen"] == 3
    assert events[0].payload == {"samples_seen": 3}


def test_short_batch_before_first_window_keeps_no_baseline() -> None:
    state, events = handle_batch([], NO_BASELINE, DetectorConfig(window_size=4))
    assert state is NO_BASELINE
    assert INSUFFICIENT_SAMPLES in _kinds(events)


def test_change_at_threshold_does_not_alert() -> None:
    # 100% change against a 100% threshold sits exactly on the boundary
    config = DetectorConfig(window_size=4, change_threshold_pct=100.0)
    state, _ = handle_batch(_batch([1, 0, -1, 0]), NO_BASELINE, config)
    _, events = handle_batch(_batch([1, 1, 1, 1]), state, config)
    assert _change(events).payload["change_percent"] == pytest.approx(100.0)
    assert ALERT not in _kinds(events)


def test_change_percent_in_range_for_random_batches() -> None:
    rng = np.random.default_rng(21)
    detector = SpectralChangeDetector(DetectorConfig(window_size=64))
    for i in range(10):
        amps = rng.normal(size=64)
        events = detector.process_batch([Sample(t=float(i * 64 + j), amplitude=float(a)) for j, a in enumerate(amps)])
        change = _change(events).payload
        if change["compared"]:
            assert 0.0 <= change["change_percent"] <= 100.0
    assert detector.batches_processed == 10


def test_detector_reset_starts_a_new_session() -> None:
    detector = SpectralChangeDetector(DetectorConfig(window_size=4))
    detector.process_batch(_batch([1, 0, -1, 0]))
    detector.reset()
    events = detector.process_batch(_batch([1, 1, 1, 1]))
    assert _change(events).payload["compared"] is False


def test_event_record_carries_batch_seq() -> None:
    detector = SpectralChangeDetector(DetectorConfig(window_size=4))
    events = detector.process_batch(_batch([1, 0, -1, 0]))
    assert events[0].to_record() == {"batch_seq": 1, "samples_seen": 4}


def _tone_batch(amplitude: float, t0: float = 0.0):
    n = np.arange(600)
    return _batch(amplitude * np.sin(2.0 * np.pi * 25.0 * n / 600.0 + np.pi / 4), t0=t0)


@pytest.mark.parametrize("amplitude", [1e-12, 1.0, 1e80])
def test_steady_tone_reports_no_change_at_any_amplitude(amplitude) -> None:
    detector = SpectralChangeDetector(DetectorConfig(window_size=600, change_threshold_pct=8.0))
    detector.process_batch(_tone_batch(amplitude))
    events = detector.process_batch(_tone_batch(amplitude, t0=600.0))
    report = _change(events).payload
    assert report["compared"] is True
    assert report["change_percent"] == pytest.approx(0.0, abs=1e-9)
    assert ALERT not in _kinds(events)


def test_concurrent_batches_are_serialized() -> None:
    detector = SpectralChangeDetector(DetectorConfig(window_size=4))
    workers = 16
    barrier = threading.Barrier(workers)
    results = []
    results_lock = threading.Lock()

    def submit() -> None:
        barrier.wait()
        events = detector.process_batch(_batch([1, 0, -1, 0]))
        with results_lock:
            results.append(events)

    threads = [threading.Thread(target=submit) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert detector.batches_processed == workers
    assert len(results) == workers
    seqs = sorted(events[0].batch_seq for events in results)
    assert seqs == list(range(1, workers + 1))
    changes = [_change(events).payload for events in results]
    assert sum(1 for c in changes if not c["compared"]) == 1
    assert all(c["change_percent"] == pytest.approx(0.0) for c in changes if c["compared"])
