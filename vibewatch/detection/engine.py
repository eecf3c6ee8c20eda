"""Per-batch spectral change detection.

``handle_batch`` is a pure fold step: it takes a batch plus the current
baseline state and returns the next state with the events produced for that
batch. ``SpectralChangeDetector`` owns the state between batches and makes
sure batches are handled one at a time, in arrival order.
"""

from __future__ import annotations

import threading
from typing import Collection, List, Optional, Tuple

from vibewatch.baseline.model import NO_BASELINE, BaselineState
from vibewatch.baseline.tracker import compare_with_baseline
from vibewatch.config import DetectorConfig
from vibewatch.detection.policy import AlertPolicy
from vibewatch.detection.types import (
    ALERT,
    CHANGE,
    DEGENERATE_SPECTRUM,
    INSUFFICIENT_SAMPLES,
    SAMPLES_SEEN,
    DetectorEvent,
    Sample,
)
from vibewatch.dsp.fft import real_spectrum
from vibewatch.dsp.windowing import extract_window
from vibewatch.util.errors import DegenerateSpectrumError, InsufficientSamples, SpectrumLengthError
from vibewatch.util.logging import get_logger

logger = get_logger(__name__)


def handle_batch(
    batch: Collection[Sample],
    state: BaselineState,
    config: DetectorConfig,
    *,
    batch_seq: int = 0,
) -> Tuple[BaselineState, List[DetectorEvent]]:
    """Run one batch through window, spectrum, baseline, and alert stages."""

    events: List[DetectorEvent] = []
    samples_seen = len(batch)
    events.append(DetectorEvent(SAMPLES_SEEN, batch_seq, {"samples_seen": samples_seen}))
    logger.debug("Number of samples received: %d", samples_seen, extra={"batch_seq": batch_seq})

    try:
        window = extract_window(batch, config.window_size, selection=config.selection)
    except InsufficientSamples as exc:
        logger.info("%s", exc, extra={"batch_seq": batch_seq, "samples_seen": samples_seen})
        events.append(
            DetectorEvent(
                INSUFFICIENT_SAMPLES,
                batch_seq,
                {"insufficient_samples": True, "samples_seen": exc.samples_seen, "required": exc.required_size},
            )
        )
        return state, events

    spectrum = real_spectrum(window)
    next_state = state.replaced(spectrum)

    try:
        report = compare_with_baseline(state, spectrum)
    except DegenerateSpectrumError as exc:
        logger.warning("Skipping comparison: %s", exc, extra={"batch_seq": batch_seq, "error_type": "degenerate_spectrum"})
        events.append(DetectorEvent(DEGENERATE_SPECTRUM, batch_seq, {"error": str(exc)}))
        return next_state, events
    except SpectrumLengthError as exc:
        logger.warning("Skipping comparison: %s", exc, extra={"batch_seq": batch_seq, "error_type": "spectrum_length"})
        events.append(DetectorEvent(CHANGE, batch_seq, {"change_percent": None, "compared": False}))
        return next_state, events

    events.append(
        DetectorEvent(CHANGE, batch_seq, {"change_percent": report.change_percent, "compared": report.compared})
    )
    if report.compared and report.change_percent is not None:
        logger.debug(
            "Vibration signal has changed by %.2f%%",
            report.change_percent,
            extra={"batch_seq": batch_seq, "change_percent": report.change_percent},
        )
        policy = AlertPolicy(config.change_threshold_pct)
        if policy.evaluate(report.change_percent):
            logger.warning(
                "Spectral change %.2f%% exceeds threshold %.2f%%",
                report.change_percent,
                policy.threshold,
                extra={"batch_seq": batch_seq, "change_percent": report.change_percent, "threshold": policy.threshold},
            )
            events.append(
                DetectorEvent(
                    ALERT,
                    batch_seq,
                    {"alert": True, "change_percent": report.change_percent, "threshold": policy.threshold},
                )
            )
    return next_state, events


class SpectralChangeDetector:
    """Hold the baseline across batches and serialize batch handling."""

    def __init__(self, config: Optional[DetectorConfig] = None, *, state: Optional[BaselineState] = None) -> None:
        self.config = config or DetectorConfig()
        self._state = state if state is not None else NO_BASELINE
        self._lock = threading.Lock()
        self._batch_seq = 0

    @property
    def state(self) -> BaselineState:
        return self._state

    @property
    def batches_processed(self) -> int:
        return self._batch_seq

    def process_batch(self, batch: Collection[Sample]) -> List[DetectorEvent]:
        with self._lock:
            self._batch_seq += 1
            self._state, events = handle_batch(batch, self._state, self.config, batch_seq=self._batch_seq)
            return events

    def reset(self) -> None:
        with self._lock:
            self._state = NO_BASELINE
