"""Baseline comparison: cosine similarity of a new spectrum against the last one."""

from __future__ import annotations

import threading
from typing import Optional

import numpy as np

from vibewatch.baseline.model import NO_BASELINE, BaselineState
from vibewatch.detection.types import ChangeReport
from vibewatch.dsp.similarity import change_percent, cosine_similarity

# Comparison is skipped when len(new) // len(baseline) reaches this ratio.
MAX_LENGTH_RATIO = 2


def compare_with_baseline(state: BaselineState, spectrum: np.ndarray) -> ChangeReport:
    """Compare ``spectrum`` against ``state`` without mutating anything.

    Returns ``compared=False`` when there is no baseline yet, or when the new
    spectrum is at least twice as long as the baseline. The guard is
    one-directional: a much shorter new spectrum is not rejected here and
    fails in cosine_similarity with SpectrumLengthError instead.

    Raises DegenerateSpectrumError when either spectrum has zero energy.
    """

    if not state.has_baseline:
        return ChangeReport(change_percent=None, compared=False)
    assert state.spectrum is not None
    if len(spectrum) // len(state.spectrum) >= MAX_LENGTH_RATIO:
        return ChangeReport(change_percent=None, compared=False)
    similarity = cosine_similarity(spectrum, state.spectrum)
    return ChangeReport(change_percent=change_percent(similarity), compared=True)


class BaselineTracker:
    """Single owner of the baseline spectrum with exclusive write access."""

    def __init__(self, state: Optional[BaselineState] = None) -> None:
        self._state = state if state is not None else NO_BASELINE
        self._lock = threading.Lock()

    @property
    def state(self) -> BaselineState:
        return self._state

    @property
    def baseline(self) -> Optional[np.ndarray]:
        return self._state.spectrum

    def compare(self, spectrum: np.ndarray) -> ChangeReport:
        """Compare against the stored baseline, then store ``spectrum``.

        The baseline is replaced even when the comparison raises.
        """
        with self._lock:
            try:
                return compare_with_baseline(self._state, spectrum)
            finally:
                self._state = self._state.replaced(spectrum)

    def reset(self) -> None:
        with self._lock:
            self._state = NO_BASELINE
