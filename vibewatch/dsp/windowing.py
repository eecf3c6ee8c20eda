"""Window extraction: turn an unordered batch into a time-ordered amplitude window."""

from __future__ import annotations

from itertools import islice
from typing import Iterable, List

import numpy as np

from vibewatch.detection.types import Sample
from vibewatch.util.errors import InsufficientSamples

SELECTION_MODES = ("latest", "arrival")


def extract_window(batch: Iterable[Sample], required_size: int, *, selection: str = "latest") -> np.ndarray:
    """Return ``required_size`` amplitudes ordered ascending by timestamp.

    ``selection="latest"`` sorts the whole batch first and keeps the most
    recent ``required_size`` samples. ``selection="arrival"`` caps the batch
    to the first ``required_size`` samples in arrival order and only then
    sorts them, so an overflowing batch yields an arbitrary subset.

    Raises InsufficientSamples when the batch is smaller than the window.
    """

    required_size = int(required_size)
    if required_size < 1:
        raise ValueError("required_size must be >= 1")
    if selection not in SELECTION_MODES:
        raise ValueError(f"unknown selection mode '{selection}'")

    if selection == "arrival":
        retained: List[Sample] = list(islice(batch, required_size))
        if len(retained) < required_size:
            raise InsufficientSamples(len(retained), required_size)
        ordered = sorted(retained, key=lambda s: s.t)
    else:
        samples = list(batch)
        if len(samples) < required_size:
            raise InsufficientSamples(len(samples), required_size)
        ordered = sorted(samples, key=lambda s: s.t)[-required_size:]

    return np.fromiter((s.amplitude for s in ordered), dtype=np.float64, count=required_size)
