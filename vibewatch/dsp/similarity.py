"""Spectrum similarity metrics."""

from __future__ import annotations

import math

import numpy as np

from vibewatch.util.errors import DegenerateSpectrumError, SpectrumLengthError


def _peak_normalized(v: np.ndarray) -> np.ndarray:
    peak = float(np.max(np.abs(v))) if v.size else 0.0
    if not math.isfinite(peak):
        raise DegenerateSpectrumError(f"spectrum contains non-finite values (peak {peak})")
    if peak == 0.0:
        raise DegenerateSpectrumError("cosine similarity undefined for a zero-energy spectrum")
    return v / peak


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """|a.b| / sqrt((a.a) * (b.b)), clipped to [0, 1].

    Both vectors are divided by their peak magnitude first; the ratio is
    unchanged and the dot products stay in range for any finite input.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise SpectrumLengthError(f"spectra differ in shape: {a.shape} vs {b.shape}")
    a = _peak_normalized(a)
    b = _peak_normalized(b)
    similarity = abs(float(np.dot(a, b))) / (math.sqrt(float(np.dot(a, a))) * math.sqrt(float(np.dot(b, b))))
    return min(1.0, max(0.0, similarity))


def change_percent(similarity: float) -> float:
    """Percent change implied by a similarity in [0, 1]."""
    return 100.0 - similarity * 100.0
