"""Forward DFT helpers producing the real-valued spectrum used for comparison."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np


def roundoff_bound(window: np.ndarray) -> float:
    """Largest FFT round-off expected in a coefficient of ``window``'s DFT."""
    return float(np.finfo(np.float64).eps * window.size * np.sum(np.abs(window)))


def real_spectrum(window: Union[np.ndarray, Sequence[float]]) -> np.ndarray:
    """Return the real part of the unscaled forward DFT of ``window``.

    X_k = sum_n x_n * exp(-2j * pi * k * n / N), no 1/N factor. The imaginary
    (phase) component is discarded, so the output has the same length as the
    input. Real parts no larger than the round-off bound of the window are
    reported as exactly 0.0, so an odd window (a zero-phase sine) yields an
    all-zero spectrum at any amplitude.
    """

    x = np.asarray(window, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError("window must be one-dimensional")
    if x.size == 0:
        raise ValueError("window must not be empty")
    spectrum = np.fft.fft(x, norm="backward").real.astype(np.float64)
    spectrum[np.abs(spectrum) <= roundoff_bound(x)] = 0.0
    return spectrum
