"""Exception types raised by the detector core and its record decoder.

Every error here is scoped to a single batch: callers log it and move on to
the next batch rather than stopping the process.
"""

from __future__ import annotations

from typing import Optional


class VibewatchError(Exception):
    """Base class for batch-scoped vibewatch failures."""


class InsufficientSamples(VibewatchError):
    """A batch held fewer samples than the configured window size."""

    def __init__(self, samples_seen: int, required_size: int) -> None:
        super().__init__(
            f"Insufficient samples to determine frequency profile ({samples_seen} < {required_size})"
        )
        self.samples_seen = int(samples_seen)
        self.required_size = int(required_size)


class DegenerateSpectrumError(VibewatchError):
    """Cosine similarity is undefined because a spectrum has zero energy."""


class RecordError(VibewatchError):
    """An input record could not be decoded into a sample."""

    def __init__(self, message: str, *, line_no: Optional[int] = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


class SpectrumLengthError(VibewatchError, ValueError):
    """Two spectra of different lengths cannot be compared."""
