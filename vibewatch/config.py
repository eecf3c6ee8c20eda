"""
Configuration defaults and environment parsing for vibewatch.

All VIBEWATCH_* environment variables are parsed here and exported as
module-level constants. The CLI and runner import from this module rather
than reading os.environ directly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from vibewatch.dsp.windowing import SELECTION_MODES


def _int_env(name: str, default: int) -> int:
    """Parse an integer from environment, returning default on missing/invalid."""
    val = os.getenv(name)
    if not val:
        return default
    try:
        return max(1, int(float(val)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    """Parse a float from environment, returning default on missing/invalid."""
    val = os.getenv(name)
    if not val:
        return default
    try:
        return float(val)
    except ValueError:
        return default


def _choice_env(name: str, default: str, choices) -> str:
    val = (os.getenv(name) or "").strip().lower()
    return val if val in choices else default


# ---------------------------------------------------------------------------
# Detector defaults
# ---------------------------------------------------------------------------
WINDOW_SIZE: int = _int_env("VIBEWATCH_WINDOW_SIZE", 600)
"""Samples per window (and DFT length)."""

CHANGE_THRESHOLD_PCT: float = _float_env("VIBEWATCH_THRESHOLD_PCT", 8.0)
"""Alert when the spectrum changes by more than this percentage."""

SELECTION: str = _choice_env("VIBEWATCH_SELECTION", "latest", SELECTION_MODES)
"""Window selection mode: 'latest' (sort, keep newest) or 'arrival' (cap, then sort)."""


@dataclass(frozen=True)
class DetectorConfig:
    window_size: int = 600
    change_threshold_pct: float = 8.0
    selection: str = "latest"

    def __post_init__(self) -> None:
        if int(self.window_size) < 1:
            raise ValueError("window_size must be >= 1")
        if not 0.0 <= float(self.change_threshold_pct) <= 100.0:
            raise ValueError("change_threshold_pct must be within [0, 100]")
        if self.selection not in SELECTION_MODES:
            raise ValueError(f"selection must be one of {', '.join(SELECTION_MODES)}")

    @classmethod
    def from_env(cls) -> "DetectorConfig":
        # Re-read so changes made after import are honoured.
        return cls(
            window_size=_int_env("VIBEWATCH_WINDOW_SIZE", WINDOW_SIZE),
            change_threshold_pct=_float_env("VIBEWATCH_THRESHOLD_PCT", CHANGE_THRESHOLD_PCT),
            selection=_choice_env("VIBEWATCH_SELECTION", SELECTION, SELECTION_MODES),
        )
