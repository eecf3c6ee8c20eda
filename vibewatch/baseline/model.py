"""Baseline state shared between batches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True, eq=False)
class BaselineState:
    """Most recently accepted spectrum, or None before the first valid batch.

    Lives in process memory only; a fresh state (NoBaseline) is used after
    every restart.
    """

    spectrum: Optional[np.ndarray] = None

    @property
    def has_baseline(self) -> bool:
        return self.spectrum is not None and self.spectrum.size > 0

    def replaced(self, spectrum: np.ndarray) -> "BaselineState":
        frozen = np.array(spectrum, dtype=np.float64, copy=True)
        frozen.setflags(write=False)
        return BaselineState(spectrum=frozen)


NO_BASELINE = BaselineState()

__all__ = ["BaselineState", "NO_BASELINE"]
