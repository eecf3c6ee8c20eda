"""Synthetic vibration source for demos and soak tests."""

from __future__ import annotations

from typing import Iterator, Optional

import numpy as np

from vibewatch.detection.types import Sample
from vibewatch.io.records import encode_sample


class SyntheticVibration:
    """Seeded sine generator with an optional frequency fault.

    After ``fault_after`` samples the tone switches from ``freq_hz`` to
    ``fault_freq_hz``, which is what a worn bearing or loose mount looks like
    to the detector.

    With ``phase_rad=0`` each window is an odd sequence whose real-part
    spectrum is all zeros, so the default phase is offset.
    """

    def __init__(
        self,
        *,
        sample_rate_hz: float = 600.0,
        freq_hz: float = 25.0,
        amplitude: float = 1.0,
        phase_rad: float = np.pi / 4.0,
        noise_std: float = 0.0,
        fault_after: Optional[int] = None,
        fault_freq_hz: float = 60.0,
        seed: int = 0,
    ) -> None:
        if sample_rate_hz <= 0:
            raise ValueError("sample_rate_hz must be positive")
        if noise_std < 0:
            raise ValueError("noise_std must be >= 0")
        self.sample_rate_hz = float(sample_rate_hz)
        self.freq_hz = float(freq_hz)
        self.amplitude = float(amplitude)
        self.phase_rad = float(phase_rad)
        self.noise_std = float(noise_std)
        self.fault_after = fault_after
        self.fault_freq_hz = float(fault_freq_hz)
        self._rng = np.random.default_rng(seed)

    def _freq_at(self, index: int) -> float:
        if self.fault_after is not None and index >= self.fault_after:
            return self.fault_freq_hz
        return self.freq_hz

    def samples(self, count: Optional[int] = None) -> Iterator[Sample]:
        index = 0
        while count is None or index < count:
            t = index / self.sample_rate_hz
            value = self.amplitude * np.sin(2.0 * np.pi * self._freq_at(index) * t + self.phase_rad)
            if self.noise_std > 0:
                value += self._rng.normal(0.0, self.noise_std)
            yield Sample(t=float(t), amplitude=float(value))
            index += 1

    def lines(self, count: Optional[int] = None) -> Iterator[str]:
        for sample in self.samples(count):
            yield encode_sample(sample) + "\n"
