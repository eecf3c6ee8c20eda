"""Dataclasses shared across windowing, baseline, and detection layers."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Sample:
    t: float
    amplitude: float


@dataclass(frozen=True)
class ChangeReport:
    change_percent: Optional[float]
    compared: bool


# Event kinds emitted by the batch handler
SAMPLES_SEEN = "samples_seen"
INSUFFICIENT_SAMPLES = "insufficient_samples"
CHANGE = "change"
DEGENERATE_SPECTRUM = "degenerate_spectrum"
ALERT = "alert"


@dataclass(frozen=True)
class DetectorEvent:
    kind: str
    batch_seq: int
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        return {"batch_seq": self.batch_seq, **self.payload}
