"""Alert decision for spectral change percentages."""

from __future__ import annotations

from dataclasses import dataclass

ALERT_BANNER = "<---------- SIMULATING FAILURE EVENT ---------->"


def should_alert(change_percent: float, threshold: float) -> bool:
    """Alert strictly above the threshold; equality does not alert."""
    return float(change_percent) > float(threshold)


@dataclass(frozen=True)
class AlertPolicy:
    threshold: float = 8.0

    def evaluate(self, change_percent: float) -> bool:
        return should_alert(change_percent, self.threshold)
