"""Detector profile dataclasses and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class DetectorProfile:
    name: str
    description: str
    window_size: Optional[int] = None
    change_threshold_pct: Optional[float] = None
    selection: Optional[str] = None
    batch_records: Optional[int] = None


def default_detector_profiles() -> Dict[str, DetectorProfile]:
    profiles = [
        DetectorProfile(
            name="vibration",
            description="General machine vibration: 600-sample windows, alert above 8% change",
            window_size=600,
            change_threshold_pct=8.0,
            selection="latest",
        ),
        DetectorProfile(
            name="sensitive",
            description="Same windows as 'vibration' with a 4% alert threshold",
            window_size=600,
            change_threshold_pct=4.0,
            selection="latest",
        ),
        DetectorProfile(
            name="parity",
            description="Cap-before-sort window selection matching the original streaming job",
            window_size=600,
            change_threshold_pct=8.0,
            selection="arrival",
        ),
        DetectorProfile(
            name="coarse",
            description="Short 256-sample windows for low-rate sensors, alert above 15% change",
            window_size=256,
            change_threshold_pct=15.0,
            selection="latest",
            batch_records=256,
        ),
    ]
    return {p.name.lower(): p for p in profiles}


def serialize_profiles() -> Dict[str, Any]:
    """Return ordered JSON-serializable description of built-in profiles."""

    profiles = default_detector_profiles()
    ordered = sorted(profiles.values(), key=lambda p: p.name.lower())
    payload = {
        "profiles": [
            {
                "name": prof.name,
                "description": prof.description,
                "window_size": prof.window_size,
                "change_threshold_pct": prof.change_threshold_pct,
                "selection": prof.selection,
                "batch_records": prof.batch_records,
            }
            for prof in ordered
        ]
    }
    return payload
