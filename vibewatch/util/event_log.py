"""Line-delimited JSON sink for detector events."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any, Optional

from vibewatch.util.time import utc_now_str


class EventLog:
    def __init__(self, log_path: Path):
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.run_id = f"run-{int(time.time() * 1000)}-pid{os.getpid()}"

    @classmethod
    def from_path(cls, path: Optional[str]) -> Optional["EventLog"]:
        if not path:
            return None
        return cls(Path(path).expanduser())

    def log(self, event: str, **fields: Any) -> None:
        record = {
            "ts": utc_now_str(),
            "run_id": self.run_id,
            "event": event,
            **fields,
        }
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, default=str) + "\n")
