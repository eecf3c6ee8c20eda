"""JSON-lines record decoding for signal samples."""

from __future__ import annotations

import json
import math
import sys
from typing import Any, Iterator, Mapping, Optional

from vibewatch.detection.types import Sample
from vibewatch.util.errors import RecordError


def _number(obj: Mapping[str, Any], key: str) -> float:
    if key not in obj:
        raise RecordError(f"missing field '{key}'")
    raw = obj[key]
    if isinstance(raw, bool) or raw is None:
        raise RecordError(f"field '{key}' must be numeric, got {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise RecordError(f"field '{key}' must be numeric, got {raw!r}") from exc
    if not math.isfinite(value):
        raise RecordError(f"field '{key}' must be finite, got {raw!r}")
    return value


def parse_sample(obj: Any) -> Sample:
    if not isinstance(obj, Mapping):
        raise RecordError(f"record must be a JSON object, got {type(obj).__name__}")
    return Sample(t=_number(obj, "t"), amplitude=_number(obj, "amplitude"))


def decode_line(line: str, *, line_no: Optional[int] = None) -> Optional[Sample]:
    """Decode one JSON line; blank lines yield None."""
    text = line.strip()
    if not text:
        return None
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordError(f"invalid JSON: {exc.msg}", line_no=line_no) from exc
    try:
        return parse_sample(obj)
    except RecordError as exc:
        raise RecordError(str(exc), line_no=line_no) from exc


def encode_sample(sample: Sample) -> str:
    return json.dumps({"t": sample.t, "amplitude": sample.amplitude}, separators=(",", ":"))


def iter_lines(path: str) -> Iterator[str]:
    """Yield raw lines from ``path``, or from stdin when path is '-'."""
    if path == "-":
        for line in sys.stdin:
            yield line
        return
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            yield line
