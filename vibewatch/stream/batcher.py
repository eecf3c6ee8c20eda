"""Micro-batch grouping of decoded input records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from vibewatch.detection.types import Sample
from vibewatch.io.records import decode_line
from vibewatch.util.errors import RecordError


@dataclass
class Batch:
    """Records delivered together.

    Every line is decoded once, here. A malformed line keeps its slot in the
    batch (``line_nos``) and the first decode failure is kept in ``error`` so
    the runner can reject the batch as a whole.
    """

    seq: int
    samples: List[Sample] = field(default_factory=list)
    line_nos: List[int] = field(default_factory=list)
    error: Optional[RecordError] = None

    def append(self, line_no: int, sample: Optional[Sample], error: Optional[RecordError] = None) -> None:
        self.line_nos.append(line_no)
        if sample is not None:
            self.samples.append(sample)
        if error is not None and self.error is None:
            self.error = error

    def __len__(self) -> int:
        return len(self.line_nos)


class MicroBatcher:
    """Group a line stream into batches by record count and, optionally, signal time span."""

    def __init__(self, max_records: int, max_span_s: Optional[float] = None) -> None:
        if max_records <= 0:
            raise ValueError("max_records must be positive")
        if max_span_s is not None and max_span_s <= 0:
            raise ValueError("max_span_s must be positive")
        self.max_records = int(max_records)
        self.max_span_s = float(max_span_s) if max_span_s is not None else None

    def batches(self, lines: Iterable[str]) -> Iterator[Batch]:
        seq = 1
        current = Batch(seq=seq)
        batch_start_t: Optional[float] = None
        for line_no, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            sample: Optional[Sample] = None
            error: Optional[RecordError] = None
            try:
                sample = decode_line(line, line_no=line_no)
            except RecordError as exc:
                error = exc
            if self.max_span_s is not None and sample is not None:
                if batch_start_t is None:
                    batch_start_t = sample.t
                elif sample.t - batch_start_t >= self.max_span_s and len(current):
                    yield current
                    seq += 1
                    current = Batch(seq=seq)
                    batch_start_t = sample.t
            current.append(line_no, sample, error)
            if len(current) >= self.max_records:
                yield current
                seq += 1
                current = Batch(seq=seq)
                batch_start_t = None
        if len(current):
            yield current
