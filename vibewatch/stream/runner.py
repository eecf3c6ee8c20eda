"""High-level runner that feeds micro-batches through the spectral change detector."""

from __future__ import annotations

import signal
import threading
import time
from typing import Iterable, Iterator, List, Optional

from vibewatch.config import DetectorConfig
from vibewatch.detection.engine import SpectralChangeDetector
from vibewatch.detection.policy import ALERT_BANNER
from vibewatch.detection.types import (
    ALERT,
    CHANGE,
    DEGENERATE_SPECTRUM,
    INSUFFICIENT_SAMPLES,
    SAMPLES_SEEN,
    DetectorEvent,
)
from vibewatch.io.records import iter_lines
from vibewatch.io.synth import SyntheticVibration
from vibewatch.stream.batcher import Batch, MicroBatcher
from vibewatch.util.duration import parse_duration_to_seconds
from vibewatch.util.event_log import EventLog
from vibewatch.util.exit_codes import ExitCode
from vibewatch.util.logging import get_logger

logger = get_logger(__name__)


class DetectorRunner:
    """Bind CLI args to input source, batcher, detector, and outputs."""

    def __init__(self, args, *, lines: Optional[Iterable[str]] = None):
        self.args = args
        self.config = DetectorConfig(
            window_size=int(args.window_size),
            change_threshold_pct=float(args.threshold),
            selection=str(args.selection),
        )
        self.detector = SpectralChangeDetector(self.config)
        batch_records = getattr(args, "batch_records", None) or self.config.window_size
        self.batcher = MicroBatcher(int(batch_records), getattr(args, "batch_span", None))
        self.event_log = EventLog.from_path(getattr(args, "jsonl", None))
        self._lines = lines
        self._stop = threading.Event()
        self._in_batch = threading.Event()
        self.batches_dropped = 0
        self.alerts = 0

    def _source_lines(self) -> Iterable[str]:
        if self._lines is not None:
            return self._lines
        if getattr(self.args, "synthetic", False):
            synth = SyntheticVibration(
                sample_rate_hz=float(self.args.synth_rate),
                freq_hz=float(self.args.synth_freq),
                noise_std=float(self.args.synth_noise),
                fault_after=self.args.synth_fault_after,
                fault_freq_hz=float(self.args.synth_fault_freq),
                seed=int(self.args.synth_seed),
            )
            return synth.lines(self.args.synth_count)
        return iter_lines(self.args.input)

    def _batches(self) -> Iterator[Batch]:
        duration_s = parse_duration_to_seconds(getattr(self.args, "duration", None))
        max_batches = getattr(self.args, "max_batches", None)
        start_time = time.time()
        for count, batch in enumerate(self.batcher.batches(self._source_lines()), start=1):
            yield batch
            if self._stop.is_set():
                break
            if max_batches is not None and count >= int(max_batches):
                break
            if duration_s is not None and (time.time() - start_time) >= duration_s:
                break
            pause = float(getattr(self.args, "sleep_between_batches", 0.0) or 0.0)
            if pause > 0:
                time.sleep(pause)

    def request_stop(self) -> None:
        """Stop after the batch currently being processed."""
        self._stop.set()

    def handle_sigint(self, signum, frame) -> None:
        """First Ctrl-C during a batch lets it finish; otherwise stop now."""
        if self._in_batch.is_set() and not self._stop.is_set():
            self._stop.set()
            logger.warning("Interrupt received; stopping after the current batch (Ctrl-C again to abort)")
            return
        self._stop.set()
        raise KeyboardInterrupt

    def _emit(self, event: DetectorEvent) -> None:
        if self.event_log:
            self.event_log.log(event.kind, **event.to_record())
        if event.kind == SAMPLES_SEEN:
            print(f"Number of samples received: {event.payload['samples_seen']}", flush=True)
        elif event.kind == INSUFFICIENT_SAMPLES:
            print("Insufficient samples to determine frequency profile", flush=True)
        elif event.kind == DEGENERATE_SPECTRUM:
            print(f"Spectrum comparison skipped: {event.payload['error']}", flush=True)
        elif event.kind == CHANGE and event.payload.get("compared"):
            print(f"Vibration signal has changed by {event.payload['change_percent']:.2f}%", flush=True)
        elif event.kind == ALERT:
            self.alerts += 1
            print(ALERT_BANNER, flush=True)

    def process(self, batch: Batch) -> List[DetectorEvent]:
        if batch.error is not None:
            self.batches_dropped += 1
            logger.error(
                "Dropping batch %d: %s",
                batch.seq,
                batch.error,
                extra={"batch_seq": batch.seq, "error_type": "record_decode"},
            )
            if self.event_log:
                self.event_log.log("batch_dropped", batch_seq=batch.seq, records=len(batch), error=str(batch.error))
            return []
        events = self.detector.process_batch(batch.samples)
        for event in events:
            self._emit(event)
        return events

    def run(self) -> int:
        print(f"Alerting when FFT signal changes more than {self.config.change_threshold_pct}%", flush=True)
        previous_handler = None
        if threading.current_thread() is threading.main_thread():
            previous_handler = signal.signal(signal.SIGINT, self.handle_sigint)
        try:
            for batch in self._batches():
                self._in_batch.set()
                try:
                    self.process(batch)
                finally:
                    self._in_batch.clear()
        except KeyboardInterrupt:
            self._stop.set()
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)
        logger.info(
            "Processed %d batches (%d dropped, %d alerts)",
            self.detector.batches_processed,
            self.batches_dropped,
            self.alerts,
        )
        return ExitCode.INTERRUPTED if self._stop.is_set() else ExitCode.SUCCESS
