#!/usr/bin/env python3
"""vibewatch CLI entrypoint (package module)."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, List, Optional, Set

from vibewatch.config import DetectorConfig
from vibewatch.dsp.windowing import SELECTION_MODES
from vibewatch.io.profiles import default_detector_profiles, serialize_profiles
from vibewatch.stream.runner import DetectorRunner
from vibewatch.util.duration import parse_duration_to_seconds
from vibewatch.util.exit_codes import ExitCode
from vibewatch.util.logging import configure_logging, get_logger


def run(args: argparse.Namespace) -> int:
    """Top-level CLI dispatcher that delegates execution to stream.runner."""
    if getattr(args, "list_profiles", False):
        _emit_profiles_json()
        return ExitCode.SUCCESS
    configure_logging(level=args.log_level, json_file=args.log_json)
    logger = get_logger(__name__)
    try:
        runner = DetectorRunner(args)
    except ValueError as exc:
        logger.error("Invalid detector settings: %s", exc)
        code = ExitCode.INVALID_ARGS
    except OSError as exc:
        logger.error("Cannot open event log %s: %s", args.jsonl, exc)
        code = ExitCode.INPUT_UNAVAILABLE
    else:
        try:
            code = runner.run()
        except OSError as exc:
            logger.error("Cannot read input %s: %s", args.input, exc)
            code = ExitCode.INPUT_UNAVAILABLE
    if code != ExitCode.SUCCESS:
        logger.info("Exiting with code %d (%s)", code, ExitCode.message(code))
    return code


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(
        description="Spectral change detector for streaming vibration samples (JSON lines of {t, amplitude})",
        argument_default=argparse.SUPPRESS,
    )
    p.add_argument("--input", type=str, help="JSON-lines input file, or '-' for stdin (default -)")
    p.add_argument("--synthetic", action="store_true", help="Read from the built-in synthetic vibration generator instead of --input")

    p.add_argument("--window-size", dest="window_size", type=int, help="Samples per FFT window (default 600)")
    p.add_argument("--threshold", type=float, help="Alert when the spectrum changes by more than this percent (default 8.0)")
    p.add_argument("--selection", choices=list(SELECTION_MODES), help="Window selection: 'latest' sorts then keeps the newest samples, 'arrival' caps then sorts (default latest)")
    p.add_argument("--profile", type=str, help="Detector profile name to pre-load defaults (see --list-profiles)")
    p.add_argument("--list-profiles", dest="list_profiles", action="store_true", help="Print built-in detector profiles as JSON and exit")

    p.add_argument("--batch-records", dest="batch_records", type=int, help="Records per micro-batch (defaults to --window-size)")
    p.add_argument("--batch-span", dest="batch_span", type=float, help="Also close a batch once sample time spans this many seconds")
    p.add_argument("--max-batches", dest="max_batches", type=int, help="Stop after N batches")
    p.add_argument("--duration", type=str, help="Stop after a wall-clock duration (e.g., '300', '10m', '2h')")
    p.add_argument("--sleep-between-batches", dest="sleep_between_batches", type=float, help="Seconds to sleep between batches (default 0)")

    p.add_argument("--jsonl", type=str, help="Append detector events as line-delimited JSON to this path")
    p.add_argument("--log-level", dest="log_level", type=str, help="Log level (default from VIBEWATCH_LOG_LEVEL or INFO)")
    p.add_argument("--log-json", dest="log_json", type=str, help="Also write JSON-formatted logs to this path")

    p.add_argument("--synth-rate", dest="synth_rate", type=float, help="Synthetic sample rate [Hz] (default 600)")
    p.add_argument("--synth-freq", dest="synth_freq", type=float, help="Synthetic tone frequency [Hz] (default 25)")
    p.add_argument("--synth-noise", dest="synth_noise", type=float, help="Synthetic gaussian noise std-dev (default 0.01)")
    p.add_argument("--synth-fault-after", dest="synth_fault_after", type=int, help="Switch tone after this many samples")
    p.add_argument("--synth-fault-freq", dest="synth_fault_freq", type=float, help="Tone frequency after the fault [Hz] (default 60)")
    p.add_argument("--synth-count", dest="synth_count", type=int, help="Stop the generator after N samples (default unlimited)")
    p.add_argument("--synth-seed", dest="synth_seed", type=int, help="Noise RNG seed (default 0)")

    args = p.parse_args(argv)
    args._cli_overrides = set()

    env_defaults = DetectorConfig.from_env()
    _set_default(args, args._cli_overrides, "input", "-")
    _set_default(args, args._cli_overrides, "synthetic", False)
    _set_default(args, args._cli_overrides, "window_size", env_defaults.window_size)
    _set_default(args, args._cli_overrides, "threshold", env_defaults.change_threshold_pct)
    _set_default(args, args._cli_overrides, "selection", env_defaults.selection)
    _set_default(args, args._cli_overrides, "profile", None)
    _set_default(args, args._cli_overrides, "list_profiles", False)
    _set_default(args, args._cli_overrides, "batch_records", None)
    _set_default(args, args._cli_overrides, "batch_span", None)
    _set_default(args, args._cli_overrides, "max_batches", None)
    _set_default(args, args._cli_overrides, "duration", None)
    _set_default(args, args._cli_overrides, "sleep_between_batches", 0.0)
    _set_default(args, args._cli_overrides, "jsonl", None)
    _set_default(args, args._cli_overrides, "log_level", None)
    _set_default(args, args._cli_overrides, "log_json", None)
    _set_default(args, args._cli_overrides, "synth_rate", 600.0)
    _set_default(args, args._cli_overrides, "synth_freq", 25.0)
    _set_default(args, args._cli_overrides, "synth_noise", 0.01)
    _set_default(args, args._cli_overrides, "synth_fault_after", None)
    _set_default(args, args._cli_overrides, "synth_fault_freq", 60.0)
    _set_default(args, args._cli_overrides, "synth_count", None)
    _set_default(args, args._cli_overrides, "synth_seed", 0)

    if args.profile:
        _apply_profile(args, p)

    delattr(args, "_cli_overrides")

    if args.list_profiles:
        return args

    if args.window_size < 1:
        p.error("--window-size must be >= 1")
    if not 0.0 <= args.threshold <= 100.0:
        p.error("--threshold must be within 0..100")
    if args.batch_records is not None and args.batch_records < 1:
        p.error("--batch-records must be >= 1")
    if args.batch_span is not None and args.batch_span <= 0:
        p.error("--batch-span must be > 0")
    if args.max_batches is not None and args.max_batches < 1:
        p.error("--max-batches must be >= 1")
    if args.synth_rate <= 0:
        p.error("--synth-rate must be > 0")
    if args.synth_noise < 0:
        p.error("--synth-noise must be >= 0")
    if args.duration:
        try:
            parse_duration_to_seconds(args.duration)
        except argparse.ArgumentTypeError as exc:
            p.error(str(exc))

    return args


def _set_default(args: argparse.Namespace, overrides: Set[str], attr: str, value: Any) -> None:
    if hasattr(args, attr):
        overrides.add(attr)
    else:
        setattr(args, attr, value)


def _apply_profile(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    profile = default_detector_profiles().get(str(args.profile).lower())
    if not profile:
        parser.error(f"Unknown detector profile '{args.profile}'. Use --list-profiles to inspect options.")

    overrides: Set[str] = getattr(args, "_cli_overrides", set())

    def maybe_set(attr: str, value: Any) -> None:
        if value is None:
            return
        if attr in overrides:
            return
        setattr(args, attr, value)

    maybe_set("window_size", profile.window_size)
    maybe_set("threshold", profile.change_threshold_pct)
    maybe_set("selection", profile.selection)
    maybe_set("batch_records", profile.batch_records)

    print(f"[profile] Applied profile '{profile.name}'", file=sys.stderr, flush=True)


def _emit_profiles_json() -> None:
    payload = serialize_profiles()
    print(json.dumps(payload, indent=2, sort_keys=True))


def main(argv: Optional[List[str]] = None) -> int:
    return run(parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
