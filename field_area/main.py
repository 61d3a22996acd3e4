"""Command-line entry point: replay recorded walks and report their areas.

Run:
    python -m field_area replay --csv walks.csv --out results.xlsx
"""

from __future__ import annotations

import argparse
from datetime import datetime
import logging
from typing import Sequence

from .config import (
    OUTPUT_FILE,
    OUTPUT_FILE_TIMESTAMP_ENABLED,
    SurveyConfig,
)
from .errors import FixFileFormatError
from .export import write_measurements
from .models import AggregateResult
from .replay import WalkReplayer, load_fix_walks
from .store import MeasurementStore

_LOG = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _resolve_output_path() -> str:
    if OUTPUT_FILE_TIMESTAMP_ENABLED:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{OUTPUT_FILE}_{timestamp}.xlsx"
    return f"{OUTPUT_FILE}.xlsx"


def _config_from_args(args: argparse.Namespace) -> SurveyConfig:
    overrides = {
        "accuracy_threshold_m": args.accuracy_threshold,
        "min_distance_threshold_m": args.min_distance,
        "closure_threshold_m": args.closure_threshold,
        "tick_interval_s": args.tick_interval,
    }
    return SurveyConfig(**{k: v for k, v in overrides.items() if v is not None})


def _cmd_replay(args: argparse.Namespace) -> int:
    try:
        config = _config_from_args(args)
    except ValueError as exc:
        _LOG.error("Invalid configuration: %s", exc)
        return 2
    try:
        walks = load_fix_walks(args.csv)
    except (FixFileFormatError, FileNotFoundError) as exc:
        _LOG.error("Failed to load fixes from '%s': %s", args.csv, exc)
        return 1
    if not walks:
        _LOG.error("No usable fixes found in '%s'", args.csv)
        return 1

    replayer = WalkReplayer(config)
    store = MeasurementStore()
    outcomes = replayer.replay_walks(walks)
    for outcome in outcomes:
        if outcome.result is None:
            continue
        store.save(outcome.result)
        r = outcome.result
        _LOG.info(
            "Walk %s: area %.2f m2 (%.4f acres, %.4f guntha), perimeter %.2f m, "
            "quality %.1f%%",
            outcome.walk,
            r.area_m2,
            r.acres,
            r.guntha,
            r.perimeter_m,
            r.data_quality_percent,
        )

    average = replayer.aggregator.compute_average()
    aggregate: AggregateResult | None = None
    if isinstance(average, AggregateResult):
        aggregate = average
        _LOG.info(
            "Average over %d walks: %.2f m2 (%.4f acres), perimeter %.2f m",
            average.count,
            average.area_m2,
            average.acres,
            average.perimeter_m,
        )
    else:
        _LOG.info("Average unavailable: %s", average.reason)

    stats = store.stats()
    _LOG.info(
        "Stored %d measurements, total %.2f m2, data quality %.1f%%",
        stats.total_measurements,
        stats.total_area_m2,
        stats.data_quality_percent,
    )

    if args.out or args.excel:
        output = args.out or _resolve_output_path()
        write_measurements(output, replayer.aggregator.results, aggregate)
    return 0 if stats.total_measurements else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="field_area")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_replay = sub.add_parser("replay", help="Replay walks recorded in a CSV file")
    p_replay.add_argument("--csv", required=True, help="CSV with recorded fixes")
    p_replay.add_argument("--out", default=None, help="Write results to this .xlsx")
    p_replay.add_argument(
        "--excel",
        action="store_true",
        help="Write results to the configured default output workbook",
    )
    p_replay.add_argument("--accuracy-threshold", type=float, default=None)
    p_replay.add_argument("--min-distance", type=float, default=None)
    p_replay.add_argument("--closure-threshold", type=float, default=None)
    p_replay.add_argument("--tick-interval", type=float, default=None)
    p_replay.set_defaults(func=_cmd_replay)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _setup_logging(args.verbose)
    return int(args.func(args))


__all__ = ["build_parser", "main"]
