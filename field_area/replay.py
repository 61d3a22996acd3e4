"""Replay recorded fixes from a CSV through a measurement session.

Expected columns: ``latitude``, ``longitude``, ``accuracy`` (metres) and
``timestamp`` (epoch seconds or ISO-8601 text). An optional ``walk`` column
splits the file into repeated walks of the same parcel.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .aggregation import MeasurementAggregator
from .config import SurveyConfig
from .errors import FixFileFormatError, InsufficientPointsError
from .models import GeoFix, MeasurementResult
from .session import SessionController
from .sources import ManualLocationSource, ManualTicker

_LOG = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("latitude", "longitude", "accuracy", "timestamp")
WALK_COLUMN = "walk"
DEFAULT_WALK = "1"


@dataclass(slots=True)
class ReplayOutcome:
    walk: str
    fix_count: int
    result: Optional[MeasurementResult] = None
    error: Optional[str] = None


def _parse_timestamps(series: pd.Series) -> pd.Series:
    """Return epoch seconds; text values are parsed as ISO-8601 datetimes."""

    numeric = pd.to_numeric(series, errors="coerce")
    text_mask = numeric.isna() & series.notna()
    if text_mask.any():
        parsed = pd.to_datetime(
            series[text_mask].astype(str), errors="coerce", utc=True, format="ISO8601"
        )
        seconds = (parsed - pd.Timestamp(0, tz="UTC")).dt.total_seconds()
        numeric = numeric.astype(float)
        numeric.loc[text_mask] = seconds
    return numeric.astype(float)


def load_fix_walks(csv_path: str | Path) -> Dict[str, List[GeoFix]]:
    """Load fixes grouped by walk, each walk ordered by timestamp.

    Raises:
        FixFileFormatError: A required column is missing.
    """

    path = Path(csv_path)
    df = pd.read_csv(path)
    df.columns = [str(col).strip().lower() for col in df.columns]
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise FixFileFormatError(
            f"Missing required column(s) {missing} in {path}; found {list(df.columns)}"
        )

    lats = pd.to_numeric(df["latitude"], errors="coerce")
    lons = pd.to_numeric(df["longitude"], errors="coerce")
    accuracies = pd.to_numeric(df["accuracy"], errors="coerce")
    timestamps = _parse_timestamps(df["timestamp"])
    # NaN and +-inf rows are both dropped.
    valid = (
        np.isfinite(lats) & np.isfinite(lons) & np.isfinite(accuracies) & np.isfinite(timestamps)
    )
    skipped = int((~valid).sum())
    if skipped:
        _LOG.warning("Skipped %d unparsable row(s) in %s", skipped, path)

    if WALK_COLUMN in df.columns:
        walks = df[WALK_COLUMN].fillna(DEFAULT_WALK).astype(str).str.strip()
    else:
        walks = pd.Series(DEFAULT_WALK, index=df.index)

    grouped: Dict[str, List[GeoFix]] = {}
    for idx in df.index[valid.to_numpy()]:
        fix = GeoFix(
            latitude=float(lats[idx]),
            longitude=float(lons[idx]),
            accuracy_m=float(accuracies[idx]),
            timestamp=float(timestamps[idx]),
        )
        grouped.setdefault(walks[idx], []).append(fix)
    for fixes in grouped.values():
        fixes.sort(key=lambda f: f.timestamp)
    return grouped


class WalkReplayer:
    """Feed recorded walks through a session on a simulated clock."""

    def __init__(
        self,
        config: SurveyConfig | None = None,
        aggregator: MeasurementAggregator | None = None,
    ) -> None:
        self.source = ManualLocationSource()
        self.ticker = ManualTicker()
        self.controller = SessionController(
            self.source, self.ticker, config, aggregator
        )

    @property
    def aggregator(self) -> MeasurementAggregator:
        return self.controller.aggregator

    def replay(self, fixes: Sequence[GeoFix]) -> MeasurementResult:
        """Replay one walk and return its result.

        At every tick all fixes stamped at or before the tick time are
        delivered, then the tick samples the latest of them.

        Raises:
            InsufficientPointsError: Fewer than three fixes were accepted.
        """

        ordered = sorted(fixes, key=lambda f: f.timestamp)
        interval = self.controller.config.tick_interval_s
        if ordered:
            self.ticker.now = ordered[0].timestamp - interval
        self.controller.start()
        idx = 0
        while idx < len(ordered):
            tick_time = self.ticker.now + interval
            while idx < len(ordered) and ordered[idx].timestamp <= tick_time:
                self.source.push(ordered[idx])
                idx += 1
            self.ticker.tick()
        return self.controller.stop()

    def replay_walks(self, walks: Dict[str, List[GeoFix]]) -> List[ReplayOutcome]:
        """Replay each walk in turn; failed walks are reported, not raised."""

        outcomes: List[ReplayOutcome] = []
        for walk, fixes in walks.items():
            outcome = ReplayOutcome(walk=walk, fix_count=len(fixes))
            try:
                outcome.result = self.replay(fixes)
            except InsufficientPointsError as exc:
                _LOG.warning("Walk %s discarded: %s", walk, exc)
                outcome.error = str(exc)
            outcomes.append(outcome)
        return outcomes


__all__ = [
    "REQUIRED_COLUMNS",
    "ReplayOutcome",
    "WalkReplayer",
    "load_fix_walks",
]
