"""Central configuration for the field area survey engine.

All values are constants imported by the rest of the package. Adjust as needed
for your device or environment. Each threshold can be overridden through an
environment variable (optionally via a local `.env`).
"""

from __future__ import annotations

from dataclasses import dataclass
import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Fix filtering
# ---------------------------------------------------------------------------
# Fixes reporting a horizontal accuracy worse than this (metres) are skipped.
ACCURACY_THRESHOLD_M = _env_float("FIELD_AREA_ACCURACY_THRESHOLD_M", 10.0)

# Fixes closer than this (metres) to the last accepted point are jitter.
MIN_DISTANCE_THRESHOLD_M = _env_float("FIELD_AREA_MIN_DISTANCE_M", 2.0)


# ---------------------------------------------------------------------------
# Polygon closing and area
# ---------------------------------------------------------------------------
# First/last gap (metres) above which an explicit closing vertex is appended.
CLOSURE_THRESHOLD_M = _env_float("FIELD_AREA_CLOSURE_THRESHOLD_M", 5.0)

# Latitude or longitude span (degrees) above which the UTM projection is used
# instead of the flat local approximation. 0.01 degrees is roughly 1.1 km.
PROJECTED_MODE_EXTENT_DEG = _env_float("FIELD_AREA_PROJECTED_EXTENT_DEG", 0.01)


# ---------------------------------------------------------------------------
# Session recording
# ---------------------------------------------------------------------------
# Period (seconds) of the ticker that samples the most recent fix.
TICK_INTERVAL_S = _env_float("FIELD_AREA_TICK_INTERVAL_S", 1.0)

# Cap on accepted points kept per session. Oldest points are dropped beyond it.
MAX_RECORDED_POINTS = _env_int("FIELD_AREA_MAX_RECORDED_POINTS", 10_000)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------
SQUARE_METERS_PER_ACRE = 4047.0
SQUARE_METERS_PER_HECTARE = 10_000.0
SQUARE_METERS_PER_GUNTHA = 101.17
SQUARE_METERS_PER_CENT = 40.4686

# Decimal places used when results are exported.
METRIC_PRECISION = 2
UNIT_PRECISION = 4


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
OUTPUT_FILE = os.getenv("FIELD_AREA_OUTPUT_FILE", "field_measurements")

# Append _YYYYMMDD_HHMMSS to the output name when True.
OUTPUT_FILE_TIMESTAMP_ENABLED = _env_bool("FIELD_AREA_OUTPUT_TIMESTAMP", True)

# Automatically size columns after writing each sheet (openpyxl only).
EXCEL_AUTOSIZE_COLUMNS = True
EXCEL_AUTOSIZE_MAX_WIDTH = 50  # characters
EXCEL_AUTOSIZE_MIN_WIDTH = 6  # characters
EXCEL_AUTOSIZE_PADDING = 2  # extra characters added to the detected max


@dataclass(frozen=True, slots=True)
class SurveyConfig:
    """Immutable snapshot of the thresholds used by one measurement session."""

    accuracy_threshold_m: float = ACCURACY_THRESHOLD_M
    min_distance_threshold_m: float = MIN_DISTANCE_THRESHOLD_M
    closure_threshold_m: float = CLOSURE_THRESHOLD_M
    projected_mode_extent_deg: float = PROJECTED_MODE_EXTENT_DEG
    tick_interval_s: float = TICK_INTERVAL_S
    max_recorded_points: int = MAX_RECORDED_POINTS

    def __post_init__(self) -> None:
        if self.accuracy_threshold_m <= 0:
            raise ValueError("accuracy_threshold_m must be > 0")
        if self.min_distance_threshold_m < 0:
            raise ValueError("min_distance_threshold_m must be >= 0")
        if self.closure_threshold_m < 0:
            raise ValueError("closure_threshold_m must be >= 0")
        if self.projected_mode_extent_deg <= 0:
            raise ValueError("projected_mode_extent_deg must be > 0")
        if self.tick_interval_s <= 0:
            raise ValueError("tick_interval_s must be > 0")
        if self.max_recorded_points < 3:
            raise ValueError("max_recorded_points must be >= 3")
