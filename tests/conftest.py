"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable fixture factories for fixes,
squares and measurement results.
"""
from __future__ import annotations

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from field_area.config import SurveyConfig
from field_area.models import AreaMode, GeoFix, MeasurementResult
from field_area.sources import ManualLocationSource, ManualTicker
from field_area.units import convert_area

# ~100 m at the equator.
SQUARE_SIDE_DEG = 0.0009044


# --- Factory helpers -------------------------------------------------
def make_fix(lat, lon, accuracy=3.0, ts=0.0):
    return GeoFix(latitude=lat, longitude=lon, accuracy_m=accuracy, timestamp=ts)


def square_latlon(side=SQUARE_SIDE_DEG, origin=(0.0, 0.0)):
    lat0, lon0 = origin
    return [
        (lat0, lon0),
        (lat0, lon0 + side),
        (lat0 + side, lon0 + side),
        (lat0 + side, lon0),
    ]


def make_result(area_m2, perimeter_m=400.0, index=1, points=10, skipped=0, accuracy=4.0):
    units = convert_area(area_m2)
    return MeasurementResult(
        perimeter_m=perimeter_m,
        area_m2=area_m2,
        acres=units.acres,
        hectares=units.hectares,
        guntha=units.guntha,
        cents=units.cents,
        points_recorded=points,
        closed_polygon_point_count=points + 1,
        avg_accuracy_m=accuracy,
        skipped_point_count=skipped,
        data_quality_percent=100.0,
        measurement_index=index,
        area_mode=AreaMode.FLAT,
    )


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def survey_config():
    return SurveyConfig(
        accuracy_threshold_m=10.0,
        min_distance_threshold_m=2.0,
        closure_threshold_m=5.0,
        tick_interval_s=1.0,
        max_recorded_points=1000,
    )


@pytest.fixture
def location_source():
    return ManualLocationSource()


@pytest.fixture
def ticker():
    return ManualTicker()


@pytest.fixture
def square_fixes():
    return [make_fix(lat, lon, ts=float(i)) for i, (lat, lon) in enumerate(square_latlon())]
