"""Planar projections used by the area engine."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray
from pyproj import CRS, Transformer

from ..errors import ProjectionError
from ..models import LatLon

MetricArray = NDArray[np.float64]

# Metres per degree used by the flat local approximation.
FLAT_METERS_PER_DEGREE = 111_000.0

WGS84_EPSG = 4326


def utm_epsg(latitude: float, longitude: float) -> int:
    """Return the WGS84 UTM EPSG code for the zone containing a point."""

    zone = int((longitude + 180.0) // 6.0) + 1
    zone = max(1, min(zone, 60))
    if latitude >= 0:
        return 32600 + zone
    return 32700 + zone


def build_utm_transformer(centroid: LatLon) -> Transformer:
    """Build a lat/lon -> UTM transformer for the zone of ``centroid``.

    Raises:
        ProjectionError: The target CRS or transformer could not be created.
    """

    lat, lon = centroid
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ProjectionError(f"Centroid is not finite: {centroid!r}")
    epsg = utm_epsg(lat, lon)
    try:
        target_crs = CRS.from_epsg(epsg)
        return Transformer.from_crs(
            CRS.from_epsg(WGS84_EPSG), target_crs, always_xy=True
        )
    except Exception as exc:
        raise ProjectionError(f"Unable to build UTM transformer EPSG:{epsg}") from exc


def project_points(points: Sequence[LatLon], transformer: Transformer) -> MetricArray:
    """Project lat/lon pairs through an existing transformer.

    Raises:
        ProjectionError: Any projected coordinate is not finite.
    """

    if not points:
        return np.empty((0, 2), dtype=float)
    lats = np.asarray([pt[0] for pt in points], dtype=float)
    lons = np.asarray([pt[1] for pt in points], dtype=float)
    try:
        xs, ys = transformer.transform(lons, lats)
    except Exception as exc:
        raise ProjectionError("Coordinate transform failed") from exc
    metric = np.column_stack((xs, ys)).astype(float, copy=False)
    if not np.all(np.isfinite(metric)):
        raise ProjectionError("Projection produced non-finite coordinates")
    return metric


def flat_project(points: Sequence[LatLon]) -> MetricArray:
    """Project onto a local plane scaled at the mean latitude of ``points``."""

    if not points:
        return np.empty((0, 2), dtype=float)
    lats = np.asarray([pt[0] for pt in points], dtype=float)
    lons = np.asarray([pt[1] for pt in points], dtype=float)
    mean_lat_rad = math.radians(float(np.mean(lats)))
    xs = lons * FLAT_METERS_PER_DEGREE * math.cos(mean_lat_rad)
    ys = lats * FLAT_METERS_PER_DEGREE
    return np.column_stack((xs, ys))


__all__ = [
    "FLAT_METERS_PER_DEGREE",
    "MetricArray",
    "build_utm_transformer",
    "flat_project",
    "project_points",
    "utm_epsg",
]
