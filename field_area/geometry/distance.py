"""Great-circle distance helpers for lat/lon coordinates."""

from __future__ import annotations

import math
from typing import Sequence

from ..models import LatLon

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(first: LatLon, second: LatLon) -> float:
    """Return the haversine distance in metres between two (lat, lon) points."""

    phi1 = math.radians(first[0])
    phi2 = math.radians(second[0])
    half_dphi = (phi2 - phi1) / 2.0
    half_dlambda = math.radians(second[1] - first[1]) / 2.0
    h = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2
    return 2.0 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(max(0.0, 1.0 - h)))


def path_length_m(points: Sequence[LatLon]) -> float:
    """Sum of haversine distances between consecutive points."""

    if len(points) < 2:
        return 0.0
    total = 0.0
    previous = points[0]
    for current in points[1:]:
        total += haversine_m(previous, current)
        previous = current
    return total


__all__ = ["EARTH_RADIUS_M", "haversine_m", "path_length_m"]
