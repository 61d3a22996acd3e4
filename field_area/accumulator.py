"""Live running distance shown while a boundary is being walked."""

from __future__ import annotations

from typing import Optional

from .geometry.distance import haversine_m
from .models import LatLon


class DistanceAccumulator:
    """Running haversine total over accepted points.

    Informational only: the reported perimeter is recomputed over the closed
    polygon when the session stops.
    """

    def __init__(self) -> None:
        self.total_m = 0.0
        self._previous: Optional[LatLon] = None

    def add(self, point: LatLon) -> float:
        """Record an accepted point and return the distance it added."""

        step = 0.0
        if self._previous is not None:
            step = haversine_m(self._previous, point)
            self.total_m += step
        self._previous = point
        return step


__all__ = ["DistanceAccumulator"]
