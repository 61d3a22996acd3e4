"""Close an open boundary walk into a polygon ring."""

from __future__ import annotations

import logging
from typing import Sequence

from ..config import CLOSURE_THRESHOLD_M
from ..errors import InsufficientPointsError
from ..models import ClosedPolygon, LatLon
from .distance import haversine_m

_LOG = logging.getLogger(__name__)

MIN_POLYGON_POINTS = 3


class PolygonCloser:
    """Append a closing vertex when the walk did not end near its start."""

    def __init__(self, closure_threshold_m: float = CLOSURE_THRESHOLD_M) -> None:
        if closure_threshold_m < 0:
            raise ValueError("closure_threshold_m must be >= 0")
        self.closure_threshold_m = closure_threshold_m

    def close(self, points: Sequence[LatLon]) -> ClosedPolygon:
        """Return the closed ring for ``points``.

        Raises:
            InsufficientPointsError: Fewer than three points were supplied.
        """

        if len(points) < MIN_POLYGON_POINTS:
            raise InsufficientPointsError(len(points), MIN_POLYGON_POINTS)
        ring = [(float(lat), float(lon)) for lat, lon in points]
        gap = haversine_m(ring[0], ring[-1])
        if gap > self.closure_threshold_m:
            ring.append(ring[0])
            _LOG.debug("Closing gap %.2f m; appended start vertex", gap)
            return ClosedPolygon(tuple(ring), explicitly_closed=True, closure_gap_m=gap)
        return ClosedPolygon(tuple(ring), explicitly_closed=False, closure_gap_m=gap)


__all__ = ["MIN_POLYGON_POINTS", "PolygonCloser"]
