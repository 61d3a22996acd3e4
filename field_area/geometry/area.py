"""Perimeter and area over a closed polygon.

The engine picks one of two planar strategies from the polygon's extent:

* ``FLAT`` scales degrees to metres around the mean latitude. It is cheap and
  accurate enough for parcels up to roughly a kilometre across.
* ``PROJECTED`` projects every vertex into the UTM zone of the centroid.

When the UTM projection cannot be built or produces invalid coordinates the
engine falls back to ``FLAT`` and flags the computation as degraded.

Polygons crossing the antimeridian are not handled: the zone choice and the
area are undefined for them.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

import numpy as np

from ..config import PROJECTED_MODE_EXTENT_DEG
from ..errors import ProjectionError
from ..models import AreaComputation, AreaMode, ClosedPolygon, LatLon
from .distance import path_length_m
from .projection import (
    MetricArray,
    build_utm_transformer,
    flat_project,
    project_points,
)

_LOG = logging.getLogger(__name__)

TransformerFactory = Callable[[LatLon], object]


def shoelace_area(points: MetricArray) -> float:
    """Return the unsigned area of a planar ring.

    The ring may or may not repeat its first vertex at the end; a repeated
    vertex contributes a zero term.
    """

    if len(points) < 3:
        return 0.0
    # Centre the ring first; translation leaves the area unchanged.
    centred = points - points.mean(axis=0)
    xs = centred[:, 0]
    ys = centred[:, 1]
    signed = np.sum(xs * np.roll(ys, -1) - np.roll(xs, -1) * ys) / 2.0
    return float(abs(signed))


def select_mode(
    vertices: Sequence[LatLon], extent_deg: float = PROJECTED_MODE_EXTENT_DEG
) -> AreaMode:
    """Use the UTM projection when either coordinate span exceeds ``extent_deg``."""

    lats = [pt[0] for pt in vertices]
    lons = [pt[1] for pt in vertices]
    lat_range = max(lats) - min(lats)
    lon_range = max(lons) - min(lons)
    if lat_range > extent_deg or lon_range > extent_deg:
        return AreaMode.PROJECTED
    return AreaMode.FLAT


class AreaEngine:
    """Compute perimeter and area of a :class:`ClosedPolygon`."""

    def __init__(
        self,
        extent_deg: float = PROJECTED_MODE_EXTENT_DEG,
        transformer_factory: TransformerFactory = build_utm_transformer,
    ) -> None:
        self.extent_deg = extent_deg
        self._transformer_factory = transformer_factory

    def compute(
        self, polygon: ClosedPolygon, *, force_mode: Optional[AreaMode] = None
    ) -> AreaComputation:
        if len(polygon) < 3:
            raise ValueError("A closed polygon needs at least three entries")
        perimeter = path_length_m(polygon.points)
        vertices = polygon.vertices
        mode = force_mode or select_mode(vertices, self.extent_deg)
        if mode is AreaMode.PROJECTED:
            try:
                area = self.projected_area(vertices)
            except ProjectionError as exc:
                _LOG.warning(
                    "UTM projection failed (%s); falling back to flat area", exc
                )
                return AreaComputation(
                    perimeter_m=perimeter,
                    area_m2=self.flat_area(vertices),
                    mode=AreaMode.FLAT,
                    degraded_precision=True,
                )
            return AreaComputation(perimeter, area, AreaMode.PROJECTED)
        return AreaComputation(perimeter, self.flat_area(vertices), AreaMode.FLAT)

    def flat_area(self, vertices: Sequence[LatLon]) -> float:
        return shoelace_area(flat_project(vertices))

    def projected_area(self, vertices: Sequence[LatLon]) -> float:
        """Area in the UTM zone of the vertex centroid.

        Raises:
            ProjectionError: The transformer could not be built or used.
        """

        lats = np.asarray([pt[0] for pt in vertices], dtype=float)
        lons = np.asarray([pt[1] for pt in vertices], dtype=float)
        centroid = (float(np.mean(lats)), float(np.mean(lons)))
        try:
            transformer = self._transformer_factory(centroid)
        except ProjectionError:
            raise
        except Exception as exc:
            raise ProjectionError("Transformer factory failed") from exc
        return shoelace_area(project_points(vertices, transformer))


__all__ = ["AreaEngine", "select_mode", "shoelace_area"]
