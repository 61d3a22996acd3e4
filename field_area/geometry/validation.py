"""Shape checks for closed boundary rings."""

from __future__ import annotations

from typing import Sequence

from shapely.geometry import Polygon
from shapely.validation import explain_validity

from ..models import LatLon
from .projection import flat_project

# GEOS reason prefix for edges that cross. A ring that only touches itself
# reports "Ring Self-intersection" instead.
CROSSING_REASON = "Self-intersection"


def is_self_intersecting(vertices: Sequence[LatLon]) -> bool:
    """Return True when two edges of the ring through ``vertices`` cross.

    The check runs on the flat local projection, which is enough to detect
    crossings at parcel scale. Other invalid shapes, such as a ring that
    touches itself at a vertex, are not reported as crossings.
    """

    if len(vertices) < 3:
        return False
    return describe_invalidity(vertices).startswith(CROSSING_REASON)


def describe_invalidity(vertices: Sequence[LatLon]) -> str:
    """Human-readable reason from shapely, e.g. ``Self-intersection[x y]``."""

    if len(vertices) < 3:
        return "Too few points"
    return explain_validity(Polygon(flat_project(vertices)))


__all__ = ["CROSSING_REASON", "describe_invalidity", "is_self_intersecting"]
