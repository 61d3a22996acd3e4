"""Geometry helpers: distances, polygon closing, projections and area."""

from .area import AreaEngine, select_mode, shoelace_area
from .closing import MIN_POLYGON_POINTS, PolygonCloser
from .distance import haversine_m, path_length_m
from .projection import build_utm_transformer, flat_project, project_points, utm_epsg
from .validation import describe_invalidity, is_self_intersecting

__all__ = [
    "AreaEngine",
    "select_mode",
    "shoelace_area",
    "MIN_POLYGON_POINTS",
    "PolygonCloser",
    "haversine_m",
    "path_length_m",
    "build_utm_transformer",
    "flat_project",
    "project_points",
    "utm_epsg",
    "describe_invalidity",
    "is_self_intersecting",
]
