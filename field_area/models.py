"""Dataclasses describing GPS fixes, closed polygons and measurement results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


LatLon = Tuple[float, float]


class FilterDecision(str, Enum):
    ACCEPT = "accept"
    REJECT_LOW_ACCURACY = "reject_low_accuracy"
    REJECT_JITTER = "reject_jitter"
    REJECT_INVALID = "reject_invalid"

    @property
    def accepted(self) -> bool:
        return self is FilterDecision.ACCEPT


class AreaMode(str, Enum):
    FLAT = "flat"
    PROJECTED = "projected"


@dataclass(frozen=True, slots=True)
class GeoFix:
    """One location reading as delivered by the location source."""

    latitude: float
    longitude: float
    accuracy_m: float
    timestamp: float

    @property
    def latlon(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class RecordedPoint:
    """An accepted fix, numbered in acceptance order within its session."""

    fix: GeoFix
    sequence: int

    @property
    def latlon(self) -> LatLon:
        return self.fix.latlon

    @property
    def accuracy_m(self) -> float:
        return self.fix.accuracy_m


@dataclass(frozen=True, slots=True)
class ClosedPolygon:
    """Ordered ring of coordinates whose first and last entries coincide.

    ``explicitly_closed`` is True when a copy of the first vertex was
    appended; False when the recorded path already ended within tolerance.
    """

    points: Tuple[LatLon, ...]
    explicitly_closed: bool
    closure_gap_m: float

    def __len__(self) -> int:
        return len(self.points)

    @property
    def vertices(self) -> List[LatLon]:
        """Distinct vertices, without a trailing copy of the first one."""

        pts = list(self.points)
        if len(pts) > 1 and pts[0] == pts[-1]:
            pts = pts[:-1]
        return pts


@dataclass(frozen=True, slots=True)
class AreaComputation:
    perimeter_m: float
    area_m2: float
    mode: AreaMode
    degraded_precision: bool = False


@dataclass(frozen=True, slots=True)
class MeasurementResult:
    """Immutable outcome of one completed boundary walk."""

    perimeter_m: float
    area_m2: float
    acres: float
    hectares: float
    guntha: float
    cents: float
    points_recorded: int
    closed_polygon_point_count: int
    avg_accuracy_m: float
    skipped_point_count: int
    data_quality_percent: float
    measurement_index: int
    area_mode: AreaMode = AreaMode.FLAT
    degraded_precision: bool = False
    self_intersecting: bool = False
    live_distance_m: float = 0.0
    trimmed_point_count: int = 0


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Average over two or more measurements; unit conversions follow the mean area."""

    area_m2: float
    perimeter_m: float
    acres: float
    hectares: float
    guntha: float
    cents: float
    count: int


@dataclass(frozen=True, slots=True)
class AverageUnavailable:
    """Returned instead of an average when too few measurements exist."""

    count: int
    required: int = 2

    @property
    def reason(self) -> str:
        return f"need at least {self.required} measurements, have {self.count}"


__all__ = [
    "LatLon",
    "FilterDecision",
    "AreaMode",
    "GeoFix",
    "RecordedPoint",
    "ClosedPolygon",
    "AreaComputation",
    "MeasurementResult",
    "AggregateResult",
    "AverageUnavailable",
]
