"""In-process persistence for completed measurements.

Mirrors the reporting collaborator contract: save returns a stored copy with
an id and creation time; list, get, delete and a statistics view recomputed
over everything stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from threading import RLock
from typing import Callable, Dict, List

from .errors import MeasurementNotFoundError
from .models import MeasurementResult
from .quality import data_quality_percent
from .units import convert_area

_LOG = logging.getLogger(__name__)

DEFAULT_LOCATION = "Unknown"


@dataclass(frozen=True, slots=True)
class StoredMeasurement:
    id: int
    created_at: datetime
    result: MeasurementResult
    location: str = DEFAULT_LOCATION


@dataclass(frozen=True, slots=True)
class StoreStatistics:
    total_measurements: int
    total_area_m2: float
    average_area_m2: float
    total_acres: float
    total_hectares: float
    avg_points_per_measurement: float
    total_skipped_points: int
    avg_accuracy_m: float
    data_quality_percent: float


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MeasurementStore:
    """Thread-safe in-memory measurement store with sequential ids."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._lock = RLock()
        self._items: Dict[int, StoredMeasurement] = {}
        self._next_id = 1
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def save(self, result: MeasurementResult) -> StoredMeasurement:
        with self._lock:
            stored = StoredMeasurement(
                id=self._next_id, created_at=self._clock(), result=result
            )
            self._items[stored.id] = stored
            self._next_id += 1
        _LOG.debug("Saved measurement id=%d", stored.id)
        return stored

    def list(self) -> List[StoredMeasurement]:
        """All stored measurements, newest first."""

        with self._lock:
            items = list(self._items.values())
        return sorted(items, key=lambda m: (m.created_at, m.id), reverse=True)

    def get(self, measurement_id: int) -> StoredMeasurement:
        with self._lock:
            stored = self._items.get(measurement_id)
        if stored is None:
            raise MeasurementNotFoundError(f"Measurement not found: {measurement_id}")
        return stored

    def delete(self, measurement_id: int) -> None:
        with self._lock:
            if self._items.pop(measurement_id, None) is None:
                raise MeasurementNotFoundError(
                    f"Measurement not found: {measurement_id}"
                )
        _LOG.debug("Deleted measurement id=%d", measurement_id)

    def stats(self) -> StoreStatistics:
        with self._lock:
            results = [m.result for m in self._items.values()]
        count = len(results)
        total_area = sum(r.area_m2 for r in results)
        total_points = sum(r.points_recorded for r in results)
        total_skipped = sum(r.skipped_point_count for r in results)
        units = convert_area(total_area)
        return StoreStatistics(
            total_measurements=count,
            total_area_m2=total_area,
            average_area_m2=total_area / count if count else 0.0,
            total_acres=units.acres,
            total_hectares=units.hectares,
            avg_points_per_measurement=total_points / count if count else 0.0,
            total_skipped_points=total_skipped,
            avg_accuracy_m=(
                sum(r.avg_accuracy_m for r in results) / count if count else 0.0
            ),
            data_quality_percent=data_quality_percent(total_points, total_skipped),
        )


__all__ = [
    "DEFAULT_LOCATION",
    "MeasurementStore",
    "StoreStatistics",
    "StoredMeasurement",
]
