"""Average repeated walks of the same parcel.

Pure aggregation over an append-only list of results. Unit conversions of
the average are derived from the mean area, never averaged independently.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .models import AggregateResult, AverageUnavailable, MeasurementResult
from .units import convert_area

_LOG = logging.getLogger(__name__)

MIN_RESULTS_FOR_AVERAGE = 2


def average_results(
    results: Sequence[MeasurementResult],
) -> AggregateResult | AverageUnavailable:
    """Return the mean area and perimeter over ``results``."""

    count = len(results)
    if count < MIN_RESULTS_FOR_AVERAGE:
        return AverageUnavailable(count=count, required=MIN_RESULTS_FOR_AVERAGE)
    mean_area = sum(r.area_m2 for r in results) / count
    mean_perimeter = sum(r.perimeter_m for r in results) / count
    units = convert_area(mean_area)
    return AggregateResult(
        area_m2=mean_area,
        perimeter_m=mean_perimeter,
        acres=units.acres,
        hectares=units.hectares,
        guntha=units.guntha,
        cents=units.cents,
        count=count,
    )


class MeasurementAggregator:
    """Ordered store of completed measurements."""

    def __init__(self) -> None:
        self._results: List[MeasurementResult] = []

    def __len__(self) -> int:
        return len(self._results)

    @property
    def results(self) -> List[MeasurementResult]:
        return list(self._results)

    @property
    def next_index(self) -> int:
        return len(self._results) + 1

    def add(self, result: MeasurementResult) -> None:
        self._results.append(result)
        _LOG.info(
            "Stored measurement #%d (%.2f m2, %d results total)",
            result.measurement_index,
            result.area_m2,
            len(self._results),
        )

    def compute_average(self) -> AggregateResult | AverageUnavailable:
        return average_results(self._results)


__all__ = ["MIN_RESULTS_FOR_AVERAGE", "MeasurementAggregator", "average_results"]
