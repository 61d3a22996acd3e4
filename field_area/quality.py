"""Accuracy and skip-rate statistics for one completed measurement."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from .geometry.validation import describe_invalidity, is_self_intersecting
from .models import ClosedPolygon

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QualityReport:
    accepted_count: int
    skipped_count: int
    avg_accuracy_m: float
    data_quality_percent: float
    self_intersecting: bool = False


def data_quality_percent(accepted: int, skipped: int) -> float:
    """Share of evaluated fixes that were accepted; 100 when nothing was skipped."""

    if skipped == 0:
        return 100.0
    return accepted / (accepted + skipped) * 100.0


class QualityReporter:
    def report(
        self,
        *,
        accepted_count: int,
        accuracy_sum_m: float,
        skipped_count: int,
        polygon: ClosedPolygon | None = None,
    ) -> QualityReport:
        """Build the quality report from session running totals.

        ``accuracy_sum_m`` is the sum of the accuracy of every accepted
        point, including points later trimmed from the session buffer.
        """

        avg_accuracy = accuracy_sum_m / accepted_count if accepted_count else 0.0
        crossing = False
        if polygon is not None:
            crossing = is_self_intersecting(polygon.vertices)
            if crossing:
                _LOG.warning(
                    "Boundary crosses itself (%s); area may be unreliable",
                    describe_invalidity(polygon.vertices),
                )
        return QualityReport(
            accepted_count=accepted_count,
            skipped_count=skipped_count,
            avg_accuracy_m=avg_accuracy,
            data_quality_percent=data_quality_percent(accepted_count, skipped_count),
            self_intersecting=crossing,
        )


__all__ = ["QualityReport", "QualityReporter", "data_quality_percent"]
