"""Accept or reject incoming fixes against accuracy and movement rules."""

from __future__ import annotations

from collections import Counter
import logging
import math
from typing import Optional

from .config import SurveyConfig
from .geometry.distance import haversine_m
from .models import FilterDecision, GeoFix, RecordedPoint

_LOG = logging.getLogger(__name__)


class FixFilter:
    """Stateless decision rule plus a session-scoped skip counter."""

    def __init__(self, config: SurveyConfig) -> None:
        self.config = config
        self.skip_reasons: Counter[FilterDecision] = Counter()

    @property
    def skipped_count(self) -> int:
        return sum(self.skip_reasons.values())

    def decide(self, fix: GeoFix, last_accepted: Optional[RecordedPoint]) -> FilterDecision:
        """Classify ``fix`` without touching the skip counter.

        Readings with a NaN or infinite coordinate or accuracy are rejected
        outright. Accuracy is checked next, so a noisy fix is rejected
        regardless of how far it is from the previous point.
        """

        if not all(
            math.isfinite(value)
            for value in (fix.latitude, fix.longitude, fix.accuracy_m)
        ):
            return FilterDecision.REJECT_INVALID
        if fix.accuracy_m > self.config.accuracy_threshold_m:
            return FilterDecision.REJECT_LOW_ACCURACY
        if last_accepted is not None:
            moved = haversine_m(last_accepted.latlon, fix.latlon)
            if moved < self.config.min_distance_threshold_m:
                return FilterDecision.REJECT_JITTER
        return FilterDecision.ACCEPT

    def evaluate(self, fix: GeoFix, last_accepted: Optional[RecordedPoint]) -> FilterDecision:
        """Classify ``fix`` and count it when rejected."""

        decision = self.decide(fix, last_accepted)
        if not decision.accepted:
            self.skip_reasons[decision] += 1
            _LOG.debug(
                "Skipped fix (%s) lat=%.6f lon=%.6f accuracy=%.1fm",
                decision.value,
                fix.latitude,
                fix.longitude,
                fix.accuracy_m,
            )
        return decision


__all__ = ["FixFilter"]
