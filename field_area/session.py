"""Measurement session state machine and its controller.

A session moves through ``IDLE -> AWAITING_FIRST_FIX -> RECORDING ->
STOPPED``. Fixes arrive asynchronously and only replace the "latest fix";
the ticker samples that latest fix on every tick. A tick does not wait for a
fresh fix, so a fix can be evaluated more than once when the source is slow.
That repeat evaluation is intentional and shows up in the skip statistics.

Buffer policy: accepted points are kept in a bounded buffer. When the cap is
exceeded the oldest points are dropped and the polygon is closed over the
retained window. The live distance, the accepted count and the average
accuracy always cover the full history. Results report how many points were
trimmed.
"""

from __future__ import annotations

from collections import deque
from enum import Enum
import logging
from typing import Deque, Optional

from .accumulator import DistanceAccumulator
from .aggregation import MeasurementAggregator
from .config import SurveyConfig
from .errors import InsufficientPointsError, ProviderError, SessionStateError
from .filtering import FixFilter
from .geometry.area import AreaEngine
from .geometry.closing import MIN_POLYGON_POINTS, PolygonCloser
from .models import FilterDecision, GeoFix, MeasurementResult, RecordedPoint
from .quality import QualityReporter
from .sources import Cancellable, LocationSource, Ticker
from .units import convert_area

_LOG = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_FIRST_FIX = "awaiting_first_fix"
    RECORDING = "recording"
    STOPPED = "stopped"


_ACTIVE_STATES = {SessionState.AWAITING_FIRST_FIX, SessionState.RECORDING}


class MeasurementSession:
    """In-progress state owned by one measurement; created fresh per start."""

    def __init__(self, config: SurveyConfig) -> None:
        self.config = config
        self.state = SessionState.AWAITING_FIRST_FIX
        self.fix_filter = FixFilter(config)
        self.accumulator = DistanceAccumulator()
        self.points: Deque[RecordedPoint] = deque(maxlen=config.max_recorded_points)
        self.latest_fix: Optional[GeoFix] = None
        self.last_accepted: Optional[RecordedPoint] = None
        self.accepted_count = 0
        self.accuracy_sum_m = 0.0
        self.trimmed_count = 0
        self.provider_error: Optional[ProviderError] = None

    @property
    def active(self) -> bool:
        return self.state in _ACTIVE_STATES

    @property
    def skipped_count(self) -> int:
        return self.fix_filter.skipped_count

    def receive(self, fix: GeoFix) -> None:
        """Fix-arrival transition: remember the fix, start recording on the first one."""

        self.latest_fix = fix
        if self.state is SessionState.AWAITING_FIRST_FIX:
            self.state = SessionState.RECORDING
            _LOG.debug("First fix received; recording")

    def sample(self) -> Optional[FilterDecision]:
        """Tick transition: evaluate the latest fix, which may be stale."""

        if self.state is not SessionState.RECORDING or self.latest_fix is None:
            return None
        fix = self.latest_fix
        decision = self.fix_filter.evaluate(fix, self.last_accepted)
        if decision.accepted:
            self._append(fix)
        return decision

    def _append(self, fix: GeoFix) -> None:
        point = RecordedPoint(fix=fix, sequence=self.accepted_count)
        if len(self.points) == self.points.maxlen:
            if self.trimmed_count == 0:
                _LOG.warning(
                    "Point buffer full (%d); dropping oldest points",
                    self.points.maxlen,
                )
            self.trimmed_count += 1
        self.points.append(point)
        self.last_accepted = point
        self.accepted_count += 1
        self.accuracy_sum_m += fix.accuracy_m
        self.accumulator.add(fix.latlon)


class SessionController:
    """Owns the current session and wires it to the location source and ticker."""

    def __init__(
        self,
        location_source: LocationSource,
        ticker: Ticker,
        config: SurveyConfig | None = None,
        aggregator: MeasurementAggregator | None = None,
        *,
        engine: AreaEngine | None = None,
        reporter: QualityReporter | None = None,
    ) -> None:
        self.location_source = location_source
        self.ticker = ticker
        self.config = config or SurveyConfig()
        self.aggregator = aggregator or MeasurementAggregator()
        self.closer = PolygonCloser(self.config.closure_threshold_m)
        self.engine = engine or AreaEngine(self.config.projected_mode_extent_deg)
        self.reporter = reporter or QualityReporter()
        self.session: Optional[MeasurementSession] = None
        self._subscription: Optional[Cancellable] = None
        self._tick_handle: Optional[Cancellable] = None

    @property
    def state(self) -> SessionState:
        if self.session is None:
            return SessionState.IDLE
        return self.session.state

    @property
    def live_distance_m(self) -> float:
        return self.session.accumulator.total_m if self.session else 0.0

    @property
    def accepted_count(self) -> int:
        return self.session.accepted_count if self.session else 0

    @property
    def skipped_count(self) -> int:
        return self.session.skipped_count if self.session else 0

    def start(self) -> MeasurementSession:
        if self.session is not None and self.session.active:
            raise SessionStateError("A measurement session is already running")
        session = MeasurementSession(self.config)
        self.session = session
        self._subscription = self.location_source.subscribe(
            self._on_fix, self._on_provider_error
        )
        self._tick_handle = self.ticker.start(self.config.tick_interval_s, self._on_tick)
        _LOG.info("Measurement session started")
        return session

    def stop(self) -> MeasurementResult:
        """Stop recording and build the result.

        Raises:
            SessionStateError: No session was started or it already stopped.
            ProviderError: The location source failed during the session.
            InsufficientPointsError: Fewer than three points were accepted.
        """

        session = self.session
        if session is None:
            raise SessionStateError("No measurement session to stop")
        if not session.active:
            if session.provider_error is not None:
                raise session.provider_error
            raise SessionStateError("Measurement session already stopped")
        self._halt(session)
        if session.accepted_count < MIN_POLYGON_POINTS:
            _LOG.warning(
                "Session stopped with %d accepted points; discarding",
                session.accepted_count,
            )
            raise InsufficientPointsError(session.accepted_count, MIN_POLYGON_POINTS)
        result = self._build_result(session)
        self.aggregator.add(result)
        return result

    def _halt(self, session: MeasurementSession) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        session.state = SessionState.STOPPED

    def _on_fix(self, fix: GeoFix) -> None:
        session = self.session
        if session is None or not session.active:
            _LOG.debug("Fix ignored: no active session")
            return
        session.receive(fix)

    def _on_tick(self) -> Optional[FilterDecision]:
        session = self.session
        if session is None or not session.active:
            return None
        return session.sample()

    def _on_provider_error(self, error: ProviderError) -> None:
        session = self.session
        if session is None or not session.active:
            return
        _LOG.warning("Location provider error (%s): %s", error.kind.value, error.message)
        session.provider_error = error
        self._halt(session)

    def _build_result(self, session: MeasurementSession) -> MeasurementResult:
        polygon = self.closer.close([p.latlon for p in session.points])
        area = self.engine.compute(polygon)
        quality = self.reporter.report(
            accepted_count=session.accepted_count,
            accuracy_sum_m=session.accuracy_sum_m,
            skipped_count=session.skipped_count,
            polygon=polygon,
        )
        units = convert_area(area.area_m2)
        result = MeasurementResult(
            perimeter_m=area.perimeter_m,
            area_m2=area.area_m2,
            acres=units.acres,
            hectares=units.hectares,
            guntha=units.guntha,
            cents=units.cents,
            points_recorded=session.accepted_count,
            closed_polygon_point_count=len(polygon),
            avg_accuracy_m=quality.avg_accuracy_m,
            skipped_point_count=quality.skipped_count,
            data_quality_percent=quality.data_quality_percent,
            measurement_index=self.aggregator.next_index,
            area_mode=area.mode,
            degraded_precision=area.degraded_precision,
            self_intersecting=quality.self_intersecting,
            live_distance_m=session.accumulator.total_m,
            trimmed_point_count=session.trimmed_count,
        )
        _LOG.info(
            "Measurement #%d: %.2f m2 (%s), perimeter %.2f m, %d points, %d skipped",
            result.measurement_index,
            result.area_m2,
            result.area_mode.value,
            result.perimeter_m,
            result.points_recorded,
            result.skipped_point_count,
        )
        return result


__all__ = ["MeasurementSession", "SessionController", "SessionState"]
