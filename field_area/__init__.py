"""GPS boundary-walk area measurement package."""

from .aggregation import MeasurementAggregator
from .config import SurveyConfig
from .errors import (
    FieldAreaError,
    InsufficientPointsError,
    ProviderError,
    ProviderErrorKind,
)
from .main import main
from .models import AggregateResult, AverageUnavailable, GeoFix, MeasurementResult
from .session import SessionController, SessionState

__all__ = [
    "main",
    "MeasurementAggregator",
    "SurveyConfig",
    "FieldAreaError",
    "InsufficientPointsError",
    "ProviderError",
    "ProviderErrorKind",
    "AggregateResult",
    "AverageUnavailable",
    "GeoFix",
    "MeasurementResult",
    "SessionController",
    "SessionState",
]
