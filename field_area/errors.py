"""Central error types used across the application."""

from __future__ import annotations

from enum import Enum


class FieldAreaError(RuntimeError):
    """Base error for survey engine failures."""


class InsufficientPointsError(FieldAreaError):
    """Raised when a session stops with too few accepted points to close a polygon."""

    def __init__(self, accepted: int, required: int = 3) -> None:
        super().__init__(
            f"Need at least {required} accepted points to close a polygon, got {accepted}"
        )
        self.accepted = accepted
        self.required = required


class ProjectionError(FieldAreaError):
    """Raised when vertices cannot be projected into a UTM plane."""


class ProviderErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"


class ProviderError(FieldAreaError):
    """Terminal error delivered by the location source; halts the session."""

    def __init__(self, kind: ProviderErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value


class SessionStateError(FieldAreaError):
    """Raised when a controller operation is not valid in the current state."""


class MeasurementNotFoundError(FieldAreaError, KeyError):
    """Raised when a stored measurement id does not exist."""

    # Plain message rather than the quoted repr KeyError would print.
    __str__ = FieldAreaError.__str__


class FixFileFormatError(FieldAreaError):
    """Raised when a replay CSV is missing required columns."""


__all__ = [
    "FieldAreaError",
    "InsufficientPointsError",
    "ProjectionError",
    "ProviderErrorKind",
    "ProviderError",
    "SessionStateError",
    "MeasurementNotFoundError",
    "FixFileFormatError",
]
