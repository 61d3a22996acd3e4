"""Area unit conversions used by results and averages."""

from __future__ import annotations

from dataclasses import dataclass

from .config import (
    SQUARE_METERS_PER_ACRE,
    SQUARE_METERS_PER_CENT,
    SQUARE_METERS_PER_GUNTHA,
    SQUARE_METERS_PER_HECTARE,
)


@dataclass(frozen=True, slots=True)
class AreaUnits:
    acres: float
    hectares: float
    guntha: float
    cents: float


def convert_area(area_m2: float) -> AreaUnits:
    """Return ``area_m2`` expressed in acres, hectares, guntha and cents."""

    return AreaUnits(
        acres=area_m2 / SQUARE_METERS_PER_ACRE,
        hectares=area_m2 / SQUARE_METERS_PER_HECTARE,
        guntha=area_m2 / SQUARE_METERS_PER_GUNTHA,
        cents=area_m2 / SQUARE_METERS_PER_CENT,
    )


__all__ = ["AreaUnits", "convert_area"]
