import numpy as np
import pytest

from field_area.errors import ProjectionError
from field_area.geometry.area import AreaEngine, select_mode, shoelace_area
from field_area.geometry.closing import PolygonCloser
from field_area.geometry.projection import utm_epsg
from field_area.models import AreaMode

from conftest import square_latlon

PENTAGON = [
    (12.9716, 77.5946),
    (12.9719, 77.5952),
    (12.9714, 77.5957),
    (12.9709, 77.5953),
    (12.9710, 77.5947),
]


def _area(points, **kwargs):
    engine = AreaEngine()
    return engine.compute(PolygonCloser().close(points), **kwargs)


def test_equator_square_flat_area_and_perimeter() -> None:
    result = _area(square_latlon())
    assert result.mode is AreaMode.FLAT
    assert not result.degraded_precision
    assert result.area_m2 == pytest.approx(10_000.0, rel=0.02)
    assert result.perimeter_m == pytest.approx(400.0, rel=0.02)


def test_flat_and_projected_agree_on_small_square() -> None:
    polygon = PolygonCloser().close(square_latlon(origin=(12.97, 77.59)))
    engine = AreaEngine()
    flat = engine.compute(polygon, force_mode=AreaMode.FLAT)
    projected = engine.compute(polygon, force_mode=AreaMode.PROJECTED)
    assert projected.mode is AreaMode.PROJECTED
    assert projected.area_m2 == pytest.approx(flat.area_m2, rel=0.01)
    assert projected.perimeter_m == flat.perimeter_m


def test_large_extent_selects_projected_mode() -> None:
    result = _area(square_latlon(side=0.02, origin=(12.97, 77.59)))
    assert result.mode is AreaMode.PROJECTED
    flat = _area(square_latlon(side=0.02, origin=(12.97, 77.59)), force_mode=AreaMode.FLAT)
    assert result.area_m2 == pytest.approx(flat.area_m2, rel=0.01)


def test_select_mode_threshold() -> None:
    assert select_mode([(0.0, 0.0), (0.0, 0.01), (0.005, 0.0)]) is AreaMode.FLAT
    assert select_mode([(0.0, 0.0), (0.0, 0.0101), (0.005, 0.0)]) is AreaMode.PROJECTED
    assert select_mode([(0.0, 0.0), (0.0101, 0.0), (0.0, 0.001)]) is AreaMode.PROJECTED


def test_area_invariant_under_rotation_and_reversal() -> None:
    base = _area(PENTAGON).area_m2
    assert base > 0
    for shift in range(1, len(PENTAGON)):
        rotated = PENTAGON[shift:] + PENTAGON[:shift]
        assert _area(rotated).area_m2 == pytest.approx(base, rel=1e-9)
    assert _area(list(reversed(PENTAGON))).area_m2 == pytest.approx(base, rel=1e-9)


def test_projection_failure_falls_back_to_flat() -> None:
    def broken_factory(centroid):
        raise ProjectionError("no grid files")

    polygon = PolygonCloser().close(square_latlon(side=0.02, origin=(12.97, 77.59)))
    engine = AreaEngine(transformer_factory=broken_factory)
    result = engine.compute(polygon)
    assert result.mode is AreaMode.FLAT
    assert result.degraded_precision
    assert result.area_m2 == pytest.approx(engine.flat_area(polygon.vertices))


def test_unexpected_factory_error_is_treated_as_projection_failure() -> None:
    def broken_factory(centroid):
        raise RuntimeError("boom")

    polygon = PolygonCloser().close(square_latlon(side=0.02))
    result = AreaEngine(transformer_factory=broken_factory).compute(polygon)
    assert result.degraded_precision


def test_shoelace_unit_square_with_and_without_closing_vertex() -> None:
    ring = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    assert shoelace_area(ring) == pytest.approx(1.0)
    closed = np.vstack([ring, ring[:1]])
    assert shoelace_area(closed) == pytest.approx(1.0)
    assert shoelace_area(ring[::-1]) == pytest.approx(1.0)
    assert shoelace_area(ring[:2]) == 0.0


def test_utm_zone_selection() -> None:
    assert utm_epsg(12.97, 77.59) == 32643
    assert utm_epsg(-33.9, 18.4) == 32734
    assert utm_epsg(0.0, 0.0) == 32631
    assert utm_epsg(10.0, 180.0) == 32660
