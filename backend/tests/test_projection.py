from __future__ import annotations

import math

import pytest
from pyproj import Transformer

from geo.projection import lnglat_pixel_distance, pixel_distance, project, world_size


def test_origin_projects_to_world_center():
    p = project(0.0, 0.0, 0)
    assert p.x == pytest.approx(128.0)
    assert p.y == pytest.approx(128.0)


def test_world_size_doubles_per_zoom():
    assert world_size(0) == 256.0
    assert world_size(1) == 512.0
    assert world_size(3) == 2048.0


def test_antimeridian_maps_to_world_edges():
    assert project(0.0, -180.0, 2).x == pytest.approx(0.0)
    assert project(0.0, 180.0, 2).x == pytest.approx(world_size(2))


def test_north_is_up():
    # Pixel y grows southwards.
    assert project(50.0, 14.4, 5).y < project(40.0, 14.4, 5).y


def test_distance_doubles_with_each_zoom_level():
    d3 = lnglat_pixel_distance(44.97, -93.27, 40.0, -100.0, 3)
    d4 = lnglat_pixel_distance(44.97, -93.27, 40.0, -100.0, 4)
    assert d4 == pytest.approx(2.0 * d3)


def test_poles_are_clamped_instead_of_dividing_by_zero():
    north = project(90.0, 0.0, 2)
    south = project(-90.0, 0.0, 2)
    assert math.isfinite(north.y)
    assert math.isfinite(south.y)
    assert north.y == pytest.approx(0.0, abs=1e-4)
    assert south.y == pytest.approx(world_size(2), abs=1e-4)


def test_matches_pyproj_web_mercator():
    # Independent check: EPSG:3857 meters scaled to the 256px tile pyramid.
    t = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
    half = 20037508.342789244
    zoom = 7
    size = world_size(zoom)
    for lat, lng in [(50.0755, 14.4378), (44.97, -93.27), (-33.86, 151.21), (0.0, 0.0)]:
        mx, my = t.transform(lng, lat)
        expected_x = (mx + half) / (2 * half) * size
        expected_y = (half - my) / (2 * half) * size
        p = project(lat, lng, zoom)
        assert p.x == pytest.approx(expected_x, abs=1e-4)
        assert p.y == pytest.approx(expected_y, abs=1e-4)


def test_pixel_distance_is_euclidean():
    a = project(0.0, 0.0, 0)
    b = project(0.0, 90.0, 0)
    assert pixel_distance(a, b) == pytest.approx(64.0)
    assert pixel_distance(a, a) == 0.0


def test_non_finite_zoom_is_rejected():
    with pytest.raises(ValueError):
        project(0.0, 0.0, float("nan"))
