"""Bounds and fit-to-window camera math."""

import pytest

from city_road_network import Camera2D, CityMap, compute_bounds, fit_camera
from city_road_network.camera import MAX_ZOOM, MIN_ZOOM, fit_camera_to_map


def test_bounds_of_empty_map():
    assert compute_bounds(CityMap()) == (0.0, 0.0, 1.0, 1.0)


def test_bounds_of_single_segment():
    city_map = CityMap()
    city_map.add_segment(1, [(0, 0), (10, 0)])
    assert compute_bounds(city_map) == (0.0, 0.0, 10.0, 0.0)


def test_fit_centers_box():
    camera = fit_camera((-100.0, -50.0, 100.0, 50.0), 1200, 800)
    # padded 220 x 110 -> min(1200/220, 800/110)
    assert camera.zoom == pytest.approx(1200 / 220)
    assert camera.world_to_screen(0.0, 0.0) == pytest.approx((600.0, 400.0))


def test_fit_uses_limiting_axis():
    camera = fit_camera((0.0, 0.0, 10.0, 100.0), 1000, 1000)
    assert camera.zoom == pytest.approx(1000 / 110)
    assert camera.world_to_screen(5.0, 50.0) == pytest.approx((500.0, 500.0))


def test_degenerate_box_falls_back_to_unit_size():
    camera = fit_camera((0.0, 0.0, 10.0, 0.0), 1100, 1100)
    assert camera.zoom == pytest.approx(100.0)
    assert camera.world_to_screen(5.0, 0.0) == pytest.approx((550.0, 550.0))


def test_non_positive_zoom_falls_back_to_one():
    camera = fit_camera((0.0, 0.0, 10.0, 10.0), 0, 600)
    assert camera.zoom == 1.0


def test_world_screen_round_trip():
    camera = Camera2D(offset_x=12.0, offset_y=-3.0, zoom=2.5)
    sx, sy = camera.world_to_screen(4.0, 8.0)
    assert (sx, sy) == (22.0, 17.0)
    assert camera.screen_to_world(sx, sy) == pytest.approx((4.0, 8.0))


def test_zoom_keeps_cursor_point_fixed():
    camera = Camera2D(offset_x=100.0, offset_y=50.0, zoom=2.0)
    before = camera.screen_to_world(300.0, 200.0)
    camera.zoom_at(300.0, 200.0, 2)
    assert camera.zoom == pytest.approx(2.0 * 1.15 ** 2)
    assert camera.screen_to_world(300.0, 200.0) == pytest.approx(before)


def test_zoom_is_clamped():
    camera = Camera2D(zoom=1.0)
    camera.zoom_at(0.0, 0.0, 500)
    assert camera.zoom == MAX_ZOOM
    camera.zoom_at(0.0, 0.0, -1000)
    assert camera.zoom == MIN_ZOOM


def test_pan_moves_offset():
    camera = Camera2D()
    camera.pan(5.0, -7.0)
    assert (camera.offset_x, camera.offset_y) == (5.0, -7.0)


def test_fitted_view_contains_map(city_42):
    camera = fit_camera_to_map(city_42, 1200, 800)
    left, bottom, right, top = camera.visible_world_bounds(1200, 800)
    min_x, min_y, max_x, max_y = city_42.compute_bounds()
    assert left < min_x and right > max_x
    assert bottom < min_y and top > max_y
