"""Tests for Web Mercator projection and antimeridian splitting."""

import math

import pytest

from mapcanvas.geometry.bbox import BoundingBox
from mapcanvas.render.projection import Viewport, split_antimeridian


class TestSplitAntimeridian:
    def test_no_jump_single_piece(self) -> None:
        ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        assert split_antimeridian(ring) == [ring]

    def test_split_at_jump(self) -> None:
        ring = [(170.0, 0.0), (179.0, 0.0), (-179.0, 0.0), (-170.0, 0.0)]
        assert split_antimeridian(ring) == [
            [(170.0, 0.0), (179.0, 0.0)],
            [(-179.0, 0.0), (-170.0, 0.0)],
        ]

    def test_input_not_modified(self) -> None:
        ring = [(170.0, 0.0), (-170.0, 0.0)]
        split_antimeridian(ring)
        assert ring == [(170.0, 0.0), (-170.0, 0.0)]

    def test_nan_points_skipped(self) -> None:
        ring = [(0.0, 0.0), (math.nan, 1.0), (1.0, 1.0)]
        assert split_antimeridian(ring) == [[(0.0, 0.0), (1.0, 1.0)]]

    def test_empty(self) -> None:
        assert split_antimeridian([]) == []


class TestViewport:
    def test_center_projects_to_canvas_center(self) -> None:
        viewport = Viewport(center_lat=51.5, center_lon=-0.1, zoom=12, width=800, height=600)
        x, y = viewport.project(-0.1, 51.5)
        assert x == pytest.approx(400)
        assert y == pytest.approx(300)

    def test_world_at_zoom_zero(self) -> None:
        viewport = Viewport(center_lat=0, center_lon=0, zoom=0, width=256, height=256)
        assert viewport.project(180, 0)[0] == pytest.approx(256, abs=1e-6)
        assert viewport.project(-180, 0)[0] == pytest.approx(0, abs=1e-6)
        assert viewport.project(0, 85.0511287798)[1] == pytest.approx(0, abs=1e-3)

    def test_north_is_up(self) -> None:
        viewport = Viewport(center_lat=0, center_lon=0, zoom=5, width=100, height=100)
        assert viewport.project(0, 1)[1] < viewport.project(0, 0)[1]
        assert viewport.project(1, 0)[0] > viewport.project(0, 0)[0]

    def test_polar_latitude_clamped(self) -> None:
        viewport = Viewport(center_lat=0, center_lon=0, zoom=0, width=256, height=256)
        assert viewport.project(0, 90) == viewport.project(0, 85.0511287798)

    def test_meters_per_pixel_halves_per_zoom(self) -> None:
        low = Viewport(0, 0, 10, 100, 100).meters_per_pixel
        high = Viewport(0, 0, 11, 100, 100).meters_per_pixel
        assert low == pytest.approx(2 * high)

    def test_bounds(self) -> None:
        bounds = Viewport(center_lat=0, center_lon=0, zoom=1, width=256, height=256).bounds()
        assert bounds.west == pytest.approx(-90)
        assert bounds.east == pytest.approx(90)
        assert bounds.south == pytest.approx(-bounds.north)

    def test_bounds_wider_than_world(self) -> None:
        bounds = Viewport(center_lat=0, center_lon=0, zoom=0, width=1024, height=256).bounds()
        assert (bounds.west, bounds.east) == (-180.0, 180.0)

    def test_from_bbox(self) -> None:
        viewport = Viewport.from_bbox(BoundingBox(0, 10, 2, 20), zoom=8, width=640, height=480)
        assert (viewport.center_lat, viewport.center_lon) == (1, 15)
        assert (viewport.width, viewport.height) == (640, 480)
