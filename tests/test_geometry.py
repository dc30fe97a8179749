"""Tests for the pure geometry helpers."""

import math

import pytest

from snapthumb.utils.geometry import (
    bearing,
    clamp,
    cover_rect,
    grid_lines,
    rotate_point,
    safe_zone_rect,
    snap_to,
    stage_scale,
    thirds_lines,
)


class TestClamp:
    def test_inside(self):
        assert clamp(5, 0, 10) == 5

    def test_saturates_both_ends(self):
        assert clamp(-3, 0, 10) == 0
        assert clamp(42, 0, 10) == 10


class TestSnapTo:
    def test_nearest_multiple(self):
        assert snap_to(203, 20) == 200
        assert snap_to(211, 20) == 220

    def test_half_rounds_up(self):
        assert snap_to(210, 20) == 220
        assert snap_to(-10, 20) == 0

    def test_zero_step_disables(self):
        assert snap_to(203.7, 0) == 203.7

    def test_rotation_steps(self):
        assert snap_to(22, 15) == 15
        assert snap_to(38, 15) == 45


class TestCoverRect:
    def test_wide_source_into_square(self):
        assert cover_rect(100, 50, 200, 200) == (-100, 0, 400, 200)

    def test_tall_source_into_wide(self):
        dx, dy, dw, dh = cover_rect(50, 100, 200, 100)
        assert (dw, dh) == (200, 400)
        assert (dx, dy) == (0, -150)

    def test_same_aspect_fills_exactly(self):
        assert cover_rect(1280, 720, 1920, 1080) == (0, 0, 1920, 1080)

    def test_degenerate_source(self):
        dx, dy, dw, dh = cover_rect(0, 0, 10, 10)
        assert (dw, dh) == (10, 10)


class TestStageScale:
    def test_never_upscales(self):
        assert stage_scale(5000, 320) == 1.0

    def test_capped_at_max_width(self):
        assert stage_scale(5000, 2400) == pytest.approx(0.5)

    def test_container_minus_margin(self):
        assert stage_scale(1000, 1920) == pytest.approx(960 / 1920)

    def test_tiny_container(self):
        assert stage_scale(10, 1920) == 1.0


class TestAngles:
    def test_bearing_axes(self):
        assert bearing(10, 0, 0, 0) == pytest.approx(0.0)
        assert bearing(0, 10, 0, 0) == pytest.approx(math.pi / 2)

    def test_rotate_point_quarter_turn(self):
        x, y = rotate_point(10, 0, 0, 0, 90)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(10.0)

    def test_rotate_point_round_trip(self):
        x, y = rotate_point(37, -5, 12, 8, 33)
        bx, by = rotate_point(x, y, 12, 8, -33)
        assert (bx, by) == (pytest.approx(37), pytest.approx(-5))


class TestGuides:
    def test_safe_zone_inset(self):
        assert safe_zone_rect(1000, 500) == pytest.approx((50, 25, 950, 475))

    def test_thirds(self):
        xs, ys = thirds_lines(300, 90)
        assert xs == [100, 200]
        assert ys == [30, 60]

    def test_grid_lines_exclude_edges(self):
        assert grid_lines(100, 20) == [20, 40, 60, 80]
        assert grid_lines(110, 20) == [20, 40, 60, 80, 100]

    def test_grid_lines_zero_cell(self):
        assert grid_lines(100, 0) == []
