"""Unit tests for geometry helpers, Douglas-Peucker and smoothing."""

import math

import pytest

from mapconverter.image_processing.simplification import simplify_contour, smooth_contour
from mapconverter.image_processing.utils import (
    contour_length,
    point_line_distance,
    polygon_area,
    valid_points,
)


def wobbly_circle(count=120, radius=40.0):
    """Closed-ish contour with small radial noise, as traced pixels would have."""
    points = []
    for i in range(count):
        angle = 2 * math.pi * i / count
        r = radius + (1.5 if i % 3 == 0 else -0.5)
        points.append((round(50 + r * math.cos(angle)), round(50 + r * math.sin(angle))))
    return points


# --- Geometry helpers ---


def test_polygon_area_simple_shapes():
    assert polygon_area([(0, 0), (1, 0), (1, 1), (0, 1)]) == 1
    assert polygon_area([(0, 0), (4, 0), (0, 3)]) == 6
    # Orientation does not matter
    assert polygon_area([(0, 1), (1, 1), (1, 0), (0, 0)]) == 1


def test_polygon_area_closure():
    contour = wobbly_circle()
    closed = contour + [contour[0]]
    assert polygon_area(contour) == pytest.approx(polygon_area(closed))


def test_polygon_area_degenerate():
    assert polygon_area([]) == 0
    assert polygon_area([(3, 3)]) == 0
    assert polygon_area([(0, 0), (1, 0), (2, 0)]) == 0


def test_point_line_distance():
    assert point_line_distance((1, 1), (0, 0), (2, 0)) == pytest.approx(1)
    # Projection clamped to the segment end
    assert point_line_distance((3, 0), (0, 0), (2, 0)) == pytest.approx(1)
    # Zero-length segment
    assert point_line_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5)


def test_contour_length():
    square = [(0, 0), (2, 0), (2, 2), (0, 2)]
    assert contour_length(square) == pytest.approx(8)
    assert contour_length(square, closed=False) == pytest.approx(6)


def test_valid_points_drops_malformed():
    points = [(0, 0), (float("nan"), 1), None, (1, float("inf")), "xy", (True, 2), (2, 2.5)]
    assert valid_points(points) == [(0, 0), (2, 2.5)]


# --- Douglas-Peucker ---


def test_collinear_points_collapse_to_endpoints():
    line = [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
    assert simplify_contour(line, 0) == [(0, 0), (4, 0)]


def test_short_inputs_returned_unchanged():
    assert simplify_contour([], 1) == []
    assert simplify_contour([(1, 2)], 1) == [(1, 2)]
    assert simplify_contour([(1, 2), (3, 4)], 1) == [(1, 2), (3, 4)]


def test_corner_kept_above_tolerance():
    points = [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
    assert simplify_contour(points, 0.5) == [(0, 0), (2, 0), (2, 2)]
    assert simplify_contour(points, 5) == [(0, 0), (2, 2)]


def test_distance_equal_to_tolerance_is_dropped():
    points = [(0, 0), (1, 1), (2, 0)]
    assert simplify_contour(points, 1) == [(0, 0), (2, 0)]
    assert simplify_contour(points, 0.99) == points


def test_invalid_points_filtered_before_simplifying():
    points = [(0, 0), (float("nan"), 1), None, (1, 1), (2, 0)]
    assert simplify_contour(points, 0.5) == [(0, 0), (1, 1), (2, 0)]


@pytest.mark.parametrize("tolerance", [0, 0.5, 1, 2, 5, 100])
def test_endpoints_preserved(tolerance):
    contour = wobbly_circle()
    simplified = simplify_contour(contour, tolerance)
    assert simplified[0] == contour[0]
    assert simplified[-1] == contour[-1]


def test_point_count_monotonic_in_tolerance():
    contour = wobbly_circle()
    counts = [
        len(simplify_contour(contour, tolerance))
        for tolerance in (0, 0.25, 0.5, 1, 1.5, 2, 3, 5, 10, 100)
    ]
    assert counts[0] <= len(contour)
    assert counts == sorted(counts, reverse=True)


def test_output_is_ordered_subsequence():
    contour = [(i, (i * 7) % 5) for i in range(100)]
    simplified = simplify_contour(contour, 1.5)
    assert set(simplified) <= set(contour)
    xs = [x for x, _ in simplified]
    assert xs == sorted(xs)


def test_long_near_collinear_contour():
    # Deep split chains must not hit the recursion limit
    points = [(i, (i % 2) * 0.01 + i * 1e-4) for i in range(2500)]
    simplified = simplify_contour(points, 0)
    assert simplified[0] == points[0]
    assert simplified[-1] == points[-1]
    assert len(simplified) <= len(points)


# --- Smoothing ---


def test_smooth_square_window_one():
    square = [(0, 0), (4, 0), (4, 4), (0, 4)]
    assert smooth_contour(square, 0.5) == [(1, 1), (3, 1), (3, 3), (1, 3)]


def test_small_factor_still_uses_window_one():
    square = [(0, 0), (4, 0), (4, 4), (0, 4)]
    assert smooth_contour(square, 0.1) == smooth_contour(square, 0.5)


def test_smooth_rounds_halves_up():
    points = [(0.5, -0.5)] * 3
    assert smooth_contour(points, 0.5) == [(1, 0)] * 3


def test_smooth_short_inputs_unchanged():
    assert smooth_contour([(1.5, 2.5), (3, 4)], 1) == [(1.5, 2.5), (3, 4)]


def test_smooth_window_wider_than_contour():
    triangle = [(0, 0), (3, 0), (0, 3)]
    # Window half-width 3 wraps around the 3 points more than once
    smoothed = smooth_contour(triangle, 1)
    assert len(smoothed) == 3
    assert all(isinstance(x, int) and isinstance(y, int) for x, y in smoothed)
