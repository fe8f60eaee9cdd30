"""Contour simplification (Douglas-Peucker) and smoothing."""

import math

from .utils import point_line_distance, round_half_up, valid_points


def simplify_contour(
    points: "list[tuple[float, float]]",
    tolerance: float,
) -> "list[tuple[float, float]]":
    """Douglas-Peucker simplification of an open point sequence.

    Args:
        points: Contour points; first and last are always kept
        tolerance: Maximum allowed deviation in pixels

    Returns:
        Simplified list of points (a new list)

    AIDEV-NOTE: Uses an explicit stack of (start, end) index ranges instead
    of recursion so near-collinear contours with thousands of points cannot
    hit the recursion limit. The split rule matches the recursive form: the
    first point with the largest distance wins, and a range is split only
    when that distance is strictly greater than the tolerance.
    """
    if len(points) <= 2:
        return list(points)

    points = valid_points(points)
    if len(points) <= 2:
        return points

    keep = [False] * len(points)
    keep[0] = keep[-1] = True
    stack = [(0, len(points) - 1)]

    while stack:
        start, end = stack.pop()
        max_dist = 0.0
        max_idx = start
        for i in range(start + 1, end):
            dist = point_line_distance(points[i], points[start], points[end])
            if dist > max_dist:
                max_dist = dist
                max_idx = i

        if max_dist > tolerance:
            keep[max_idx] = True
            stack.append((max_idx, end))
            stack.append((start, max_idx))

    return [point for point, kept in zip(points, keep) if kept]


def smooth_contour(
    points: "list[tuple[float, float]]",
    factor: float,
) -> "list[tuple[int, int]]":
    """Circular moving average over a closed contour.

    Args:
        points: Contour points, treated as cyclic
        factor: Smoothing strength; the window half-width is
            max(1, floor(factor * 3))

    Returns:
        Smoothed points rounded to integers. Lists shorter than 3 points
        are returned unchanged.
    """
    if len(points) < 3:
        return list(points)

    points = valid_points(points)
    count = len(points)
    if count < 3:
        return points

    window = max(1, math.floor(factor * 3))
    span = 2 * window + 1
    smoothed = []

    for i in range(count):
        sum_x = sum_y = 0.0
        for j in range(-window, window + 1):
            x, y = points[(i + j) % count]
            sum_x += x
            sum_y += y
        smoothed.append((round_half_up(sum_x / span), round_half_up(sum_y / span)))

    return smoothed
