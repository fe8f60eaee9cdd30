"""Geometric helpers shared by the contour post-processing stages.

AIDEV-NOTE: Points are plain (x, y) tuples in image pixel space throughout.
"""

import math
from numbers import Real
from typing import Any


def is_valid_point(point: Any) -> bool:
    """True for an (x, y) pair of finite real numbers."""
    try:
        x, y = point
    except (TypeError, ValueError):
        return False
    for value in (x, y):
        if isinstance(value, bool) or not isinstance(value, Real):
            return False
        if not math.isfinite(value):
            return False
    return True


def valid_points(points: "list[Any]") -> "list[tuple[float, float]]":
    """Drop malformed and non-finite points, keeping order."""
    return [(p[0], p[1]) for p in points if is_valid_point(p)]


def polygon_area(points: "list[tuple[float, float]]") -> float:
    """Shoelace area of a contour, treated as closed (last point joins first)."""
    count = len(points)
    total = 0.0
    for i in range(count):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % count]
        total += x1 * y2
        total -= x2 * y1
    return abs(total / 2)


def point_line_distance(
    point: "tuple[float, float]",
    line_start: "tuple[float, float]",
    line_end: "tuple[float, float]",
) -> float:
    """Distance from a point to the segment between line_start and line_end.

    The projection is clamped to the segment; a zero-length segment gives the
    distance to line_start.
    """
    px, py = point
    sx, sy = line_start
    dx = line_end[0] - sx
    dy = line_end[1] - sy
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return math.sqrt((px - sx) ** 2 + (py - sy) ** 2)

    t = ((px - sx) * dx + (py - sy) * dy) / length_sq
    t = max(0.0, min(1.0, t))

    nearest_x = sx + t * dx
    nearest_y = sy + t * dy
    return math.sqrt((px - nearest_x) ** 2 + (py - nearest_y) ** 2)


def contour_length(points: "list[tuple[float, float]]", closed: bool = True) -> float:
    """Total length of a contour in pixels."""
    total = 0.0
    for i in range(1, len(points)):
        x1, y1 = points[i - 1]
        x2, y2 = points[i]
        total += math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)
    if closed and len(points) > 1:
        x1, y1 = points[-1]
        x2, y2 = points[0]
        total += math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)
    return total


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)
