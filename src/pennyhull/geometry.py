"""Geometry helper functions used across the package."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, TypeVar

from .models import Point

_P = TypeVar("_P")


def distance(p, q) -> float:
    """Euclidean distance between two objects with ``x``/``y`` attributes."""
    return math.hypot(q.x - p.x, q.y - p.y)


def midpoint(p, q) -> Point:
    return Point((p.x + q.x) / 2, (p.y + q.y) / 2)


def normalize_angle(angle: float) -> float:
    """Wrap *angle* into ``(-π, π]``."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle <= -math.pi:
        angle += 2 * math.pi
    return angle


def centroid(points: Iterable) -> Point:
    """Arithmetic mean of the given points (not area-weighted).

    An empty input yields the origin.
    """
    pts = list(points)
    if not pts:
        return Point(0.0, 0.0)
    cx = sum(p.x for p in pts) / len(pts)
    cy = sum(p.y for p in pts) / len(pts)
    return Point(cx, cy)


def sort_by_polar_angle(points: Sequence[_P], center) -> List[_P]:
    """Return *points* sorted by angle around *center* (counter-clockwise).

    The sort is stable: points at equal angles keep their input order.
    """

    def angle(p) -> float:
        return math.atan2(p.y - center.y, p.x - center.x)

    return sorted(points, key=angle)
