"""Checks applied to node-position configurations before hull evaluation.

A configuration maps node ids to disk centres; every disk has radius
*node_size*.  Collinear and overlapping configurations are rejected here
rather than in the engine, and get an infinite perimeter.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Hashable, List, Mapping

from .disk_hull import compute
from .hull_geometry import perimeter
from .models import Disk, Point

logger = logging.getLogger(__name__)

Positions = Dict[Hashable, Point]

OVERLAP_TOLERANCE = 1e-8
LINEAR_TOLERANCE = 0.1


def disks_from_positions(positions: Mapping[Hashable, Point], node_size: float) -> List[Disk]:
    return [Disk(p.x, p.y, node_size) for p in positions.values()]


def is_linear_configuration(positions: Mapping[Hashable, Point], node_size: float) -> bool:
    """True when all centres lie (nearly) on the line through the first two.

    Configurations of two or fewer disks count as linear.
    """
    points = list(positions.values())
    if len(points) <= 2:
        return True

    p1, p2 = points[0], points[1]
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    length = math.hypot(dx, dy)
    if length < 1e-10:
        return True

    ux = dx / length
    uy = dy / length
    for p in points[2:]:
        cross = abs((p.x - p1.x) * uy - (p.y - p1.y) * ux)
        if cross > node_size * LINEAR_TOLERANCE:
            return False
    return True


def has_overlaps(
    positions: Mapping[Hashable, Point],
    node_size: float,
    tolerance: float = OVERLAP_TOLERANCE,
) -> bool:
    points = list(positions.values())
    min_dist = 2 * node_size - tolerance
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            if math.hypot(points[i].x - points[j].x, points[i].y - points[j].y) < min_dist:
                return True
    return False


def has_contact(
    positions: Mapping[Hashable, Point],
    node_id: Hashable,
    node_size: float,
    tolerance: float | None = None,
) -> bool:
    """True if *node_id* touches another disk to within *tolerance*."""
    if tolerance is None:
        tolerance = node_size * LINEAR_TOLERANCE
    pos = positions[node_id]
    for other_id, other in positions.items():
        if other_id == node_id:
            continue
        dist = math.hypot(pos.x - other.x, pos.y - other.y)
        if abs(dist - 2 * node_size) < tolerance:
            return True
    return False


def configuration_perimeter(positions: Mapping[Hashable, Point], node_size: float) -> float:
    """Hull perimeter in radius units, or ``inf`` for rejected configurations.

    Any failure while checking or measuring the configuration is logged
    and scored as ``inf``.
    """
    try:
        if len(positions) < 2 or is_linear_configuration(positions, node_size):
            return math.inf
        if has_overlaps(positions, node_size):
            return math.inf
        result = compute(disks_from_positions(positions, node_size))
        return perimeter(result.segments, node_size)
    except Exception:
        logger.exception("Perimeter evaluation failed for %d disks", len(positions))
        return math.inf
