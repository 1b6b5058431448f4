"""Selection and ordering of the disks that lie on the convex hull.

Hull disks are found by sampling the support function of the disk
union: for each of ``num_directions`` equally spaced directions the disk
whose reach ``x·cosθ + y·sinθ + r`` is largest is extreme in that
direction and therefore on the hull.  At the default 1° resolution a
disk whose exposed angular extent is narrower than the step can be
missed; this is accepted at interactive scale.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from .geometry import centroid, sort_by_polar_angle
from .models import Disk, Hull

DEFAULT_DIRECTIONS = 360


def find_hull_disks(disks: Sequence[Disk], num_directions: int = DEFAULT_DIRECTIONS) -> List[Disk]:
    """Return the extreme disks of the union, deduplicated, in discovery order."""
    if num_directions < 1:
        raise ValueError("num_directions must be >= 1")
    if len(disks) <= 1:
        return list(disks)

    extremes: Dict[int, Disk] = {}
    for i in range(num_directions):
        theta = 2 * math.pi * i / num_directions
        ux = math.cos(theta)
        uy = math.sin(theta)

        best = None
        best_reach = -math.inf
        for disk in disks:
            reach = disk.x * ux + disk.y * uy + disk.r
            if reach > best_reach:
                best_reach = reach
                best = disk

        if best is not None:
            extremes.setdefault(id(best), best)

    return list(extremes.values())


def order_hull_disks(hull_disks: Sequence[Disk]) -> List[Disk]:
    """Order hull disks counter-clockwise around their centroid."""
    if len(hull_disks) <= 2:
        return list(hull_disks)
    return sort_by_polar_angle(hull_disks, centroid(hull_disks))


def compute_hull(disks: Sequence[Disk], num_directions: int = DEFAULT_DIRECTIONS) -> Hull:
    ordered = order_hull_disks(find_hull_disks(disks, num_directions))
    return Hull(disks=tuple(ordered), center=centroid(ordered))
