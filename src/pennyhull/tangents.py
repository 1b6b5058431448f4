"""External tangents between equal-radius disks."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from .geometry import distance
from .models import Disk, Point, Tangent

COINCIDENT_EPS = 1e-10


def external_tangents_equal_radius(disk_a: Disk, disk_b: Disk) -> Optional[Tuple[Tangent, Tangent]]:
    """Return the two external tangents of *disk_a* and *disk_b*.

    With equal radii both tangents are parallel to the centre line, so
    each endpoint is a centre offset by the radius along the
    perpendicular at ``θ + π/2`` (first tangent) or ``θ − π/2``
    (second).  Returns ``None`` when the centres coincide.
    """
    dx = disk_b.x - disk_a.x
    dy = disk_b.y - disk_a.y
    if math.hypot(dx, dy) < COINCIDENT_EPS:
        return None

    base = math.atan2(dy, dx)
    tangents = []
    for perp in (base + math.pi / 2, base - math.pi / 2):
        c = math.cos(perp)
        s = math.sin(perp)
        tangents.append(
            Tangent(
                p1=Point(disk_a.x + disk_a.r * c, disk_a.y + disk_a.r * s),
                p2=Point(disk_b.x + disk_b.r * c, disk_b.y + disk_b.r * s),
            )
        )
    return tangents[0], tangents[1]


def select_hull_tangent(
    disk_a: Disk,
    disk_b: Disk,
    tangents: Optional[Sequence[Tangent]],
    hull_center: Point,
) -> Optional[Tangent]:
    """Pick the tangent whose midpoint lies farthest from *hull_center*.

    The outer tangent is the one on the far side of the hull centroid.
    This is a proxy for "outward facing" and can misselect for very
    eccentric hulls.  The first candidate wins ties.
    """
    if not tangents:
        return None
    if len(tangents) == 1:
        return tangents[0]

    best = tangents[0]
    best_dist = -math.inf
    for tangent in tangents:
        d = distance(tangent.midpoint, hull_center)
        if d > best_dist:
            best_dist = d
            best = tangent
    return best
