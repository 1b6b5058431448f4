"""Assembly of the hull boundary from tangent segments and arcs."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from .geometry import distance
from .models import ArcSegment, Disk, Hull, Point, Segment, Tangent, TangentSegment
from .tangents import external_tangents_equal_radius, select_hull_tangent


def _hull_tangent(hull: Hull, disk_a: Disk, disk_b: Disk) -> Optional[Tangent]:
    tangents = external_tangents_equal_radius(disk_a, disk_b)
    return select_hull_tangent(disk_a, disk_b, tangents, hull.center)


def compute_hull_segments(hull: Hull) -> List[Segment]:
    """Return the hull boundary as tangent segments followed by arcs.

    A hull of *k* >= 2 disks yields *k* tangents (``disks[i] → disks[i+1]``)
    and *k* arcs (one per disk, from the incoming tangent's landing point
    to the outgoing tangent's departure point).  Pairs with coincident
    centres have no tangent; that tangent and the arcs depending on it
    are left out.
    """
    disks = hull.disks
    k = len(disks)
    segments: List[Segment] = []
    if k < 2:
        return segments

    for i in range(k):
        curr = disks[i]
        nxt = disks[(i + 1) % k]
        tangent = _hull_tangent(hull, curr, nxt)
        if tangent is None:
            continue
        segments.append(TangentSegment(start=tangent.p1, end=tangent.p2, disk1=curr, disk2=nxt))

    for i in range(k):
        prev = disks[(i - 1) % k]
        curr = disks[i]
        nxt = disks[(i + 1) % k]
        incoming = _hull_tangent(hull, prev, curr)
        outgoing = _hull_tangent(hull, curr, nxt)
        if incoming is None or outgoing is None:
            continue
        start = incoming.p2
        end = outgoing.p1
        segments.append(
            ArcSegment(
                disk=curr,
                start_angle=math.atan2(start.y - curr.y, start.x - curr.x),
                end_angle=math.atan2(end.y - curr.y, end.x - curr.x),
                start_point=start,
                end_point=end,
            )
        )

    return segments


def perimeter(segments: Iterable[Segment], unit_size: float = 1.0) -> float:
    """Total boundary length divided by *unit_size*.

    Arc lengths use the forward angular span (see :attr:`ArcSegment.span`).
    Callers pass the disk radius as *unit_size* to get radius units.
    """
    if unit_size <= 0:
        raise ValueError("unit_size must be > 0")
    total = sum(seg.length for seg in segments)
    return total * (1 / unit_size)


def arc_faces_outward(arc: ArcSegment, center: Point) -> bool:
    """True if the middle of *arc* lies farther from *center* than its disk centre.

    On a convex hull every boundary arc bulges away from the hull
    centre.  The tie rule in :func:`select_hull_tangent` gives two-disk
    hulls parallel tangents traversed clockwise, so their arcs as built
    sweep through the inside of the stadium instead.
    """
    mid_angle = arc.start_angle + arc.span / 2
    disk = arc.disk
    mid = Point(disk.x + disk.r * math.cos(mid_angle), disk.y + disk.r * math.sin(mid_angle))
    return distance(mid, center) >= distance(disk, center)


def outer_arc(arc: ArcSegment, center: Point) -> ArcSegment:
    """Return *arc*, or its complement on the same disk when it faces inward.

    The complement swaps the start and end so it still sweeps
    counter-clockwise.  Used for drawing; perimeter uses the arcs as built.
    """
    if arc_faces_outward(arc, center):
        return arc
    return ArcSegment(
        disk=arc.disk,
        start_angle=arc.end_angle,
        end_angle=arc.start_angle,
        start_point=arc.end_point,
        end_point=arc.start_point,
    )
