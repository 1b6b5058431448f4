"""Consumer-facing entry points of the hull engine.

:func:`compute` is a pure function of its disk list; :class:`DiskConvexHull`
additionally remembers the last result for callers that query membership
and statistics between frames.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator, List, Optional, Sequence

from .geometry import centroid
from .hull_detection import DEFAULT_DIRECTIONS, compute_hull
from .hull_geometry import arc_faces_outward, compute_hull_segments, perimeter
from .models import Disk, Hull, HullResult, HullStats, Point, Segment

logger = logging.getLogger(__name__)


def compute(disks: Sequence[Disk], num_directions: int = DEFAULT_DIRECTIONS) -> HullResult:
    hull = compute_hull(disks, num_directions)
    return HullResult(hull=hull, segments=tuple(compute_hull_segments(hull)))


class DiskConvexHull:
    """Hull computer that keeps the most recent result."""

    def __init__(self, num_directions: int = DEFAULT_DIRECTIONS) -> None:
        self.num_directions = num_directions
        self.hull: Optional[Hull] = None
        self.segments: Optional[tuple[Segment, ...]] = None
        self._total_disks = 0

    def compute(self, disks: Sequence[Disk]) -> HullResult:
        result = compute(disks, self.num_directions)
        self.hull = result.hull
        self.segments = result.segments
        self._total_disks = len(disks)
        return result

    def is_hull_disk(self, disk: Disk) -> bool:
        return self.hull.is_hull_disk(disk) if self.hull is not None else False

    def get_stats(self) -> Optional[HullStats]:
        if self.hull is None:
            return None
        segments = self.segments or ()
        return HullStats(
            total_disks=self._total_disks,
            hull_disks=len(self.hull),
            tangent_segments=sum(1 for s in segments if s.kind == "tangent"),
            arc_segments=sum(1 for s in segments if s.kind == "arc"),
        )

    def perimeter(self, unit_size: float = 1.0) -> Optional[float]:
        if self.hull is None or len(self.hull) < 2:
            return None
        return perimeter(self.segments or (), unit_size)


def hull_perimeter(disks: Sequence[Disk], unit_size: float = 1.0) -> Optional[float]:
    """Perimeter of the hull of *disks*, or ``None`` if unavailable.

    Used once per frame by interactive callers: a hull with fewer than
    two disks has no perimeter, and any failure on malformed input is
    logged and reported as ``None`` instead of propagating.
    """
    try:
        result = compute(disks)
        if len(result.hull) < 2:
            return None
        return result.perimeter(unit_size)
    except Exception:
        logger.exception("Hull computation failed for %d disks", len(disks))
        return None


def boundary_walk(segments: Iterable[Segment]) -> Iterator[Segment]:
    """Yield *segments* in boundary order: each tangent, then the arc it lands on."""
    segments = list(segments)
    arcs = {id(s.disk): s for s in segments if s.kind == "arc"}
    for seg in segments:
        if seg.kind != "tangent":
            continue
        yield seg
        arc = arcs.get(id(seg.disk2))
        if arc is not None:
            yield arc


def _fmt(value: float) -> str:
    return f"{round(value, 6) + 0.0:.6f}".rstrip("0").rstrip(".")


def hull_svg_path(
    segments: Iterable[Segment],
    tol: float = 1e-6,
    center: Optional[Point] = None,
) -> str:
    """Return SVG path data tracing the hull boundary.

    Tangents become ``M``/``L`` commands (``M`` only when the tangent does
    not start at the current point) and arcs become ``A`` commands.  Arcs
    sweep in the direction of increasing angle unless they would cut
    through the hull (see :func:`arc_faces_outward`), in which case the
    outer side of the disk is drawn.  *center* defaults to the centroid
    of the arc disks.
    """
    segments = list(segments)
    if center is None:
        arc_disks = {id(s.disk): s.disk for s in segments if s.kind == "arc"}
        center = centroid(list(arc_disks.values()))

    commands: List[str] = []
    current = None
    for seg in boundary_walk(segments):
        if seg.kind == "tangent":
            if (
                current is None
                or abs(current.x - seg.start.x) > tol
                or abs(current.y - seg.start.y) > tol
            ):
                commands.append(f"M {_fmt(seg.start.x)} {_fmt(seg.start.y)}")
            commands.append(f"L {_fmt(seg.end.x)} {_fmt(seg.end.y)}")
            current = seg.end
        else:
            r = _fmt(seg.disk.r)
            if arc_faces_outward(seg, center):
                span, sweep = seg.span, 1
            else:
                span, sweep = 2 * math.pi - seg.span, 0
            large = 1 if span > math.pi else 0
            commands.append(
                f"A {r} {r} 0 {large} {sweep} {_fmt(seg.end_point.x)} {_fmt(seg.end_point.y)}"
            )
            current = seg.end_point
    if commands:
        commands.append("Z")
    return " ".join(commands)
