from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Disk:
    """A disk given by its centre and radius.

    All disks taking part in one hull computation share the same *r*.
    """

    x: float
    y: float
    r: float

    @property
    def center(self) -> Point:
        return Point(self.x, self.y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "r": self.r}


@dataclass(frozen=True)
class Tangent:
    """Candidate external tangent between two equal-radius disks.

    *p1* lies on the first disk's boundary and *p2* on the second's.
    """

    p1: Point
    p2: Point

    @property
    def midpoint(self) -> Point:
        from .geometry import midpoint

        return midpoint(self.p1, self.p2)

    @property
    def length(self) -> float:
        return math.hypot(self.p2.x - self.p1.x, self.p2.y - self.p1.y)


@dataclass(frozen=True)
class TangentSegment:
    """Straight hull edge between two consecutive hull disks."""

    kind: ClassVar[str] = "tangent"

    start: Point
    end: Point
    disk1: Disk
    disk2: Disk

    @property
    def length(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "from": self.start.to_dict(),
            "to": self.end.to_dict(),
            "disk1": self.disk1.to_dict(),
            "disk2": self.disk2.to_dict(),
        }


@dataclass(frozen=True)
class ArcSegment:
    """Boundary arc of one hull disk.

    Runs from the point where the incoming tangent lands on *disk* to the
    point where the outgoing tangent leaves it.  Angles are ``atan2``
    values about the disk centre.
    """

    kind: ClassVar[str] = "arc"

    disk: Disk
    start_angle: float
    end_angle: float
    start_point: Point
    end_point: Point

    @property
    def span(self) -> float:
        """Forward angular extent in ``[0, 2π)``."""
        diff = self.end_angle - self.start_angle
        if diff < 0:
            diff += 2 * math.pi
        return diff

    @property
    def length(self) -> float:
        return self.disk.r * self.span

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "disk": self.disk.to_dict(),
            "startAngle": self.start_angle,
            "endAngle": self.end_angle,
            "startPoint": self.start_point.to_dict(),
            "endPoint": self.end_point.to_dict(),
        }


Segment = Union[TangentSegment, ArcSegment]


@dataclass(frozen=True)
class Hull:
    """Hull disks in counter-clockwise order plus their centroid.

    Membership (``disk in hull`` / :meth:`is_hull_disk`) is by object
    identity, so two distinct disks at the same position are distinct
    members.
    """

    disks: tuple[Disk, ...]
    center: Point
    _member_ids: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "disks", tuple(self.disks))
        object.__setattr__(self, "_member_ids", frozenset(id(d) for d in self.disks))

    def is_hull_disk(self, disk: Disk) -> bool:
        return id(disk) in self._member_ids

    def __contains__(self, disk: object) -> bool:
        return id(disk) in self._member_ids

    def __len__(self) -> int:
        return len(self.disks)


@dataclass(frozen=True)
class HullStats:
    total_disks: int
    hull_disks: int
    tangent_segments: int
    arc_segments: int


@dataclass(frozen=True)
class HullResult:
    hull: Hull
    segments: tuple[Segment, ...]

    @property
    def tangents(self) -> list[TangentSegment]:
        return [s for s in self.segments if s.kind == "tangent"]

    @property
    def arcs(self) -> list[ArcSegment]:
        return [s for s in self.segments if s.kind == "arc"]

    def perimeter(self, unit_size: float = 1.0) -> float:
        from .hull_geometry import perimeter

        return perimeter(self.segments, unit_size)

    def to_dict(self, unit_size: float = 1.0) -> dict:
        return {
            "hull": {
                "disks": [d.to_dict() for d in self.hull.disks],
                "center": self.hull.center.to_dict(),
            },
            "segments": [s.to_dict() for s in self.segments],
            "perimeter": self.perimeter(unit_size) if self.segments else None,
            "unitSize": unit_size,
        }
