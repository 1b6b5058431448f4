"""Rolling disks around an anchor disk while tracking the hull perimeter.

Any number of disks can roll around one anchor at once, each in its own
direction (``1`` counter-clockwise, ``-1`` clockwise).  A step is
all-or-nothing: if any rolling disk would collide with a disk that is
neither the anchor nor rolling, no disk moves and the roll stops.
Rolling disks are not checked against each other.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, Hashable, Iterable, List, Optional, Tuple, Union

from .configuration import Positions, disks_from_positions
from .disk_hull import hull_perimeter
from .models import Point


@dataclass(frozen=True)
class RollingDisk:
    node_id: Hashable
    direction: int = 1


@dataclass(frozen=True)
class RollingState:
    """Anchor, rolling disks and step size of a roll.

    Attributes
    ----------
    anchor_id : Hashable
        Disk the others roll around.
    disks : tuple of RollingDisk
        Rolling disks in the order they were added.
    step_degrees : float
        Angle each rolling disk moves per step.
    current_angle : float
        Degrees rolled so far (``step_degrees`` per completed step).
    """

    anchor_id: Hashable
    disks: Tuple[RollingDisk, ...] = ()
    step_degrees: float = 1.0
    current_angle: float = 0.0

    @property
    def rolling_ids(self) -> Tuple[Hashable, ...]:
        return tuple(d.node_id for d in self.disks)


@dataclass(frozen=True)
class RollingStep:
    """Record of one completed step.

    ``disk_angles`` maps each rolling disk to the signed angle (radians)
    it moved; ``total_angle_moved`` is the sum of their magnitudes.
    ``perimeter`` is ``None`` when no hull was available.
    """

    perimeter: Optional[float]
    disk_angles: Dict[Hashable, float]
    total_angle_moved: float
    step_angle: float
    current_angle: float


@dataclass
class RollingTrace:
    steps: List[RollingStep] = field(default_factory=list)
    positions: Positions = field(default_factory=dict)
    stopped_by_collision: bool = False

    @property
    def angles(self) -> List[float]:
        """Degrees rolled after each step."""
        return [s.current_angle for s in self.steps]

    @property
    def perimeters(self) -> List[Optional[float]]:
        return [s.perimeter for s in self.steps]


RollingEntry = Union[Hashable, Tuple[Hashable, int]]


def _validate_direction(direction: int) -> None:
    if direction not in (1, -1):
        raise ValueError("direction must be 1 or -1")


def start_rolling(
    positions: Positions,
    anchor_id: Hashable,
    rolling: Iterable[RollingEntry] = (),
    step_degrees: float = 1.0,
) -> RollingState:
    """Create a roll around *anchor_id*.

    *rolling* holds node ids (rolling counter-clockwise) or
    ``(node_id, direction)`` pairs.
    """
    if anchor_id not in positions:
        raise KeyError(f"Node {anchor_id!r} not found")
    state = RollingState(anchor_id=anchor_id, step_degrees=step_degrees)
    for item in rolling:
        node_id, direction = item if isinstance(item, tuple) else (item, 1)
        state = add_rolling_disk(state, positions, node_id, direction)
    return state


def add_rolling_disk(
    state: RollingState,
    positions: Positions,
    node_id: Hashable,
    direction: int = 1,
) -> RollingState:
    if node_id not in positions:
        raise KeyError(f"Node {node_id!r} not found")
    if node_id == state.anchor_id:
        raise ValueError(f"Node {node_id!r} is the anchor")
    if node_id in state.rolling_ids:
        raise ValueError(f"Node {node_id!r} is already rolling")
    _validate_direction(direction)
    return replace(state, disks=state.disks + (RollingDisk(node_id, direction),))


def remove_rolling_disk(state: RollingState, node_id: Hashable) -> RollingState:
    if node_id not in state.rolling_ids:
        raise KeyError(f"Node {node_id!r} is not rolling")
    return replace(state, disks=tuple(d for d in state.disks if d.node_id != node_id))


def set_rolling_direction(state: RollingState, node_id: Hashable, direction: int) -> RollingState:
    if node_id not in state.rolling_ids:
        raise KeyError(f"Node {node_id!r} is not rolling")
    _validate_direction(direction)
    return replace(
        state,
        disks=tuple(replace(d, direction=direction) if d.node_id == node_id else d for d in state.disks),
    )


def set_anchor(state: RollingState, positions: Positions, anchor_id: Hashable) -> RollingState:
    """Make *anchor_id* the anchor, dropping it from the rolling disks."""
    if anchor_id not in positions:
        raise KeyError(f"Node {anchor_id!r} not found")
    return replace(
        state,
        anchor_id=anchor_id,
        disks=tuple(d for d in state.disks if d.node_id != anchor_id),
    )


def collides(
    positions: Positions,
    state: RollingState,
    node_id: Hashable,
    point: Point,
    node_size: float,
) -> bool:
    """True if *point* is within touching distance of a disk that is neither anchor nor rolling."""
    skip = set(state.rolling_ids)
    skip.add(state.anchor_id)
    skip.add(node_id)
    for other_id, other in positions.items():
        if other_id in skip:
            continue
        if math.hypot(point.x - other.x, point.y - other.y) < node_size * 2:
            return True
    return False


def _rotated(anchor: Point, pos: Point, angle: float) -> Point:
    dx = pos.x - anchor.x
    dy = pos.y - anchor.y
    radius = math.hypot(dx, dy)
    new_angle = math.atan2(dy, dx) + angle
    return Point(anchor.x + radius * math.cos(new_angle), anchor.y + radius * math.sin(new_angle))


def roll_step(
    positions: Positions,
    state: RollingState,
    node_size: float,
) -> Optional[Tuple[Positions, RollingState, Dict[Hashable, float]]]:
    """Move every rolling disk one step around the anchor.

    Returns ``(new_positions, new_state, disk_angles)``, or ``None`` when
    any disk would collide, in which case nothing moves.
    """
    if not state.disks:
        raise ValueError("No rolling disks")
    anchor = positions[state.anchor_id]
    step = math.radians(state.step_degrees)

    moved = dict(positions)
    disk_angles: Dict[Hashable, float] = {}
    for disk in state.disks:
        angle = step * disk.direction
        point = _rotated(anchor, positions[disk.node_id], angle)
        if collides(positions, state, disk.node_id, point, node_size):
            return None
        moved[disk.node_id] = point
        disk_angles[disk.node_id] = angle

    return moved, replace(state, current_angle=state.current_angle + state.step_degrees), disk_angles


def roll_trace(
    positions: Positions,
    state: RollingState,
    node_size: float,
    steps: int,
) -> RollingTrace:
    """Roll up to *steps* times, recording perimeter (radius units) after each step."""
    trace = RollingTrace(positions=dict(positions))
    current = dict(positions)
    for _ in range(steps):
        stepped = roll_step(current, state, node_size)
        if stepped is None:
            trace.stopped_by_collision = True
            break
        current, state, disk_angles = stepped
        trace.steps.append(
            RollingStep(
                perimeter=hull_perimeter(disks_from_positions(current, node_size), node_size),
                disk_angles=disk_angles,
                total_angle_moved=sum(abs(a) for a in disk_angles.values()),
                step_angle=math.radians(state.step_degrees),
                current_angle=state.current_angle,
            )
        )
    trace.positions = current
    return trace
