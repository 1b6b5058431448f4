"""Tests for rolling disks around an anchor."""

import math

import pytest

from pennyhull.configuration import disks_from_positions
from pennyhull.disk_hull import hull_perimeter
from pennyhull.models import Point
from pennyhull.rolling import (
    RollingDisk,
    RollingState,
    add_rolling_disk,
    collides,
    remove_rolling_disk,
    roll_step,
    roll_trace,
    set_anchor,
    set_rolling_direction,
    start_rolling,
)

R = 20.0


def _polar(angle_deg, radius=40.0):
    a = math.radians(angle_deg)
    return Point(radius * math.cos(a), radius * math.sin(a))


def _angle_deg(p):
    return math.degrees(math.atan2(p.y, p.x))


@pytest.fixture
def positions():
    return {0: Point(0.0, 0.0), 1: Point(40.0, 0.0), 2: Point(0.0, 40.0)}


class TestRollingState:
    def test_start_with_ids_and_pairs(self, positions):
        state = start_rolling(positions, 0, [1, (2, -1)], step_degrees=5.0)
        assert state.anchor_id == 0
        assert state.disks == (RollingDisk(1, 1), RollingDisk(2, -1))
        assert state.rolling_ids == (1, 2)
        assert state.current_angle == 0.0

    def test_unknown_anchor(self, positions):
        with pytest.raises(KeyError):
            start_rolling(positions, 7, [1])

    def test_unknown_rolling_disk(self, positions):
        with pytest.raises(KeyError):
            start_rolling(positions, 0, [7])

    def test_anchor_cannot_roll(self, positions):
        with pytest.raises(ValueError):
            start_rolling(positions, 1, [1])

    def test_duplicate_rolling_disk(self, positions):
        state = start_rolling(positions, 0, [1])
        with pytest.raises(ValueError):
            add_rolling_disk(state, positions, 1, -1)

    def test_bad_direction(self, positions):
        with pytest.raises(ValueError):
            start_rolling(positions, 0, [(1, 2)])

    def test_update_direction(self, positions):
        state = set_rolling_direction(start_rolling(positions, 0, [1, 2]), 2, -1)
        assert state.disks == (RollingDisk(1, 1), RollingDisk(2, -1))
        with pytest.raises(KeyError):
            set_rolling_direction(state, 0, 1)

    def test_remove(self, positions):
        state = remove_rolling_disk(start_rolling(positions, 0, [1, 2]), 1)
        assert state.rolling_ids == (2,)
        with pytest.raises(KeyError):
            remove_rolling_disk(state, 1)

    def test_new_anchor_stops_rolling(self, positions):
        state = set_anchor(start_rolling(positions, 0, [1, 2]), positions, 2)
        assert state.anchor_id == 2
        assert state.rolling_ids == (1,)


class TestCollides:
    def test_skips_anchor_and_rolling_disks(self, positions):
        state = RollingState(anchor_id=0, disks=(RollingDisk(1), RollingDisk(2)))
        # overlaps both the anchor and the other rolling disk
        assert not collides(positions, state, 1, Point(5.0, 30.0), R)

    def test_static_disk(self, positions):
        state = RollingState(anchor_id=0, disks=(RollingDisk(1),))
        assert collides(positions, state, 1, Point(10.0, 30.0), R)
        assert not collides(positions, state, 1, Point(20.0, 0.0), R)


class TestRollStep:
    def test_step_keeps_distance_to_anchor(self, positions):
        state = start_rolling(positions, 0, [1], step_degrees=10.0)
        moved, new_state, disk_angles = roll_step(positions, state, R)
        assert _angle_deg(moved[1]) == pytest.approx(10.0)
        assert math.hypot(moved[1].x, moved[1].y) == pytest.approx(40.0)
        assert moved[0] == positions[0]
        assert positions[1] == Point(40.0, 0.0)
        assert new_state.current_angle == pytest.approx(10.0)
        assert disk_angles == pytest.approx({1: math.radians(10.0)})

    def test_collision_returns_none(self, positions):
        state = start_rolling(positions, 0, [1], step_degrees=90.0)
        assert roll_step(positions, state, R) is None

    def test_no_disk_moves_when_one_collides(self):
        positions = {0: Point(0.0, 0.0), 1: _polar(0), 2: _polar(-90), 3: _polar(90)}
        state = start_rolling(positions, 0, [2, 1], step_degrees=35.0)
        before = dict(positions)
        # disk 2 is free, disk 1 would hit disk 3
        assert roll_step(positions, state, R) is None
        assert positions == before

        state = start_rolling(positions, 0, [1, 2], step_degrees=10.0)
        moved, _, _ = roll_step(positions, state, R)
        assert _angle_deg(moved[1]) == pytest.approx(10.0)
        assert _angle_deg(moved[2]) == pytest.approx(-80.0)
        assert moved[3] == positions[3]

    def test_opposite_directions(self):
        positions = {0: Point(0.0, 0.0), 1: _polar(0), 2: _polar(180)}
        state = start_rolling(positions, 0, [(1, 1), (2, -1)], step_degrees=15.0)
        moved, _, disk_angles = roll_step(positions, state, R)
        assert _angle_deg(moved[1]) == pytest.approx(15.0)
        assert _angle_deg(moved[2]) == pytest.approx(165.0)
        assert disk_angles[1] == pytest.approx(math.radians(15.0))
        assert disk_angles[2] == pytest.approx(-math.radians(15.0))

    def test_rolling_disks_pass_each_other(self):
        positions = {0: Point(0.0, 0.0), 1: _polar(0), 2: _polar(60)}
        state = start_rolling(positions, 0, [(1, 1), (2, -1)], step_degrees=10.0)
        assert roll_step(positions, state, R) is not None

    def test_requires_rolling_disk(self, positions):
        with pytest.raises(ValueError):
            roll_step(positions, start_rolling(positions, 0), R)


class TestRollTrace:
    def test_stops_at_collision(self, positions):
        state = start_rolling(positions, 0, [1], step_degrees=7.0)
        trace = roll_trace(positions, state, R, steps=20)
        assert len(trace.steps) == 4
        assert trace.stopped_by_collision
        assert trace.angles == pytest.approx([7.0, 14.0, 21.0, 28.0])
        assert _angle_deg(trace.positions[1]) == pytest.approx(28.0)

    def test_reverse_direction(self, positions):
        state = start_rolling(positions, 0, [(1, -1)], step_degrees=10.0)
        trace = roll_trace(positions, state, R, steps=10)
        assert len(trace.steps) == 10
        assert not trace.stopped_by_collision
        assert _angle_deg(trace.positions[1]) == pytest.approx(-100.0)

    def test_step_records(self):
        positions = {0: Point(0.0, 0.0), 1: _polar(0), 2: _polar(180), 3: Point(200.0, 200.0)}
        state = start_rolling(positions, 0, [(1, 1), (2, -1)], step_degrees=5.0)
        trace = roll_trace(positions, state, R, steps=3)
        step = trace.steps[-1]
        assert step.disk_angles == pytest.approx({1: math.radians(5.0), 2: -math.radians(5.0)})
        assert step.total_angle_moved == pytest.approx(math.radians(10.0))
        assert step.step_angle == pytest.approx(math.radians(5.0))
        assert step.current_angle == pytest.approx(15.0)

    def test_perimeter_after_each_step(self, positions):
        state = start_rolling(positions, 0, [1], step_degrees=10.0)
        trace = roll_trace(positions, state, R, steps=2)
        assert len(trace.perimeters) == 2
        moved, _, _ = roll_step(positions, state, R)
        expected = hull_perimeter(disks_from_positions(moved, R), R)
        assert trace.perimeters[0] == pytest.approx(expected)
        assert trace.perimeters[1] != pytest.approx(trace.perimeters[0])
