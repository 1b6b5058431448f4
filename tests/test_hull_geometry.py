"""Tests for hull boundary assembly and perimeter."""

import math

import pytest

from pennyhull.disk_hull import compute
from pennyhull.hull_detection import compute_hull
from pennyhull.hull_geometry import arc_faces_outward, compute_hull_segments, outer_arc, perimeter
from pennyhull.models import ArcSegment, Disk, Hull, Point, TangentSegment

EXAMPLE = [Disk(-50, 50, 25), Disk(50, 40, 25), Disk(40, -50, 25), Disk(-40, -40, 25)]


def _regular_polygon(n, circumradius, r, phase=0.0):
    return [
        Disk(
            circumradius * math.cos(phase + 2 * math.pi * i / n),
            circumradius * math.sin(phase + 2 * math.pi * i / n),
            r,
        )
        for i in range(n)
    ]


def _transform(disks, angle, dx, dy):
    c, s = math.cos(angle), math.sin(angle)
    return [Disk(c * d.x - s * d.y + dx, s * d.x + c * d.y + dy, d.r) for d in disks]


def _perimeter(disks, unit=1.0):
    return perimeter(compute(disks).segments, unit)


class TestSegmentCounts:
    def test_k_tangents_and_k_arcs(self):
        hull = compute_hull(EXAMPLE)
        segments = compute_hull_segments(hull)
        k = len(hull.disks)
        assert k == 4
        assert sum(isinstance(s, TangentSegment) for s in segments) == k
        assert sum(isinstance(s, ArcSegment) for s in segments) == k

    def test_tangents_precede_arcs(self):
        segments = compute_hull_segments(compute_hull(EXAMPLE))
        kinds = [s.kind for s in segments]
        assert kinds == ["tangent"] * 4 + ["arc"] * 4

    def test_fewer_than_two_disks(self):
        assert compute_hull_segments(compute_hull([])) == []
        assert compute_hull_segments(compute_hull([Disk(0, 0, 1)])) == []

    def test_tangents_connect_consecutive_hull_disks(self):
        hull = compute_hull(EXAMPLE)
        tangents = [s for s in compute_hull_segments(hull) if s.kind == "tangent"]
        for i, seg in enumerate(tangents):
            assert seg.disk1 is hull.disks[i]
            assert seg.disk2 is hull.disks[(i + 1) % len(hull.disks)]

    def test_arcs_meet_tangent_endpoints(self):
        hull = compute_hull(EXAMPLE)
        segments = compute_hull_segments(hull)
        tangents = [s for s in segments if s.kind == "tangent"]
        arcs = [s for s in segments if s.kind == "arc"]
        k = len(hull.disks)
        for i, arc in enumerate(arcs):
            assert arc.disk is hull.disks[i]
            assert arc.start_point == tangents[(i - 1) % k].end
            assert arc.end_point == tangents[i].start


class TestSupportingTangents:
    def test_every_tangent_supports_all_disks(self):
        disks = EXAMPLE + [Disk(0, 0, 25)]
        for seg in compute(disks).tangents:
            dx = seg.end.x - seg.start.x
            dy = seg.end.y - seg.start.y
            length = math.hypot(dx, dy)
            # signed distance of each centre from the tangent line, outward on the right
            for d in disks:
                side = ((d.x - seg.start.x) * dy - (d.y - seg.start.y) * dx) / length
                assert side <= -d.r + 1e-9


class TestKnownPerimeters:
    @pytest.mark.parametrize("d", [40.0, 100.0, 250.0])
    def test_stadium(self, d):
        r = 20.0
        disks = [Disk(0.0, 0.0, r), Disk(d, 0.0, r)]
        assert _perimeter(disks) == pytest.approx(2 * d + 2 * math.pi * r, rel=1e-9)

    def test_stadium_reference_value(self):
        assert _perimeter([Disk(0, 0, 20), Disk(100, 0, 20)]) == pytest.approx(325.66, abs=0.01)

    @pytest.mark.parametrize("n", [3, 4, 5, 6])
    def test_regular_polygon(self, n):
        R, r = 60.0, 20.0
        expected = n * 2 * R * math.sin(math.pi / n) + 2 * math.pi * r
        assert _perimeter(_regular_polygon(n, R, r)) == pytest.approx(expected, rel=1e-9)

    @pytest.mark.parametrize("n", [3, 4, 5, 6])
    def test_regular_polygon_arc_spans(self, n):
        arcs = compute(_regular_polygon(n, 60.0, 20.0)).arcs
        assert len(arcs) == n
        for arc in arcs:
            assert arc.span == pytest.approx(2 * math.pi / n)

    def test_touching_triangle_in_radius_units(self):
        r = 20.0
        disks = _regular_polygon(3, 2 * r / math.sqrt(3), r)
        assert _perimeter(disks, unit=r) == pytest.approx(6 + 2 * math.pi, rel=1e-9)

    def test_interior_disk_does_not_change_perimeter(self):
        ring = _regular_polygon(6, 40.0, 20.0)
        with_center = ring + [Disk(0.0, 0.0, 20.0)]
        assert _perimeter(with_center) == pytest.approx(_perimeter(ring), rel=1e-12)


class TestInvariance:
    CONFIGS = [
        EXAMPLE,
        EXAMPLE + [Disk(0, 0, 25)],
        _regular_polygon(5, 70.0, 20.0, phase=0.3),
        [Disk(0, 0, 10), Disk(35, 5, 10), Disk(20, 40, 10), Disk(-15, 30, 10), Disk(10, 18, 10)],
    ]

    @pytest.mark.parametrize("disks", CONFIGS)
    @pytest.mark.parametrize("angle,dx,dy", [(0.7, 123.0, -45.0), (2.9, -10.0, 300.0), (-1.3, 0.0, 0.0)])
    def test_rotation_and_translation(self, disks, angle, dx, dy):
        moved = _transform(disks, angle, dx, dy)
        assert _perimeter(moved) == pytest.approx(_perimeter(disks), rel=1e-6)

    @pytest.mark.parametrize("disks", CONFIGS)
    def test_input_order_reversal(self, disks):
        assert _perimeter(list(reversed(disks))) == pytest.approx(_perimeter(disks), rel=1e-9)

    def test_idempotent(self):
        disks = EXAMPLE + [Disk(0, 0, 25)]
        first = compute(disks)
        second = compute(disks)
        assert first.segments == second.segments
        assert first.hull.disks == second.hull.disks
        assert first.perimeter(25) == second.perimeter(25)


class TestDegenerateInput:
    def test_collinear_does_not_raise(self):
        disks = [Disk(0, 0, 20), Disk(50, 0, 20), Disk(100, 0, 20)]
        value = _perimeter(disks)
        assert isinstance(value, float)

    def test_diagonal_collinear_does_not_raise(self):
        disks = [Disk(i * 30.0, i * 30.0, 10.0) for i in range(4)]
        assert isinstance(_perimeter(disks), float)

    def test_coincident_pair_is_skipped(self):
        a = Disk(0, 0, 5)
        b = Disk(0, 0, 5)
        c = Disk(40, 0, 5)
        hull = Hull(disks=(a, b, c), center=Point(40 / 3, 0))
        segments = compute_hull_segments(hull)
        tangents = [s for s in segments if s.kind == "tangent"]
        arcs = [s for s in segments if s.kind == "arc"]
        assert len(tangents) == 2
        assert len(arcs) == 1
        assert arcs[0].disk is c


class TestPerimeter:
    def test_unit_size_scales(self):
        segments = compute(EXAMPLE).segments
        assert perimeter(segments, 25.0) == pytest.approx(perimeter(segments) / 25.0)

    def test_empty(self):
        assert perimeter([]) == 0.0

    def test_invalid_unit(self):
        with pytest.raises(ValueError):
            perimeter([], 0.0)

    def test_negative_arc_difference_wraps(self):
        disk = Disk(0, 0, 2)
        arc = ArcSegment(disk, 3.0, -3.0, Point(0, 0), Point(0, 0))
        assert arc.span == pytest.approx(2 * math.pi - 6.0)
        assert perimeter([arc]) == pytest.approx(2 * (2 * math.pi - 6.0))


class TestOuterArc:
    def test_stadium_arcs_are_flipped_outward(self):
        result = compute([Disk(0, 0, 20), Disk(100, 0, 20)])
        center = result.hull.center
        for arc in result.arcs:
            assert not arc_faces_outward(arc, center)
            drawn = outer_arc(arc, center)
            assert arc_faces_outward(drawn, center)
            assert drawn.span == pytest.approx(math.pi)
            assert drawn.length == pytest.approx(arc.length)
            mid = drawn.start_angle + drawn.span / 2
            mid_x = drawn.disk.x + drawn.disk.r * math.cos(mid)
            if drawn.disk.x == 100:
                assert mid_x == pytest.approx(120.0)
            else:
                assert mid_x == pytest.approx(-20.0)

    def test_flipped_arc_keeps_endpoints(self):
        result = compute([Disk(0, 0, 20), Disk(100, 0, 20)])
        arc = result.arcs[0]
        drawn = outer_arc(arc, result.hull.center)
        assert {drawn.start_point, drawn.end_point} == {arc.start_point, arc.end_point}

    @pytest.mark.parametrize("disks", [EXAMPLE, _regular_polygon(5, 60.0, 20.0)])
    def test_polygon_arcs_already_outward(self, disks):
        result = compute(disks)
        for arc in result.arcs:
            assert outer_arc(arc, result.hull.center) is arc
