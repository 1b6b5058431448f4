"""Tests for PNG rendering of hulls and rolling traces."""

import tempfile
from pathlib import Path

import pytest

from pennyhull.disk_hull import compute
from pennyhull.models import Disk
from pennyhull.render import render_hull_png, render_rolling_plot
from pennyhull.rolling import RollingStep, RollingTrace

DISKS = [Disk(-50, 50, 25), Disk(50, 40, 25), Disk(40, -50, 25), Disk(-40, -40, 25), Disk(0, 0, 25)]


@pytest.fixture
def tmp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


class TestRenderHull:
    def test_renders(self, tmp_dir):
        out = tmp_dir / "hull.png"
        render_hull_png(DISKS, out, unit_size=25.0, show_ids=True)
        assert out.exists()
        assert out.stat().st_size > 0

    def test_precomputed_result(self, tmp_dir):
        out = tmp_dir / "nested" / "hull.png"
        render_hull_png(DISKS, out, result=compute(DISKS))
        assert out.exists()

    def test_single_disk(self, tmp_dir):
        out = tmp_dir / "one.png"
        render_hull_png([Disk(0, 0, 10)], out, unit_size=10.0)
        assert out.exists()

    def test_no_disks(self, tmp_dir):
        with pytest.raises(ValueError):
            render_hull_png([], tmp_dir / "empty.png")


class TestRenderRollingPlot:
    def test_renders(self, tmp_dir):
        trace = RollingTrace(
            steps=[
                RollingStep(perimeter=p, disk_angles={1: 0.1}, total_angle_moved=0.1, step_angle=0.1, current_angle=a)
                for a, p in [(5.0, 10.0), (10.0, None), (15.0, 10.5)]
            ]
        )
        out = tmp_dir / "rolling.png"
        render_rolling_plot(trace, out)
        assert out.exists()
        assert out.stat().st_size > 0

    def test_empty_trace(self, tmp_dir):
        out = tmp_dir / "empty.png"
        render_rolling_plot(RollingTrace(), out)
        assert out.exists()
