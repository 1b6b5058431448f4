from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, Sequence

from .disk_hull import compute
from .hull_geometry import outer_arc
from .models import Disk, HullResult
from .rolling import RollingTrace


def _ensure_mpl():
    """Lazy-import matplotlib; raise helpful error if missing."""
    try:
        import matplotlib.pyplot as plt
        from matplotlib.patches import Arc, Circle
    except ImportError as exc:  # pragma: no cover - requires optional dep
        raise RuntimeError(
            "matplotlib is required for rendering. Install with `pip install matplotlib`."
        ) from exc
    return plt, Arc, Circle


def render_hull_png(
    disks: Sequence[Disk],
    output_path: str | Path,
    result: Optional[HullResult] = None,
    unit_size: Optional[float] = None,
    disk_color: str = "#cccccc",
    hull_disk_color: str = "#0066cc",
    hull_color: str = "#d1495b",
    hull_linewidth: float = 2.0,
    show_ids: bool = False,
    padding: float = 0.5,
    dpi: int = 150,
) -> None:
    """Render disks and their hull boundary to PNG.

    Hull disks are outlined in *hull_disk_color*, the rest in
    *disk_color*.  Arcs are drawn on the outer side of their disk
    (:func:`~pennyhull.hull_geometry.outer_arc`).  When *unit_size* is
    given the perimeter in those units is used as the title.
    """
    if not disks:
        raise ValueError("At least one disk is required for rendering.")
    plt, Arc, Circle = _ensure_mpl()
    if result is None:
        result = compute(disks)

    fig, ax = plt.subplots()

    for index, disk in enumerate(disks):
        color = hull_disk_color if result.hull.is_hull_disk(disk) else disk_color
        ax.add_patch(Circle((disk.x, disk.y), disk.r, fill=False, edgecolor=color, linewidth=1.0))
        if show_ids:
            ax.text(disk.x, disk.y, str(index), ha="center", va="center", fontsize=7, color="#333333")

    for seg in result.segments:
        if seg.kind == "tangent":
            ax.plot([seg.start.x, seg.end.x], [seg.start.y, seg.end.y], color=hull_color, linewidth=hull_linewidth)
        else:
            arc = outer_arc(seg, result.hull.center)
            theta1 = math.degrees(arc.start_angle)
            theta2 = theta1 + math.degrees(arc.span)
            ax.add_patch(
                Arc(
                    (arc.disk.x, arc.disk.y),
                    2 * arc.disk.r,
                    2 * arc.disk.r,
                    theta1=theta1,
                    theta2=theta2,
                    color=hull_color,
                    linewidth=hull_linewidth,
                )
            )

    if unit_size is not None and result.segments:
        ax.set_title(f"perimeter = {result.perimeter(unit_size):.6f}")

    r_max = max(d.r for d in disks)
    pad = r_max * (1 + padding)
    ax.set_xlim(min(d.x for d in disks) - pad, max(d.x for d in disks) + pad)
    ax.set_ylim(min(d.y for d in disks) - pad, max(d.y for d in disks) + pad)
    ax.set_aspect("equal", "box")
    ax.axis("off")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)


def render_rolling_plot(
    trace: RollingTrace,
    output_path: str | Path,
    color: str = "#5aa9e6",
    dpi: int = 150,
) -> None:
    """Plot perimeter against degrees rolled; missing perimeters are skipped."""
    plt, _, _ = _ensure_mpl()
    pairs = [(a, p) for a, p in zip(trace.angles, trace.perimeters) if p is not None]

    fig, ax = plt.subplots()
    if pairs:
        xs, ys = zip(*pairs)
        ax.plot(xs, ys, color=color, linewidth=1.2)
    ax.set_xlabel("angle (deg)")
    ax.set_ylabel("perimeter")
    ax.grid(True, alpha=0.3)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
