"""pennyhull: convex hulls and perimeters of equal-radius disk packings.

Public API is organised into layers:

- **Core**: models, geometric utilities, hull detection, tangents, boundary assembly
- **Interface**: the composite ``compute`` entry point, perimeter, SVG export
- **Configurations**: collinearity/overlap filters, graph6 penny graphs, I/O
- **Exploration**: minimal-perimeter search and disk rolling
- **Rendering**: PNG output (requires matplotlib)
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import (
    ArcSegment,
    Disk,
    Hull,
    HullResult,
    HullStats,
    Point,
    Segment,
    Tangent,
    TangentSegment,
)
from .geometry import centroid, distance, normalize_angle, sort_by_polar_angle
from .hull_detection import compute_hull, find_hull_disks, order_hull_disks
from .tangents import external_tangents_equal_radius, select_hull_tangent
from .hull_geometry import arc_faces_outward, compute_hull_segments, outer_arc, perimeter

# ── Interface ───────────────────────────────────────────────────────
from .disk_hull import (
    DiskConvexHull,
    boundary_walk,
    compute,
    hull_perimeter,
    hull_svg_path,
)

# ── Configurations ──────────────────────────────────────────────────
from .configuration import (
    configuration_perimeter,
    disks_from_positions,
    has_overlaps,
    is_linear_configuration,
)
from .graph6 import PennyGraph, load_graph6_file, load_graph_sets, parse_graph6
from .io import load_disks, save_disks, save_report

# ── Exploration ─────────────────────────────────────────────────────
from .search import (
    QUICK_SEARCH,
    THOROUGH_SEARCH,
    SearchContext,
    SearchControl,
    SearchParams,
    SearchResult,
    local_optimization,
    minimal_perimeter_search,
)
from .rolling import (
    RollingDisk,
    RollingState,
    RollingStep,
    RollingTrace,
    add_rolling_disk,
    remove_rolling_disk,
    roll_step,
    roll_trace,
    set_anchor,
    set_rolling_direction,
    start_rolling,
)

# ── Rendering ───────────────────────────────────────────────────────
from .render import render_hull_png, render_rolling_plot

__all__ = [
    # Core
    "Point",
    "Disk",
    "Tangent",
    "TangentSegment",
    "ArcSegment",
    "Segment",
    "Hull",
    "HullResult",
    "HullStats",
    "distance",
    "normalize_angle",
    "centroid",
    "sort_by_polar_angle",
    "find_hull_disks",
    "order_hull_disks",
    "compute_hull",
    "external_tangents_equal_radius",
    "select_hull_tangent",
    "compute_hull_segments",
    "arc_faces_outward",
    "outer_arc",
    "perimeter",
    # Interface
    "compute",
    "DiskConvexHull",
    "hull_perimeter",
    "boundary_walk",
    "hull_svg_path",
    # Configurations
    "disks_from_positions",
    "is_linear_configuration",
    "has_overlaps",
    "configuration_perimeter",
    "PennyGraph",
    "parse_graph6",
    "load_graph6_file",
    "load_graph_sets",
    "load_disks",
    "save_disks",
    "save_report",
    # Exploration
    "SearchParams",
    "SearchResult",
    "SearchControl",
    "SearchContext",
    "QUICK_SEARCH",
    "THOROUGH_SEARCH",
    "local_optimization",
    "minimal_perimeter_search",
    "RollingDisk",
    "RollingState",
    "RollingStep",
    "RollingTrace",
    "start_rolling",
    "add_rolling_disk",
    "remove_rolling_disk",
    "set_rolling_direction",
    "set_anchor",
    "roll_step",
    "roll_trace",
    # Rendering
    "render_hull_png",
    "render_rolling_plot",
]
