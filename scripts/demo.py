import sys
from pathlib import Path

ROOT = Path(__file__).parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pennyhull import Disk, DiskConvexHull, hull_svg_path


def main() -> None:
    disks = [
        Disk(-50, 50, 25),
        Disk(50, 40, 25),
        Disk(40, -50, 25),
        Disk(-40, -40, 25),
    ]
    hull = DiskConvexHull()
    result = hull.compute(disks)
    stats = hull.get_stats()

    print("Hull disks:", stats.hull_disks)
    print("Segments:", len(result.segments))
    print("Perimeter (radius units):", result.perimeter(25))
    print("SVG path:", hull_svg_path(result.segments))

    out = ROOT / "exports" / "demo_hull.png"
    from pennyhull.render import render_hull_png

    render_hull_png(disks, out, result=result, unit_size=25)
    print(f"Saved {out}")


if __name__ == "__main__":
    main()
