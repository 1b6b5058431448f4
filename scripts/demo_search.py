import sys
from pathlib import Path

ROOT = Path(__file__).parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import dataclasses
import logging

from pennyhull.configuration import disks_from_positions
from pennyhull.render import render_hull_png
from pennyhull.search import QUICK_SEARCH, SearchControl, minimal_perimeter_search


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    n = int(sys.argv[1]) if len(sys.argv) > 1 else 5
    params = dataclasses.replace(QUICK_SEARCH, seed=1)

    def progress(stage: str, fraction: float) -> None:
        print(f"\r{stage:<10} {fraction:6.1%}", end="", flush=True)

    results = minimal_perimeter_search(range(n), params, SearchControl(progress))
    print()
    best = results[0]
    print(f"Best perimeter for {n} disks: {best.perimeter:.9f} ({best.method})")

    out = ROOT / "exports" / f"search_{n}.png"
    render_hull_png(disks_from_positions(best.positions, params.node_size), out, unit_size=params.node_size)
    print(f"Saved {out}")


if __name__ == "__main__":
    main()
