"""pennyhull command-line interface."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from typing import Optional, Sequence

from .io import load_disks, save_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Penny graph disk hull CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    hull = sub.add_parser("hull", help="Compute the hull and perimeter of a disk file")
    hull.add_argument("--in", dest="input_path", required=True)
    hull.add_argument("--unit-size", type=float, help="Divide the perimeter by this (default: disk radius)")
    hull.add_argument("--directions", type=int, default=360)
    hull.add_argument("--json", dest="json_path", help="Write a full hull report")
    hull.add_argument("--svg", action="store_true", help="Print the hull as SVG path data")

    render = sub.add_parser("render", help="Render disks and hull to PNG")
    render.add_argument("--in", dest="input_path", required=True)
    render.add_argument("--out", dest="output_path", required=True)
    render.add_argument("--ids", action="store_true", help="Label disks with their index")
    render.add_argument("--dpi", type=int, default=150)

    search = sub.add_parser("search", help="Search for a minimal-perimeter configuration")
    target = search.add_mutually_exclusive_group(required=True)
    target.add_argument("--nodes", type=int)
    target.add_argument("--graph6", dest="graph6_code")
    search.add_argument("--node-size", type=float, default=20.0)
    search.add_argument("--quick", action="store_true", help="Use the quick preset")
    search.add_argument("--seed", type=int)
    search.add_argument(
        "--strategies",
        default=None,
        help="Comma-separated subset of exhaustive,random,patterns,rolling,annealing",
    )
    search.add_argument("--out", dest="output_path", help="Write the best configuration as a disk file")
    search.add_argument("--render-out", dest="render_path")

    roll = sub.add_parser("roll", help="Roll disks around an anchor and trace the perimeter")
    roll.add_argument("--in", dest="input_path", required=True)
    roll.add_argument("--rolling", type=int, nargs="+", required=True, help="Indices of the rolling disks")
    roll.add_argument("--anchor", type=int, required=True, help="Index of the anchor disk")
    roll.add_argument("--steps", type=int, default=360)
    roll.add_argument("--step-degrees", type=float, default=1.0)
    roll.add_argument(
        "--reverse",
        type=int,
        nargs="*",
        help="Roll these disks clockwise (all rolling disks if no index is given)",
    )
    roll.add_argument("--plot-out", dest="plot_path")

    graph6 = sub.add_parser("graph6", help="Decode graph6 codes")
    graph6.add_argument("codes", nargs="+")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "hull":
            _cmd_hull(args)
        elif args.command == "render":
            _cmd_render(args)
        elif args.command == "search":
            _cmd_search(args)
        elif args.command == "roll":
            _cmd_roll(args)
        elif args.command == "graph6":
            _cmd_graph6(args)
    except (ValueError, KeyError, OSError) as exc:
        print(f"error: {exc}")
        raise SystemExit(1)


def _default_unit(disks) -> float:
    return disks[0].r if disks else 1.0


def _cmd_hull(args) -> None:
    from .disk_hull import compute, hull_svg_path

    disks = load_disks(args.input_path)
    unit = args.unit_size or _default_unit(disks)
    result = compute(disks, num_directions=args.directions)
    print(f"disks: {len(disks)}")
    print(f"hull disks: {len(result.hull)}")
    print(f"segments: {len(result.tangents)} tangents, {len(result.arcs)} arcs")
    if result.segments:
        print(f"perimeter: {result.perimeter(unit):.12f}")
    else:
        print("perimeter: unavailable")
    if args.svg:
        print(hull_svg_path(result.segments, center=result.hull.center))
    if args.json_path:
        save_report(result, args.json_path, unit)
        print(f"Saved {args.json_path}")


def _cmd_render(args) -> None:
    from .render import render_hull_png

    disks = load_disks(args.input_path)
    render_hull_png(disks, args.output_path, unit_size=_default_unit(disks), show_ids=args.ids, dpi=args.dpi)
    print(f"Saved {args.output_path}")


def _cmd_search(args) -> None:
    from .configuration import disks_from_positions
    from .graph6 import parse_graph6
    from .io import save_disks
    from .search import QUICK_SEARCH, STRATEGIES, SearchParams, minimal_perimeter_search

    if args.graph6_code:
        graph = parse_graph6(args.graph6_code)
        node_ids = list(graph.nodes)
        logger.info("graph6 %s: %d nodes, %d edges", args.graph6_code, graph.order, len(graph.edges))
    else:
        if args.nodes < 3:
            raise ValueError("--nodes must be >= 3")
        node_ids = list(range(args.nodes))

    base = QUICK_SEARCH if args.quick else SearchParams()
    params = dataclasses.replace(base, node_size=args.node_size, seed=args.seed)
    strategies = tuple(s.strip() for s in args.strategies.split(",")) if args.strategies else STRATEGIES

    results = minimal_perimeter_search(node_ids, params, strategies=strategies)
    if not results:
        print("No valid configuration found")
        raise SystemExit(1)

    best = results[0]
    print(f"best perimeter: {best.perimeter:.12f} ({best.method})")
    for node_id, pos in best.positions.items():
        print(f"  {node_id}: ({pos.x:.6f}, {pos.y:.6f})")

    disks = disks_from_positions(best.positions, params.node_size)
    if args.output_path:
        save_disks(disks, args.output_path)
        print(f"Saved {args.output_path}")
    if args.render_path:
        from .render import render_hull_png

        render_hull_png(disks, args.render_path, unit_size=params.node_size)
        print(f"Saved {args.render_path}")


def _cmd_roll(args) -> None:
    from .rolling import roll_trace, start_rolling

    disks = load_disks(args.input_path)
    if not disks:
        raise ValueError("Disk file is empty")
    node_size = disks[0].r
    positions = {i: d.center for i, d in enumerate(disks)}
    reverse = set(args.rolling if args.reverse == [] else args.reverse or ())
    unknown = reverse - set(args.rolling)
    if unknown:
        raise ValueError(f"--reverse indices not rolling: {sorted(unknown)}")
    state = start_rolling(
        positions,
        args.anchor,
        [(i, -1 if i in reverse else 1) for i in args.rolling],
        step_degrees=args.step_degrees,
    )
    trace = roll_trace(positions, state, node_size, args.steps)

    values = [p for p in trace.perimeters if p is not None]
    print(f"steps: {len(trace.steps)}")
    if trace.steps:
        print(f"rolled: {trace.angles[-1]:g} degrees")
    if trace.stopped_by_collision:
        print("stopped: collision")
    if values:
        print(f"perimeter: min {min(values):.6f}, max {max(values):.6f}")
    if args.plot_path:
        from .render import render_rolling_plot

        render_rolling_plot(trace, args.plot_path)
        print(f"Saved {args.plot_path}")


def _cmd_graph6(args) -> None:
    from .graph6 import parse_graph6

    for code in args.codes:
        graph = parse_graph6(code)
        print(json.dumps({"code": code, "order": graph.order, "edges": [list(e) for e in graph.edges]}))


if __name__ == "__main__":
    main()
