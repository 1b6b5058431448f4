"""Minimal-perimeter search over disk configurations.

Several strategies propose node positions and score them with
:func:`~pennyhull.configuration.configuration_perimeter` (hull perimeter
in radius units, ``inf`` for collinear or overlapping layouts):

- **exhaustive grid**: every assignment of grid points (up to 3 disks)
- **random sampling**: uniform positions inside the search radius
- **geometric patterns**: hand-picked packings, optionally refined
- **rolling**: one disk rolled around, or placed between, the others
- **simulated annealing**: contact-aware random walk from the patterns

Usage
-----
>>> from pennyhull.search import minimal_perimeter_search, QUICK_SEARCH
>>> results = minimal_perimeter_search(range(4), QUICK_SEARCH)
>>> results[0].perimeter

Long searches can be stopped from another thread or a progress hook via
:meth:`SearchControl.abort`; the strategies check the flag between
evaluations and the results gathered so far are returned.
"""

from __future__ import annotations

import itertools
import logging
import math
import random
import threading
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.optimize import minimize

from .configuration import Positions, configuration_perimeter, has_contact, is_linear_configuration
from .models import Point

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════


@dataclass
class SearchParams:
    """Tuneable parameters for :func:`minimal_perimeter_search`.

    Attributes
    ----------
    node_size : float
        Radius shared by every disk; perimeters are reported in units of it.
    grid_resolution : int
        Grid steps across the search disk for the exhaustive search.
    search_radius : float
        Radius of the region sampled by the grid and random searches.
    max_iterations : int
        Annealing iterations per starting configuration.
    temperature : float
        Initial annealing temperature.
    cooling_rate : float
        Multiplicative cooling per annealing iteration.
    perturbation_radius : float
        Largest random displacement at the initial temperature.
    random_samples : int
        Number of configurations drawn by the random search.
    local_optimization : bool
        Refine pattern and rolling candidates with :func:`local_optimization`.
    local_iterations : int
        Iterations of the first pattern-move pass (the second pass uses half).
    polish : bool
        Finish local optimisation with a Nelder–Mead run.
    polish_iterations : int
        Iteration cap for the Nelder–Mead polish.
    annealing_starts : int
        Number of pattern configurations annealing starts from.
    max_results : int
        Length cap of the returned, deduplicated result list.
    seed : int, optional
        Seed for the search's :class:`random.Random`.
    """

    node_size: float = 20.0
    grid_resolution: int = 10
    search_radius: float = 200.0
    max_iterations: int = 3000
    temperature: float = 100.0
    cooling_rate: float = 0.995
    perturbation_radius: float = 25.0
    random_samples: int = 5000
    local_optimization: bool = True
    local_iterations: int = 100
    polish: bool = True
    polish_iterations: int = 400
    annealing_starts: int = 3
    max_results: int = 100
    seed: Optional[int] = None


QUICK_SEARCH = SearchParams(
    grid_resolution=6,
    max_iterations=300,
    random_samples=300,
    local_iterations=20,
    polish=False,
    annealing_starts=1,
)

THOROUGH_SEARCH = SearchParams(
    grid_resolution=12,
    max_iterations=6000,
    random_samples=20000,
    local_iterations=200,
    polish_iterations=1000,
)

STRATEGIES = ("exhaustive", "random", "patterns", "rolling", "annealing")

ProgressHook = Callable[[str, float], None]
"""Signature for progress hooks: ``(stage_name, fraction_done)``."""


@dataclass
class SearchResult:
    positions: Positions
    perimeter: float
    method: str
    iteration: Union[int, str] = 0


class SearchControl:
    """Cooperative cancellation flag plus optional progress reporting."""

    def __init__(self, progress: Optional[ProgressHook] = None) -> None:
        self._abort = threading.Event()
        self.progress = progress

    def abort(self) -> None:
        self._abort.set()

    @property
    def aborted(self) -> bool:
        return self._abort.is_set()

    def report(self, stage: str, fraction: float) -> None:
        if self.progress is not None:
            self.progress(stage, min(1.0, max(0.0, fraction)))


@dataclass
class SearchContext:
    """Shared state of one search run: parameters, control, RNG and evaluation count."""

    params: SearchParams
    control: SearchControl
    rng: random.Random
    evaluations: int = 0

    def perimeter(self, positions: Positions) -> float:
        if self.control.aborted:
            return math.inf
        self.evaluations += 1
        return configuration_perimeter(positions, self.params.node_size)


# ═══════════════════════════════════════════════════════════════════
# Candidate generation
# ═══════════════════════════════════════════════════════════════════


def grid_points(cx: float, cy: float, radius: float, resolution: int) -> List[Point]:
    """Lattice points with ``resolution`` steps per axis that lie inside the circle."""
    if resolution < 1:
        raise ValueError("resolution must be >= 1")
    step = 2 * radius / resolution
    points = []
    for i in range(resolution + 1):
        x = cx - radius + i * step
        for j in range(resolution + 1):
            y = cy - radius + j * step
            if math.hypot(x - cx, y - cy) <= radius:
                points.append(Point(x, y))
    return points


def _ring(node_ids: Sequence[Hashable], radius: float) -> Positions:
    count = len(node_ids)
    return {
        node_id: Point(radius * math.cos(2 * math.pi * i / count), radius * math.sin(2 * math.pi * i / count))
        for i, node_id in enumerate(node_ids)
    }


def _hexagon(radius: float) -> List[Point]:
    h = radius * math.sqrt(3) / 2
    return [
        Point(radius, 0.0),
        Point(radius / 2, h),
        Point(-radius / 2, h),
        Point(-radius, 0.0),
        Point(-radius / 2, -h),
        Point(radius / 2, -h),
    ]


def geometric_patterns(node_ids: Sequence[Hashable], node_size: float) -> List[Positions]:
    """Candidate packings for ``len(node_ids)`` disks, collinear layouts left out."""
    ids = list(node_ids)
    n = len(ids)
    spacing = 2 * node_size
    min_spacing = node_size * 2.05
    configs: List[Positions] = []

    def add_if_planar(positions: Positions) -> None:
        if not is_linear_configuration(positions, node_size):
            configs.append(positions)

    # Touching small cases
    if n == 2:
        configs.append({ids[0]: Point(-node_size, 0.0), ids[1]: Point(node_size, 0.0)})
    if n == 3:
        height = spacing * math.sqrt(3) / 2
        configs.append({
            ids[0]: Point(0.0, height / 3),
            ids[1]: Point(-spacing / 2, -height * 2 / 3),
            ids[2]: Point(spacing / 2, -height * 2 / 3),
        })
    if n == 4:
        half = spacing / 2
        configs.append({
            ids[0]: Point(-half, -half),
            ids[1]: Point(half, -half),
            ids[2]: Point(half, half),
            ids[3]: Point(-half, half),
        })
        configs.append({
            ids[0]: Point(0.0, -spacing),
            ids[1]: Point(-spacing, 0.0),
            ids[2]: Point(0.0, spacing),
            ids[3]: Point(spacing, 0.0),
        })
    if n == 5:
        for scale in (1.0, 1.25, 1.5):
            configs.append(_ring(ids, min_spacing * scale))
    if n == 6:
        configs.append(dict(zip(ids, _hexagon(spacing))))
    if n == 7:
        for scale in (1.0, 1.1, 1.2):
            configs.append({ids[0]: Point(0.0, 0.0), **dict(zip(ids[1:], _hexagon(spacing * scale)))})

    # Square grid
    side = math.ceil(math.sqrt(n))
    if side > 1:
        square: Positions = {}
        for index, node_id in enumerate(ids):
            row, col = divmod(index, side)
            square[node_id] = Point((col - (side - 1) / 2) * min_spacing, (row - (side - 1) / 2) * min_spacing)
        add_if_planar(square)

    # Hexagonal packing
    cols = math.ceil(n / side) if side else 0
    for scale in (1.0, 1.25, 1.5):
        step = min_spacing * scale
        hexpack: Positions = {}
        for index, node_id in enumerate(ids):
            row, col = divmod(index, cols)
            hexpack[node_id] = Point(col * step + (row % 2) * step * 0.5, row * step * 0.866)
        add_if_planar(hexpack)

    # Circles
    for i in range(11):
        configs.append(_ring(ids, spacing * (1.0 + 0.3 * i)))

    # Flowers: first node at the centre, the rest as petals
    if n >= 4:
        for factor in (1.0, 1.1, 1.2, 1.3, 1.4, 1.5):
            flower: Positions = {ids[0]: Point(0.0, 0.0)}
            flower.update(_ring(ids[1:], spacing * factor))
            configs.append(flower)

    # Polygon rings with leftovers on an inner ring
    for sides in range(3, min(8, n + 2) + 1):
        for scale in (1.0, 1.25, 1.5):
            radius = min_spacing * sides / (2 * math.pi) * scale
            polygon: Positions = {}
            for i, node_id in enumerate(ids[:sides]):
                angle = 2 * math.pi * i / sides
                polygon[node_id] = Point(radius * math.cos(angle), radius * math.sin(angle))
            rest = ids[sides:]
            for i, node_id in enumerate(rest):
                angle = 2 * math.pi * i / max(1, len(rest))
                polygon[node_id] = Point(0.6 * radius * math.cos(angle), 0.6 * radius * math.sin(angle))
            add_if_planar(polygon)

    return configs


# ═══════════════════════════════════════════════════════════════════
# Local optimisation
# ═══════════════════════════════════════════════════════════════════

_MOVES = (
    (1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0),
    (0.707, 0.707), (-0.707, 0.707), (0.707, -0.707), (-0.707, -0.707),
    (0.5, 0.0), (-0.5, 0.0), (0.0, 0.5), (0.0, -0.5),
)


def pattern_moves(
    positions: Positions,
    node_size: float,
    max_iterations: int,
    evaluate: Optional[Callable[[Positions], float]] = None,
) -> Tuple[Positions, float]:
    """Greedy coordinate descent: apply the single best disk move per iteration.

    The step starts at ``0.02·node_size`` and shrinks by 0.8 whenever no
    move improves, stopping below ``0.001·node_size``.
    """
    evaluate = evaluate or (lambda p: configuration_perimeter(p, node_size))
    current = dict(positions)
    current_perimeter = evaluate(current)
    step = node_size * 0.02
    min_step = node_size * 0.001

    for _ in range(max_iterations):
        best_gain = 0.0
        best_move = None
        for node_id, original in list(current.items()):
            for dx, dy in _MOVES:
                candidate = Point(original.x + dx * step, original.y + dy * step)
                current[node_id] = candidate
                value = evaluate(current)
                if value < current_perimeter and current_perimeter - value > best_gain:
                    best_gain = current_perimeter - value
                    best_move = (node_id, candidate, value)
            current[node_id] = original

        if best_move is None:
            step *= 0.8
            if step < min_step:
                break
            continue
        node_id, candidate, value = best_move
        current[node_id] = candidate
        current_perimeter = value

    return current, current_perimeter


def snap_contacts(
    positions: Positions,
    node_size: float,
    max_iterations: int = 50,
    evaluate: Optional[Callable[[Positions], float]] = None,
) -> Positions:
    """Pull near-touching disks into contact when the perimeter allows it.

    A disk whose nearest neighbour is within 1.2 touching distances is
    moved onto that neighbour; the move is kept when it overlaps nothing
    and raises the perimeter by at most 0.1%.
    """
    evaluate = evaluate or (lambda p: configuration_perimeter(p, node_size))
    current = dict(positions)
    target = 2 * node_size

    for _ in range(max_iterations):
        improved = False
        for node_id in list(current):
            pos = current[node_id]
            neighbours = sorted(
                (
                    (math.hypot(pos.x - other.x, pos.y - other.y), other_id, other)
                    for other_id, other in current.items()
                    if other_id != node_id
                ),
                key=lambda item: item[0],
            )
            if not neighbours:
                continue
            dist, closest_id, closest = neighbours[0]
            if not target < dist < target * 1.2:
                continue

            dx = closest.x - pos.x
            dy = closest.y - pos.y
            snapped = Point(closest.x - dx / dist * target, closest.y - dy / dist * target)
            clear = all(
                math.hypot(snapped.x - other.x, snapped.y - other.y) >= target - 1e-8
                for other_id, other in current.items()
                if other_id not in (node_id, closest_id)
            )
            if not clear:
                continue

            before = evaluate(current)
            current[node_id] = snapped
            if evaluate(current) <= before * 1.001:
                improved = True
            else:
                current[node_id] = pos
        if not improved:
            break

    return current


def _flatten(ids: Sequence[Hashable], positions: Positions) -> np.ndarray:
    return np.array([[positions[i].x, positions[i].y] for i in ids], dtype=float).ravel()


def _unflatten(ids: Sequence[Hashable], x: np.ndarray) -> Positions:
    coords = np.asarray(x, dtype=float).reshape(-1, 2)
    return {node_id: Point(float(cx), float(cy)) for node_id, (cx, cy) in zip(ids, coords)}


def nelder_mead_polish(
    positions: Positions,
    node_size: float,
    max_iterations: int = 400,
    evaluate: Optional[Callable[[Positions], float]] = None,
) -> Tuple[Positions, float]:
    """Refine positions with ``scipy.optimize.minimize(method="Nelder-Mead")``.

    Rejected configurations score ``inf`` so the simplex stays in the
    feasible region around a feasible start.  The input is returned
    unchanged unless the polish strictly improves it.
    """
    evaluate = evaluate or (lambda p: configuration_perimeter(p, node_size))
    ids = list(positions)
    start = evaluate(positions)
    if not math.isfinite(start):
        return dict(positions), start

    res = minimize(
        lambda x: evaluate(_unflatten(ids, x)),
        _flatten(ids, positions),
        method="Nelder-Mead",
        options={"maxiter": max_iterations, "xatol": node_size * 1e-6, "fatol": 1e-12},
    )
    if math.isfinite(res.fun) and res.fun < start:
        return _unflatten(ids, res.x), float(res.fun)
    return dict(positions), start


def local_optimization(
    positions: Positions,
    params: SearchParams,
    evaluate: Optional[Callable[[Positions], float]] = None,
) -> Tuple[Positions, float]:
    """Pattern moves, contact snapping, a second pattern pass, then a polish."""
    node_size = params.node_size
    evaluate = evaluate or (lambda p: configuration_perimeter(p, node_size))
    start = evaluate(positions)

    current, _ = pattern_moves(positions, node_size, params.local_iterations, evaluate)
    current = snap_contacts(current, node_size, evaluate=evaluate)
    current, value = pattern_moves(current, node_size, max(1, params.local_iterations // 2), evaluate)
    if params.polish:
        current, value = nelder_mead_polish(current, node_size, params.polish_iterations, evaluate)

    if value > start:
        return dict(positions), start
    return current, value


# ═══════════════════════════════════════════════════════════════════
# Strategies
# ═══════════════════════════════════════════════════════════════════


def _record(results: List[SearchResult], positions: Positions, value: float, method: str, iteration) -> None:
    if math.isfinite(value):
        results.append(SearchResult(dict(positions), value, method, iteration))


def exhaustive_grid_search(node_ids: Sequence[Hashable], ctx: SearchContext, results: List[SearchResult]) -> None:
    """Try every assignment of grid points to at most three disks."""
    ids = list(node_ids)
    if len(ids) > 3:
        return
    params = ctx.params
    points = grid_points(0.0, 0.0, params.search_radius, params.grid_resolution)
    total = len(points) ** len(ids)
    if total > 50_000:
        logger.debug("Skipping exhaustive search: %d combinations", total)
        return

    for iteration, combo in enumerate(itertools.product(points, repeat=len(ids)), start=1):
        if ctx.control.aborted:
            return
        if iteration % 1000 == 0:
            ctx.control.report("exhaustive", iteration / total)
        positions = dict(zip(ids, combo))
        _record(results, positions, ctx.perimeter(positions), "exhaustive-grid", iteration)


def random_sampling_search(node_ids: Sequence[Hashable], ctx: SearchContext, results: List[SearchResult]) -> None:
    params = ctx.params
    for i in range(params.random_samples):
        if ctx.control.aborted:
            return
        if i % 200 == 0:
            ctx.control.report("random", i / params.random_samples)
        positions: Positions = {}
        for node_id in node_ids:
            angle = ctx.rng.random() * 2 * math.pi
            radius = ctx.rng.random() * params.search_radius
            positions[node_id] = Point(radius * math.cos(angle), radius * math.sin(angle))
        _record(results, positions, ctx.perimeter(positions), "random-sampling", i)


def geometric_pattern_search(node_ids: Sequence[Hashable], ctx: SearchContext, results: List[SearchResult]) -> None:
    patterns = geometric_patterns(node_ids, ctx.params.node_size)
    for i, pattern in enumerate(patterns):
        if ctx.control.aborted:
            return
        ctx.control.report("patterns", i / len(patterns))
        value = ctx.perimeter(pattern)
        if not math.isfinite(value):
            continue
        method = "geometric-pattern"
        if ctx.params.local_optimization:
            optimized, optimized_value = local_optimization(pattern, ctx.params, ctx.perimeter)
            if optimized_value < value:
                pattern, value = optimized, optimized_value
                method = "geometric-pattern-optimized"
        _record(results, pattern, value, method, i)


def _refine(positions: Positions, value: float, ctx: SearchContext) -> Tuple[Positions, float]:
    if ctx.params.local_optimization:
        return local_optimization(positions, ctx.params, ctx.perimeter)
    return positions, value


def rolling_search(
    node_ids: Sequence[Hashable],
    ctx: SearchContext,
    results: List[SearchResult],
    initial_configs: Optional[Sequence[Positions]] = None,
) -> None:
    """Roll each disk around every other disk of the best three starting layouts.

    The rolling disk is placed at touching distance in 5° steps, and also
    along the perpendicular bisector of any two disks more than four radii
    apart.  Starting layouts default to :func:`geometric_patterns`.
    """
    ids = list(node_ids)
    if len(ids) < 3 or ctx.control.aborted:
        return
    node_size = ctx.params.node_size
    if initial_configs is None:
        initial_configs = geometric_patterns(ids, node_size)
    scored = [(ctx.perimeter(p), p) for p in initial_configs]
    starts = sorted((item for item in scored if math.isfinite(item[0])), key=lambda item: item[0])[:3]

    for start_index, (_, config) in enumerate(starts):
        ctx.control.report("rolling", start_index / max(1, len(starts)))
        for rolling_id in ids:
            fixed = [node_id for node_id in ids if node_id != rolling_id]
            for fixed_id in fixed:
                anchor = config[fixed_id]
                for step in range(72):
                    if ctx.control.aborted:
                        return
                    angle = step * math.pi / 36
                    candidate = dict(config)
                    candidate[rolling_id] = Point(
                        anchor.x + 2 * node_size * math.cos(angle),
                        anchor.y + 2 * node_size * math.sin(angle),
                    )
                    value = ctx.perimeter(candidate)
                    if math.isfinite(value):
                        candidate, value = _refine(candidate, value, ctx)
                        _record(results, candidate, value, "rolling", f"{rolling_id}-{fixed_id}-{step * 5}deg")

            for a, b in itertools.combinations(fixed, 2):
                pa, pb = config[a], config[b]
                if math.hypot(pb.x - pa.x, pb.y - pa.y) <= 4 * node_size:
                    continue
                mid = Point((pa.x + pb.x) / 2, (pa.y + pb.y) / 2)
                perp = math.atan2(pb.y - pa.y, pb.x - pa.x) + math.pi / 2
                for k in range(-4, 5):
                    if ctx.control.aborted:
                        return
                    offset = k * node_size * 0.5
                    candidate = dict(config)
                    candidate[rolling_id] = Point(mid.x + offset * math.cos(perp), mid.y + offset * math.sin(perp))
                    value = ctx.perimeter(candidate)
                    if math.isfinite(value):
                        candidate, value = _refine(candidate, value, ctx)
                        _record(results, candidate, value, "rolling-pair", f"{rolling_id}-between-{a}-{b}")


def simulated_annealing_search(
    node_ids: Sequence[Hashable],
    initial_configs: Sequence[Positions],
    ctx: SearchContext,
    results: List[SearchResult],
) -> None:
    """Metropolis random walk with geometric cooling.

    Disks already touching a neighbour move at 30% of the current
    perturbation radius.  Each run stops after ``max_iterations`` or once
    the temperature drops below 0.01.
    """
    params = ctx.params
    node_size = params.node_size
    starts = list(initial_configs)[: params.annealing_starts]

    for config_index, config in enumerate(starts):
        if ctx.control.aborted:
            return
        current = dict(config)
        current_value = ctx.perimeter(current)
        temperature = params.temperature

        for i in range(params.max_iterations):
            if ctx.control.aborted:
                return
            if i % 100 == 0:
                ctx.control.report("annealing", (config_index * params.max_iterations + i) / (len(starts) * params.max_iterations))

            scale = temperature / params.temperature
            proposal: Positions = {}
            for node_id, pos in current.items():
                radius = params.perturbation_radius * scale
                if has_contact(current, node_id, node_size):
                    radius *= 0.3
                angle = ctx.rng.random() * 2 * math.pi
                dist = ctx.rng.random() * radius
                proposal[node_id] = Point(pos.x + dist * math.cos(angle), pos.y + dist * math.sin(angle))

            value = ctx.perimeter(proposal)
            delta = value - current_value
            if delta <= 0:
                accept = 1.0
            elif math.isnan(delta):
                accept = 0.0
            else:
                accept = math.exp(-delta / temperature)
            if ctx.rng.random() < accept:
                current, current_value = proposal, value
                _record(results, proposal, value, f"simulated-annealing-{config_index}", i)

            temperature *= params.cooling_rate
            if temperature < 0.01:
                break


def deduplicate_results(results: Iterable[SearchResult], limit: int = 100, tol: float = 1e-10) -> List[SearchResult]:
    """Sort by perimeter and drop results whose perimeter repeats within *tol*."""
    unique: List[SearchResult] = []
    for result in sorted(results, key=lambda r: r.perimeter):
        if len(unique) >= limit:
            break
        if any(abs(kept.perimeter - result.perimeter) < tol for kept in unique):
            continue
        unique.append(result)
    return unique


def minimal_perimeter_search(
    node_ids: Iterable[Hashable],
    params: Optional[SearchParams] = None,
    control: Optional[SearchControl] = None,
    strategies: Sequence[str] = STRATEGIES,
) -> List[SearchResult]:
    """Run the selected strategies and return the best distinct configurations."""
    params = params or SearchParams()
    control = control or SearchControl()
    unknown = set(strategies) - set(STRATEGIES)
    if unknown:
        raise ValueError(f"Unknown strategies: {sorted(unknown)}")

    ids = list(node_ids)
    ctx = SearchContext(params=params, control=control, rng=random.Random(params.seed))
    results: List[SearchResult] = []
    logger.info("Starting minimal perimeter search for %d disks", len(ids))

    if "exhaustive" in strategies:
        exhaustive_grid_search(ids, ctx, results)
    if "random" in strategies:
        random_sampling_search(ids, ctx, results)
    if "patterns" in strategies:
        geometric_pattern_search(ids, ctx, results)
    if "rolling" in strategies:
        rolling_search(ids, ctx, results)
    if "annealing" in strategies:
        simulated_annealing_search(ids, geometric_patterns(ids, params.node_size), ctx, results)

    unique = deduplicate_results(results, limit=params.max_results)
    if control.aborted:
        logger.info("Search aborted after %d evaluations", ctx.evaluations)
    if unique:
        best = unique[0]
        logger.info(
            "Search complete: %d unique configurations, best perimeter %.12f (%s)",
            len(unique), best.perimeter, best.method,
        )
        logger.debug("Methods used: %s", ", ".join(sorted({r.method for r in unique})))
    control.report("done", 1.0)
    return unique
