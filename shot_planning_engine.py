"""
Expected-cost shot planning.

Two layers live here:

  * the single-shot cost model: how many strokes, on average, a shot from
    one tile to another costs a given golfer with a given club once
    dispersion, water carries and the landing terrain are priced in;
  * the shot-plan solver: a uniform-cost search over tile positions whose
    edges are candidate shots, finding the cheapest route from tee to green.

Everything is a closed-form expectation. There is no random sampling, so
the same inputs always give the same plan.
"""

import heapq
import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from balance_config import DEFAULT_BALANCE
from course_model import WATER, Point, bresenham_line, distance_tiles, in_bounds, tile_at

log = logging.getLogger(__name__)

BASE_STROKE_COST = 1.0
INVALID_UTILIZATION = 99.0


# ============================================================
# Result types
# ============================================================

@dataclass
class ShotEvaluation:
    distance_yards: float
    utilization: float  # distance / carry
    dispersion_tiles: float
    base_stroke_cost: float = BASE_STROKE_COST
    expected_landing_penalty: float = 0.0
    expected_carry_penalty: float = 0.0
    expected_shot_cost: float = BASE_STROKE_COST
    is_valid: bool = True
    landing_probs: Dict[str, float] = field(default_factory=dict)
    debug: List[str] = field(default_factory=list)


@dataclass
class ShotPlanStep:
    from_tile: Point
    to_tile: Point
    club: str
    expected_shot_cost: float
    utilization: float
    debug: List[str] = field(default_factory=list)


@dataclass
class ShotSolveResult:
    reachable: bool
    expected_shots_to_green: float  # excludes putting
    plan: List[ShotPlanStep] = field(default_factory=list)
    expansions: int = 0
    over_budget: bool = False  # a route exists but costs more than the ceiling

    @classmethod
    def unreachable(cls, expansions=0, over_budget=False):
        return cls(
            reachable=False,
            expected_shots_to_green=math.inf,
            plan=[],
            expansions=expansions,
            over_budget=over_budget,
        )


def _clamp(x, lo, hi):
    return max(lo, min(hi, x))


# ============================================================
# Single-shot cost model
# ============================================================

def evaluate_shot_base(from_tile, to_tile, golfer, club, config=DEFAULT_BALANCE):
    """
    Geometry and dispersion only.

    Dispersion ramps up once the shot asks for more than
    `utilization_threshold` of the club's carry:
        disp = base * (1 + max(0, util - threshold) * ramp)
    """
    d_tiles = distance_tiles(from_tile, to_tile)
    d_yards = d_tiles * golfer.yards_per_tile
    if club.carry_yards <= 0:
        utilization = INVALID_UTILIZATION
    else:
        utilization = d_yards / club.carry_yards

    util_over = max(0.0, utilization - config.utilization_threshold)
    dispersion = club.dispersion_tiles_base * (1.0 + util_over * config.dispersion_ramp)

    return ShotEvaluation(
        distance_yards=d_yards,
        utilization=utilization,
        dispersion_tiles=dispersion,
        debug=[
            f"d={d_yards:.0f}y",
            f"club={club.name}({club.carry_yards:.0f}y)",
            f"util={utilization * 100:.0f}%",
            f"disp={dispersion:.2f} tiles",
        ],
    )


def longest_water_run(course, from_tile, to_tile):
    """Longest contiguous run of water tiles on the shot line, start tile excluded."""
    line = bresenham_line(from_tile, to_tile)
    run = 0
    best = 0
    for p in line[1:]:
        if tile_at(course, p) == WATER:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best


def evaluate_shot_with_water_carry(course, from_tile, to_tile, golfer, club, config=DEFAULT_BALANCE):
    """
    Base evaluation plus the forced-carry check.

    A club that cannot carry the widest water run plus the buffer makes the
    shot invalid (cost = inf). Otherwise a short miss may still splash: its
    probability rises linearly from 0 at `short_miss_util_start` to
    `short_miss_max_prob` at full utilization.
    """
    ev = evaluate_shot_base(from_tile, to_tile, golfer, club, config=config)

    water_carry_yards = longest_water_run(course, from_tile, to_tile) * golfer.yards_per_tile
    if water_carry_yards <= 0:
        return ev

    required = water_carry_yards + config.carry_buffer_yards
    ev.debug.append(f"waterCarry={water_carry_yards:.0f}y")
    if club.carry_yards < required:
        ev.is_valid = False
        ev.expected_carry_penalty = math.inf
        ev.expected_shot_cost = math.inf
        ev.debug.append(f"invalid: carry<{required:.0f}y")
        return ev

    u0 = config.short_miss_util_start
    ramp = _clamp((ev.utilization - u0) / max(1e-6, 1.0 - u0), 0.0, 1.0)
    p_short = ramp * config.short_miss_max_prob
    ev.expected_carry_penalty = p_short * config.water_penalty_strokes
    ev.expected_shot_cost = (
        ev.base_stroke_cost + ev.expected_landing_penalty + ev.expected_carry_penalty
    )
    ev.debug.append(f"shortMissP={p_short * 100:.0f}%")
    ev.debug.append(f"carryPen=+{ev.expected_carry_penalty:.2f}")
    return ev


def compute_expected_landing_penalty(course, target, dispersion_tiles, config=DEFAULT_BALANCE):
    """
    Expected penalty strokes from where the ball finishes.

    The landing spot is a Gaussian-weighted disc around the target:
      - radius  = min(max radius, ceil(dispersion)), keeping tiles with d^2 <= dispersion^2
      - sigma   = max(0.8, 0.55 * dispersion)
      - weight  = exp(-d^2 / (2 sigma^2)), bucketed by terrain
    Bucket weights are normalised into probabilities and priced with the
    per-terrain penalty table.

    Returns {"expected_penalty": float, "probs": {terrain: p}}.
    """
    r0 = dispersion_tiles
    r = min(config.landing_max_radius_tiles, int(math.ceil(r0)))
    sigma = max(0.8, r0 * 0.55)
    two_sigma2 = 2.0 * sigma * sigma
    r0_sq = r0 * r0

    total_w = 0.0
    weight_by_terrain: Dict[str, float] = {}
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            d2 = dx * dx + dy * dy
            if d2 > r0_sq:
                continue
            w = math.exp(-d2 / two_sigma2)
            total_w += w
            t = tile_at(course, (target[0] + dx, target[1] + dy))
            weight_by_terrain[t] = weight_by_terrain.get(t, 0.0) + w

    if total_w <= 0:
        return {"expected_penalty": 0.0, "probs": {}}

    probs = {}
    expected = 0.0
    for terrain, w in weight_by_terrain.items():
        p = _clamp(w / total_w, 0.0, 1.0)
        probs[terrain] = p
        expected += p * config.penalty_for(terrain)

    return {"expected_penalty": expected, "probs": probs}


def evaluate_shot_expected_cost(
    course, from_tile, to_tile, golfer, club, config=DEFAULT_BALANCE, landing_cache=None
):
    """
    Full expected cost of one shot:
        1 (the stroke) + expected landing penalty + expected carry penalty

    Invalid carries short-circuit with cost = inf. `landing_cache` is an
    optional dict reused across calls on the same course and config.
    """
    ev = evaluate_shot_with_water_carry(course, from_tile, to_tile, golfer, club, config=config)
    if not ev.is_valid:
        return ev

    if landing_cache is None:
        landing = compute_expected_landing_penalty(course, to_tile, ev.dispersion_tiles, config=config)
    else:
        cache_key = (to_tile[0], to_tile[1], ev.dispersion_tiles)
        landing = landing_cache.get(cache_key)
        if landing is None:
            landing = compute_expected_landing_penalty(
                course, to_tile, ev.dispersion_tiles, config=config
            )
            landing_cache[cache_key] = landing

    ev.expected_landing_penalty = landing["expected_penalty"]
    ev.landing_probs = dict(landing["probs"])
    ev.expected_shot_cost = (
        ev.base_stroke_cost + ev.expected_landing_penalty + ev.expected_carry_penalty
    )
    ev.debug.append(f"landPen=+{ev.expected_landing_penalty:.2f}")
    return ev


# ============================================================
# Shot-plan solver
# ============================================================

def _landing_ok(course, p):
    return tile_at(course, p) != WATER


def candidate_landings(course, from_tile, golfer, club, config=DEFAULT_BALANCE):
    """
    Landing tiles proposed for one club from one spot.

    Each fraction of the club's (slightly inflated) range is tried in every
    configured direction; off-grid and water landings are skipped.
    """
    max_tiles = max(
        1, int(math.floor((club.carry_yards / golfer.yards_per_tile) * config.range_overshoot))
    )
    for frac in config.candidate_fractions:
        d_tiles = int(_clamp(math.floor(max_tiles * frac + 0.5), 1, max_tiles))
        for ax, ay in config.candidate_directions:
            to = Point(from_tile[0] + ax * d_tiles, from_tile[1] + ay * d_tiles)
            if not in_bounds(course, to):
                continue
            if not _landing_ok(course, to):
                continue
            yield to


def solve_shots_to_green(course, tee, green, golfer, config=DEFAULT_BALANCE) -> ShotSolveResult:
    """
    Cheapest expected-cost sequence of shots from tee to green.

    Dijkstra over an implicit graph: nodes are tiles reached so far, edges
    are candidate shots generated on demand when a node is expanded. Besides
    the fraction/direction grid, every club also gets a direct shot at the
    green so off-angle greens (doglegs) are not missed. That direct shot has
    no range cap: an overswing is only priced through the dispersion ramp, so
    on open ground a long hole can come back as one expensive shot.

    The search stops when the green is settled, the frontier empties, or
    `max_expansions` nodes have been expanded. A best cost above
    `max_expected_shots_to_green` is reported as unreachable.
    """
    tee = Point(*tee)
    green = Point(*green)

    if not in_bounds(course, tee) or not in_bounds(course, green):
        return ShotSolveResult.unreachable()
    if not _landing_ok(course, tee) or not _landing_ok(course, green):
        return ShotSolveResult.unreachable()

    dist: Dict[Point, float] = {tee: 0.0}
    prev: Dict[Point, tuple] = {}
    order = itertools.count()
    frontier = [(0.0, next(order), tee)]
    landing_cache: Dict[tuple, dict] = {}

    def relax(cur, cur_d, to, club, ev):
        nd = cur_d + ev.expected_shot_cost
        old = dist.get(to)
        if old is None or nd < old:
            dist[to] = nd
            prev[to] = (
                cur,
                ShotPlanStep(
                    from_tile=cur,
                    to_tile=to,
                    club=club.name,
                    expected_shot_cost=ev.expected_shot_cost,
                    utilization=ev.utilization,
                    debug=ev.debug,
                ),
            )
            heapq.heappush(frontier, (nd, next(order), to))

    expansions = 0
    while frontier and expansions < config.max_expansions:
        expansions += 1
        cur_d, _, cur = heapq.heappop(frontier)
        if cur_d != dist.get(cur):
            continue  # stale entry
        if cur == green:
            break

        for club in golfer.clubs:
            for to in candidate_landings(course, cur, golfer, club, config=config):
                ev = evaluate_shot_expected_cost(
                    course, cur, to, golfer, club, config=config, landing_cache=landing_cache
                )
                if not ev.is_valid or not math.isfinite(ev.expected_shot_cost):
                    continue
                relax(cur, cur_d, to, club, ev)

            ev = evaluate_shot_expected_cost(
                course, cur, green, golfer, club, config=config, landing_cache=landing_cache
            )
            if ev.is_valid and math.isfinite(ev.expected_shot_cost):
                relax(cur, cur_d, green, club, ev)

    best = dist.get(green)
    if best is None or not math.isfinite(best):
        log.debug("No route to %s for %s after %d expansions", green, golfer.name, expansions)
        return ShotSolveResult.unreachable(expansions=expansions)
    if best > config.max_expected_shots_to_green:
        log.debug(
            "Route to %s for %s costs %.2f (> %.2f); treating as unreachable",
            green, golfer.name, best, config.max_expected_shots_to_green,
        )
        return ShotSolveResult.unreachable(expansions=expansions, over_budget=True)

    plan = reconstruct_plan(prev, tee, green)
    log.debug(
        "Solved %s -> %s for %s: %.2f shots, %d steps, %d expansions",
        tee, green, golfer.name, best, len(plan), expansions,
    )
    return ShotSolveResult(
        reachable=True,
        expected_shots_to_green=best,
        plan=plan,
        expansions=expansions,
    )


def reconstruct_plan(prev, start, goal) -> List[ShotPlanStep]:
    """Walk predecessor links back from goal and return the steps in play order."""
    plan: List[ShotPlanStep] = []
    node: Optional[Point] = goal
    while node != start:
        link = prev.get(node)
        if link is None:
            break
        node, step = link
        plan.append(step)
    plan.reverse()
    return plan
