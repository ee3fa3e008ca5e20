"""
Hole quality scoring.

Runs the shot planner for a scratch and a bogey golfer, derives par,
traces the scratch plan into a polyline "corridor" and turns the terrain
and obstacles along it into four 0-100 ratings: playability, difficulty,
aesthetics and an overall score. Also rolls per-hole scores up into a
course-level summary.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List

from balance_config import DEFAULT_BALANCE
from course_model import (
    DEEP_ROUGH,
    FAIRWAY,
    HAZARD_TERRAIN,
    PAR_MANUAL,
    PATH,
    ROUGH,
    SAND,
    TERRAIN_TYPES,
    TREE,
    WATER,
    Point,
    chebyshev,
    distance_tiles,
    in_bounds,
    path_length_tiles,
    sample_line,
    tile_at,
)
from golfer_profiles import BOGEY, SCRATCH, get_golfer_profile
from shot_planning_engine import ShotPlanStep, solve_shots_to_green

log = logging.getLogger(__name__)

SAMPLES_PER_SHOT = 9
MISSING_MARKERS_ISSUE = "Missing tee/green placement"


def _clamp(x, lo, hi):
    return max(lo, min(hi, x))


def empty_terrain_counts() -> Dict[str, int]:
    counts = {"samples": 0}
    counts.update({t: 0 for t in TERRAIN_TYPES})
    return counts


@dataclass
class HoleScore:
    hole_index: int
    is_complete: bool
    is_valid: bool
    par: int
    auto_par: int
    scratch_shots_to_green: float  # expected strokes to reach the green, ex-putting
    bogey_shots_to_green: float
    reachable_in_two: bool
    straight_distance: float  # tiles
    effective_distance: float  # tiles, along the polyline
    path: List[Point] = field(default_factory=list)
    shot_plan: List[ShotPlanStep] = field(default_factory=list)
    playability_score: float = 0.0
    difficulty_score: float = 0.0
    aesthetics_score: float = 0.0
    overall_hole_score: float = 0.0
    corridor: Dict[str, int] = field(default_factory=empty_terrain_counts)
    layout_issues: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)

    @property
    def score(self) -> float:
        return self.overall_hole_score


@dataclass
class CourseHoleSummary:
    holes: List[HoleScore]
    hole_quality_avg: float
    variety: float
    global_bonus: float
    course_quality: float


# ============================================================
# Helpers
# ============================================================

def derive_auto_par(shots_to_green):
    """Par is expected shots to the green plus two putts, kept within 3..5."""
    return int(_clamp(math.floor(shots_to_green + 2 + 0.5), 3, 5))


def plan_polyline(shot_plan, tee, green, samples_per_shot=SAMPLES_PER_SHOT) -> List[Point]:
    """
    Visualization polyline: evenly spaced samples along each shot, with
    consecutive repeats dropped. An empty plan falls back to [tee, green].
    """
    poly: List[Point] = []
    for step in shot_plan:
        for p in sample_line(step.from_tile, step.to_tile, samples_per_shot):
            if not poly or poly[-1] != p:
                poly.append(p)
    if not poly:
        poly = [Point(*tee), Point(*green)]
    return poly


def corridor_counts(course, points) -> Dict[str, int]:
    counts = empty_terrain_counts()
    for p in points:
        t = tile_at(course, p)
        if t in counts:
            counts[t] += 1
        counts["samples"] += 1
    return counts


def near_corridor_counts(course, points) -> Dict[str, int]:
    """Terrain in the 8 tiles around each corridor point (the point itself excluded)."""
    counts = empty_terrain_counts()
    for p in points:
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                q = (p[0] + dx, p[1] + dy)
                if not in_bounds(course, q):
                    continue
                t = tile_at(course, q)
                if t in counts:
                    counts[t] += 1
                counts["samples"] += 1
    return counts


def score_obstacles_against_corridor(obstacles, corridor_pts) -> Dict[str, int]:
    """
    Bucket each obstacle by Chebyshev distance to the nearest corridor point:
    on the line (0), near (1), scenic (2-3) or off (>3). Rocks count as bushes.
    """
    stats = {
        "tree_on_line": 0,
        "bush_on_line": 0,
        "tree_near": 0,
        "bush_near": 0,
        "tree_scenic": 0,
        "bush_scenic": 0,
        "tree_off": 0,
        "bush_off": 0,
        "total": 0,
    }
    if not corridor_pts or not obstacles:
        return stats

    for o in obstacles:
        d = min(chebyshev((o.x, o.y), p) for p in corridor_pts)
        kind = "tree" if o.type == TREE else "bush"
        if d == 0:
            bucket = "on_line"
        elif d == 1:
            bucket = "near"
        elif d <= 3:
            bucket = "scenic"
        else:
            bucket = "off"
        stats[f"{kind}_{bucket}"] += 1
        stats["total"] += 1
    return stats


def _incomplete_hole_score(hole, hole_index):
    par = hole.par_manual if hole.par_mode == PAR_MANUAL and hole.par_manual else 4
    return HoleScore(
        hole_index=hole_index,
        is_complete=False,
        is_valid=False,
        par=par,
        auto_par=4,
        scratch_shots_to_green=math.inf,
        bogey_shots_to_green=math.inf,
        reachable_in_two=False,
        straight_distance=0.0,
        effective_distance=0.0,
        layout_issues=[MISSING_MARKERS_ISSUE],
        issues=[MISSING_MARKERS_ISSUE],
    )


# ============================================================
# Per-hole scoring
# ============================================================

def score_hole(course, hole, hole_index=0, config=DEFAULT_BALANCE) -> HoleScore:
    """
    Score one hole. Never raises: a malformed hole still gets a fully
    populated (if poor) score, with problems listed in `issues`.
    """
    if hole.tee is None or hole.green is None:
        return _incomplete_hole_score(hole, hole_index)

    tee = Point(*hole.tee)
    green = Point(*hole.green)

    layout_issues = []
    if not in_bounds(course, tee):
        layout_issues.append("Tee is out of bounds")
    if not in_bounds(course, green):
        layout_issues.append("Green is out of bounds")
    if tee == green:
        layout_issues.append("Tee and green overlap")
    issues = list(layout_issues)

    straight_distance = distance_tiles(tee, green)
    scratch = get_golfer_profile(SCRATCH, course, config=config)
    bogey = get_golfer_profile(BOGEY, course, config=config)
    scratch_solve = solve_shots_to_green(course, tee, green, scratch, config=config)
    bogey_solve = solve_shots_to_green(course, tee, green, bogey, config=config)

    scratch_shots = scratch_solve.expected_shots_to_green
    bogey_shots = bogey_solve.expected_shots_to_green
    reachable = scratch_solve.reachable

    min_dist_ok = straight_distance * scratch.yards_per_tile >= config.min_hole_distance_yards
    max_ok = reachable and scratch_shots <= config.max_expected_shots_to_green

    auto_par = derive_auto_par(scratch_shots) if reachable else 4
    if hole.par_mode == PAR_MANUAL and hole.par_manual:
        par = hole.par_manual
    else:
        par = auto_par
    reachable_in_two = reachable and scratch_shots <= config.reachable_in_two_threshold

    if not min_dist_ok:
        issues.append("Hole too short (tee too close to green)")
    if scratch_solve.over_budget:
        issues.append("Routing is too costly (forced penalties / no safe layup)")
    elif not reachable:
        issues.append("Green unreachable with club-based shot planning")

    shot_plan = scratch_solve.plan
    poly = plan_polyline(shot_plan, tee, green)
    effective_distance = path_length_tiles(poly)

    tee_tile = tile_at(course, tee)
    green_tile = tile_at(course, green)
    tee_on_hazard = tee_tile in HAZARD_TERRAIN
    green_on_hazard = green_tile in HAZARD_TERRAIN
    if tee_on_hazard:
        issues.append("Tee on hazard")
    if green_on_hazard:
        issues.append("Green on hazard")

    corridor = corridor_counts(course, poly)
    s = corridor["samples"] or 1
    water_frac = corridor[WATER] / s
    sand_frac = corridor[SAND] / s
    fairway_frac = corridor[FAIRWAY] / s
    rough_frac = corridor[ROUGH] / s
    deep_rough_frac = corridor[DEEP_ROUGH] / s
    path_frac = corridor[PATH] / s
    on_hazard_frac = water_frac + sand_frac
    on_bad_lie_frac = rough_frac + deep_rough_frac + on_hazard_frac

    if water_frac > 0.25:
        issues.append("Lots of water on main line")
    if rough_frac > 0.7:
        issues.append("Mostly rough on main line")
    if deep_rough_frac > 0.25:
        issues.append("Deep rough dominates the main line")

    near = near_corridor_counts(course, poly)
    ns = near["samples"] or 1
    near_water_frac = near[WATER] / ns
    near_sand_frac = near[SAND] / ns
    near_deep_rough_frac = near[DEEP_ROUGH] / ns

    obs = score_obstacles_against_corridor(course.obstacles or [], poly)

    # Playability: fairway/path good, rough and hazards on the line bad.
    playability = (
        90
        + 35 * fairway_frac
        + 10 * path_frac
        - 70 * rough_frac
        - 120 * deep_rough_frac
        - 130 * water_frac
        - 55 * sand_frac
    )
    if tee_on_hazard:
        playability -= 25
    if green_on_hazard:
        playability -= 25
    playability -= 20 * obs["tree_on_line"] + 10 * obs["bush_on_line"]
    playability -= 10 * obs["tree_near"] + 5 * obs["bush_near"]
    playability = _clamp(playability, 0, 100)

    # Difficulty: higher = harder.
    dist_norm = _clamp(effective_distance / 40, 0, 1)  # 40 tiles ~ "long"
    shots_norm = _clamp((scratch_shots - 2) / 3, 0, 1) if reachable else 1.0
    difficulty = (
        20
        + 65 * (0.85 * water_frac + 0.55 * sand_frac + 0.25 * rough_frac + 0.45 * deep_rough_frac)
        + 28 * dist_norm
        + 38 * shots_norm
    )
    if tee_on_hazard:
        difficulty += 10
    if green_on_hazard:
        difficulty += 10
    difficulty += 12 * obs["tree_on_line"] + 6 * obs["bush_on_line"]
    difficulty += 6 * obs["tree_near"] + 3 * obs["bush_near"]
    difficulty = _clamp(difficulty, 0, 100)

    # Aesthetics: hazards beside the corridor look good, hazards on it don't.
    aesthetics = (
        55
        + 75 * (near_water_frac + 0.6 * near_sand_frac)
        - 120 * (water_frac + 0.6 * sand_frac)
    )
    aesthetics += 10 * min(near_water_frac, 0.12) / 0.12
    aesthetics -= 35 * _clamp(near_deep_rough_frac - 0.12, 0, 1)
    aesthetics += 4 * obs["tree_scenic"] + 3 * obs["bush_scenic"]
    aesthetics += 1 * obs["tree_off"] + 0.5 * obs["bush_off"]
    aesthetics -= 12 * obs["tree_on_line"] + 6 * obs["bush_on_line"]
    aesthetics -= 2 * max(0, obs["total"] - 22)
    aesthetics = _clamp(aesthetics, 0, 100)

    overall = 0.6 * playability + 0.25 * aesthetics + 0.15 * (100 - difficulty)
    overall -= 30 * _clamp(on_hazard_frac - 0.25, 0, 1)
    overall -= 18 * _clamp(on_bad_lie_frac - 0.55, 0, 1)
    overall = _clamp(overall, 0, 100)

    is_valid = not layout_issues and max_ok and min_dist_ok

    log.debug(
        "Hole %d: par %d, scratch %.2f, bogey %.2f, overall %.1f, %d issue(s)",
        hole_index, par, scratch_shots, bogey_shots, overall, len(issues),
    )

    return HoleScore(
        hole_index=hole_index,
        is_complete=True,
        is_valid=is_valid,
        par=par,
        auto_par=auto_par,
        scratch_shots_to_green=scratch_shots,
        bogey_shots_to_green=bogey_shots,
        reachable_in_two=reachable_in_two,
        straight_distance=straight_distance,
        effective_distance=effective_distance,
        path=poly,
        shot_plan=shot_plan,
        playability_score=playability,
        difficulty_score=difficulty,
        aesthetics_score=aesthetics,
        overall_hole_score=overall,
        corridor=corridor,
        layout_issues=layout_issues,
        issues=issues,
    )


# ============================================================
# Course roll-up
# ============================================================

def score_course_holes(course, config=DEFAULT_BALANCE) -> CourseHoleSummary:
    holes = [score_hole(course, h, i, config=config) for i, h in enumerate(course.holes)]
    scored = [h for h in holes if h.is_complete]
    if scored:
        hole_quality_avg = sum(h.overall_hole_score for h in scored) / len(scored)
    else:
        hole_quality_avg = 0.0

    # Variety: reward a mix of pars.
    distinct_pars = len({h.par for h in holes})
    variety = _clamp(20 + 40 * distinct_pars, 0, 100)

    total = len(course.tiles) or 1
    path_frac = course.tiles.count(PATH) / total
    water_frac = course.tiles.count(WATER) / total
    deep_rough_frac = course.tiles.count(DEEP_ROUGH) / total
    obstacle_frac = len(course.obstacles or []) / total
    deep_rough_penalty = 12 * _clamp(deep_rough_frac - 0.28, 0, 1)
    obstacle_penalty = 10 * _clamp(obstacle_frac - 0.06, 0, 1)
    global_bonus = _clamp(
        8 * path_frac - 6 * max(0.0, water_frac - 0.08) - deep_rough_penalty - obstacle_penalty,
        -10,
        10,
    )

    course_quality = _clamp(hole_quality_avg + global_bonus + 0.15 * (variety - 70), 0, 100)

    return CourseHoleSummary(
        holes=holes,
        hole_quality_avg=hole_quality_avg,
        variety=variety,
        global_bonus=global_bonus,
        course_quality=course_quality,
    )
