"""
Hole linter: turns a hole layout into actionable warnings.

Each rule looks at the straight tee-to-green corridor (and, for doglegs,
the scratch shot plan) and emits a HoleIssue with a severity, a short
title and suggested fixes.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from balance_config import DEFAULT_BALANCE
from course_model import (
    DEEP_ROUGH,
    FAIRWAY,
    ROUGH,
    SAND,
    TREE,
    WATER,
    Point,
    distance_tiles,
    in_bounds,
    obstacle_index,
    sample_line,
    tile_at,
)
from hole_scoring import score_hole
from playable_path import find_best_playable_path

log = logging.getLogger(__name__)

INFO = "info"
WARN = "warn"
BAD = "bad"

CORRIDOR_SAMPLES = 50
MIN_HOLE_YARDS_WARN = 60
MIN_HOLE_YARDS_BAD = 40
FORCED_CARRY_BAD_YARDS = 170
EARLY_WATER_WARN_START_YARDS = 80
WATER_DOMINATED_FRAC = 0.6
LAYUP_BAND = (0.55, 0.70)
LAYUP_RADIUS_TILES = 3
SAFE_LAYUP_WARN_PCT = 0.60
SAFE_LAYUP_BAD_PCT = 0.35
LANDING_BANDS = ((0.35, 0.50, "first"), (0.55, 0.75, "second"))
HAZARD_DENSITY_WARN_PCT = 0.30
FAIRWAY_COVERAGE_WARN_PCT = 0.35
GREEN_APPROACH_RADIUS_TILES = 3
DOGLEG_TURN_INFO_DEG = 35


@dataclass
class HoleIssue:
    severity: str
    code: str
    title: str
    detail: str
    suggested_fixes: List[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)


@dataclass
class HoleEvaluation:
    scratch_shots_to_green: float
    bogey_shots_to_green: float
    auto_par: int
    reachable_in_two: bool
    effective_distance_yards: float
    issues: List[HoleIssue] = field(default_factory=list)

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]


# ============================================================
# Geometry helpers
# ============================================================

def corridor_buffer_tiles(distance_yards):
    if distance_yards < 200:
        return 2
    if distance_yards < 350:
        return 3
    return 4


def points_in_circle(course, center, radius_tiles) -> List[Point]:
    r = int(math.ceil(radius_tiles))
    r2 = radius_tiles * radius_tiles
    pts = []
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            if dx * dx + dy * dy <= r2:
                p = Point(center[0] + dx, center[1] + dy)
                if in_bounds(course, p):
                    pts.append(p)
    return pts


def _is_hazard(terrain):
    return terrain in (WATER, SAND, DEEP_ROUGH)


def _is_safe(terrain):
    return terrain in (FAIRWAY, ROUGH)


def _water_within(course, p, buffer_tiles):
    if tile_at(course, p, default=None) == WATER:
        return True
    b2 = buffer_tiles * buffer_tiles
    for dy in range(-buffer_tiles, buffer_tiles + 1):
        for dx in range(-buffer_tiles, buffer_tiles + 1):
            if dx * dx + dy * dy <= b2 and tile_at(course, (p[0] + dx, p[1] + dy), default=None) == WATER:
                return True
    return False


def contiguous_water_along_line(course, line, buffer_tiles):
    """
    Longest run of corridor points with water on or near them.

    Returns (max_water_length_yards, water_start_yards); the start is the
    distance from the first corridor point to where that longest run begins,
    or None when there is no water.
    """
    ypt = course.yards_per_tile
    max_len = 0.0
    start_yards: Optional[float] = None
    run_start = None
    run_len = 0

    def close_run():
        nonlocal max_len, start_yards
        length = run_len * ypt
        if length > max_len:
            max_len = length
            start_yards = distance_tiles(line[0], line[run_start]) * ypt

    for i, p in enumerate(line):
        if _water_within(course, p, buffer_tiles):
            if run_start is None:
                run_start = i
            run_len += 1
        elif run_start is not None:
            close_run()
            run_start = None
            run_len = 0

    if run_start is not None:
        close_run()

    return max_len, start_yards


def _turn_degrees(a, b, c):
    angle1 = math.atan2(b[1] - a[1], b[0] - a[0])
    angle2 = math.atan2(c[1] - b[1], c[0] - b[0])
    deg = abs(angle2 - angle1) * 180.0 / math.pi
    if deg > 180:
        deg = 360 - deg
    return deg


# ============================================================
# Rules
# ============================================================

def _check_length(straight_yards, issues):
    if straight_yards < MIN_HOLE_YARDS_BAD:
        issues.append(HoleIssue(
            BAD, "TOO_SHORT", "Hole Too Short",
            f"Distance is {straight_yards:.0f} yards, minimum is {MIN_HOLE_YARDS_BAD} yards",
            ["Move tee farther from green"],
        ))
    elif straight_yards < MIN_HOLE_YARDS_WARN:
        issues.append(HoleIssue(
            WARN, "TOO_SHORT", "Hole Very Short",
            f"Distance is {straight_yards:.0f} yards, recommended minimum is {MIN_HOLE_YARDS_WARN} yards",
            ["Move tee farther from green"],
        ))


def _check_route(course, tee, green, corridor, issues):
    walkable = find_best_playable_path(course, tee, green)
    if walkable is None:
        issues.append(HoleIssue(
            BAD, "BLOCKED_ROUTE", "No Walkable Route",
            "No path exists from tee to green without crossing water",
            ["Add land bridge", "Move hazards", "Add alternate fairway"],
        ))
        return

    water_frac = sum(1 for p in corridor if tile_at(course, p) == WATER) / len(corridor)
    if water_frac > WATER_DOMINATED_FRAC:
        issues.append(HoleIssue(
            BAD, "BLOCKED_ROUTE", "Corridor Dominated by Water",
            "The direct line from tee to green is mostly water",
            ["Add land bridge", "Move hazards", "Add alternate fairway"],
        ))


def _check_forced_carry(course, corridor, buffer_tiles, issues):
    max_water, water_start = contiguous_water_along_line(course, corridor, buffer_tiles)
    fixes = ["Add layup fairway before water", "Narrow water crossing"]
    if max_water > FORCED_CARRY_BAD_YARDS:
        issues.append(HoleIssue(
            BAD, "FORCED_CARRY_OVER_WATER", "Forced Water Carry Too Long",
            f"Water crossing requires {max_water:.0f} yard carry",
            fixes + ["Move water later"],
        ))
    elif max_water > FORCED_CARRY_BAD_YARDS * 0.7:
        issues.append(HoleIssue(
            WARN, "FORCED_CARRY_OVER_WATER", "Long Water Carry",
            f"Water crossing requires {max_water:.0f} yard carry",
            fixes,
        ))

    if water_start is not None and water_start < EARLY_WATER_WARN_START_YARDS:
        issues.append(HoleIssue(
            WARN, "FORCED_CARRY_OVER_WATER", "Water Too Early",
            f"Water begins {water_start:.0f} yards from tee",
            ["Add layup fairway before water", "Move water later"],
        ))


def _check_layup(course, tee, green, issues):
    ratio = sum(LAYUP_BAND) / 2
    layup = Point(
        int(math.floor(tee[0] + (green[0] - tee[0]) * ratio + 0.5)),
        int(math.floor(tee[1] + (green[1] - tee[1]) * ratio + 0.5)),
    )
    zone = points_in_circle(course, layup, LAYUP_RADIUS_TILES)
    safe = sum(1 for p in zone if _is_safe(tile_at(course, p)))
    safe_pct = safe / len(zone) if zone else 0.0

    fixes = ["Widen fairway at layup distance", "Reduce hazards near layup zone"]
    detail = f"Only {safe_pct * 100:.0f}% of layup zone is safe to land"
    if safe_pct < SAFE_LAYUP_BAD_PCT:
        issues.append(HoleIssue(BAD, "NO_SAFE_LAYUP_ZONE", "No Safe Layup Zone", detail, fixes))
    elif safe_pct < SAFE_LAYUP_WARN_PCT:
        issues.append(HoleIssue(WARN, "NO_SAFE_LAYUP_ZONE", "Limited Layup Zone", detail, fixes))


def _check_landing_zones(course, corridor, issues):
    obstacles_by_tile = obstacle_index(course.obstacles or [])
    last = max(1, len(corridor) - 1)
    for band_start, band_end, band_name in LANDING_BANDS:
        band = [p for i, p in enumerate(corridor) if band_start <= i / last <= band_end]
        hazard_count = 0.0
        for p in band:
            if _is_hazard(tile_at(course, p)):
                hazard_count += 1
            o = obstacles_by_tile.get(p)
            if o is not None and o.type == TREE:
                hazard_count += 0.5  # trees count as a partial hazard
        density = hazard_count / len(band) if band else 0.0
        if density > HAZARD_DENSITY_WARN_PCT:
            issues.append(HoleIssue(
                WARN, "LANDING_ZONE_TOO_PUNISHING",
                f"High Hazard Density in {band_name} Landing Zone",
                f"{density * 100:.0f}% hazard density in typical landing area",
                ["Move bunkers off main landing", "Add bailout rough/fairway"],
            ))


def _check_fairway_continuity(course, corridor, issues):
    stride = max(1, len(corridor) // 20)
    sampled = corridor[::stride]
    fairway = sum(1 for p in sampled if tile_at(course, p) == FAIRWAY)
    fairway_pct = fairway / len(sampled) if sampled else 0.0
    if fairway_pct >= FAIRWAY_COVERAGE_WARN_PCT:
        return

    failing = [p for p in corridor if in_bounds(course, p) and tile_at(course, p) != FAIRWAY]
    issues.append(HoleIssue(
        WARN, "FAIRWAY_CONTINUITY", "Insufficient Fairway Coverage",
        f"Only {fairway_pct * 100:.0f}% of corridor is fairway "
        f"(target: {FAIRWAY_COVERAGE_WARN_PCT * 100:.0f}%)",
        ["Paint fairway along centerline", "Increase fairway width +5y", "Increase fairway width +10y"],
        metadata={
            "current_value": fairway_pct,
            "target_value": FAIRWAY_COVERAGE_WARN_PCT,
            "failing_segments": failing,
        },
    ))


def _check_green_approach(course, green, issues):
    zone = points_in_circle(course, green, GREEN_APPROACH_RADIUS_TILES)
    safe = sum(1 for p in zone if tile_at(course, p) not in (WATER, DEEP_ROUGH))
    safe_pct = safe / len(zone) if zone else 0.0

    fixes = ["Add apron/rough around green", "Move water away from green edge"]
    detail = f"Only {safe_pct * 100:.0f}% safe approach area around green"
    if safe_pct < 0.5:
        issues.append(HoleIssue(BAD, "GREEN_APPROACH_TOO_TIGHT", "Green Approach Too Tight", detail, fixes))
    elif safe_pct < 0.65:
        issues.append(HoleIssue(WARN, "GREEN_APPROACH_TOO_TIGHT", "Tight Green Approach", detail, fixes))


def _check_dogleg(score, tee, green, issues):
    plan = score.shot_plan
    if not plan:
        return

    landing = plan[0].to_tile
    if distance_tiles(landing, green) < 2:
        return  # first shot finishes at the green: a straight hole

    if len(plan) > 1:
        turn = _turn_degrees(tee, landing, plan[1].to_tile)
        threshold = DOGLEG_TURN_INFO_DEG
    else:
        turn = _turn_degrees(tee, landing, green)
        threshold = DOGLEG_TURN_INFO_DEG * 1.5
    if turn <= threshold:
        return

    severity = INFO
    if len(plan) > 1 and score.scratch_shots_to_green > 4.5 and turn > DOGLEG_TURN_INFO_DEG * 1.5:
        severity = WARN
    issues.append(HoleIssue(
        severity, "DOGLEG_INDICATOR", "Dogleg Hole",
        f"Hole turns {turn:.0f}° at landing zone",
        ["Ensure landing zone at corner", "Widen fairway at turn"],
    ))


# ============================================================
# Entry point
# ============================================================

def evaluate_hole(course, hole, hole_index=0, config=DEFAULT_BALANCE) -> HoleEvaluation:
    score = score_hole(course, hole, hole_index, config=config)
    evaluation = HoleEvaluation(
        scratch_shots_to_green=score.scratch_shots_to_green,
        bogey_shots_to_green=score.bogey_shots_to_green,
        auto_par=score.auto_par,
        reachable_in_two=score.reachable_in_two,
        effective_distance_yards=score.effective_distance * course.yards_per_tile,
    )
    issues = evaluation.issues

    if hole.tee is None or hole.green is None:
        if hole.tee is None and hole.green is None:
            detail = "Both tee and green markers are missing"
            fixes = ["Place tee marker", "Place green/pin marker"]
        elif hole.tee is None:
            detail = "Tee marker is missing"
            fixes = ["Place tee marker"]
        else:
            detail = "Green marker is missing"
            fixes = ["Place green/pin marker"]
        issues.append(HoleIssue(BAD, "MISSING_MARKERS", "Missing Hole Markers", detail, fixes))
        return evaluation

    tee = Point(*hole.tee)
    green = Point(*hole.green)
    straight_yards = distance_tiles(tee, green) * course.yards_per_tile
    corridor = sample_line(tee, green, CORRIDOR_SAMPLES)

    _check_length(straight_yards, issues)
    _check_route(course, tee, green, corridor, issues)
    _check_forced_carry(course, corridor, corridor_buffer_tiles(straight_yards), issues)
    _check_layup(course, tee, green, issues)
    _check_landing_zones(course, corridor, issues)
    _check_fairway_continuity(course, corridor, issues)
    _check_green_approach(course, green, issues)
    _check_dogleg(score, tee, green, issues)

    log.debug("Hole %d lint: %s", hole_index, evaluation.codes())
    return evaluation
