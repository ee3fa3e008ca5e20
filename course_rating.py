"""
Course rating and slope estimate.

A deliberately simple, deterministic USGA-flavoured rating: each hole gets
an expected scratch and bogey score from a greedy club count plus penalty
strokes for what lies along the scored corridor, and the spread between
the two golfers maps onto the familiar 55-155 slope range (113 = average).
"""

from dataclasses import dataclass

from balance_config import DEFAULT_BALANCE
from course_model import DEEP_ROUGH, ROUGH, SAND, WATER
from hole_scoring import score_course_holes

PUTTING_BASELINE = 2.0
AVERAGE_SLOPE = 113
TYPICAL_SPREAD_18 = 20.0  # bogey minus scratch on an average 18 holes


def _clamp(x, lo, hi):
    return max(lo, min(hi, x))


@dataclass(frozen=True)
class RatingProfile:
    # carry distances (yards)
    driver: float
    wood3: float
    iron5: float
    iron7: float
    pw: float
    # penalty multipliers
    hazard_mult: float
    rough_mult: float
    deep_rough_mult: float
    obstacle_mult: float
    invalid_hole_score: float

    @property
    def carries(self):
        return sorted((self.driver, self.wood3, self.iron5, self.iron7, self.pw), reverse=True)


SCRATCH_RATING = RatingProfile(280, 250, 200, 170, 135, 1.0, 0.8, 1.0, 1.0, invalid_hole_score=7)
BOGEY_RATING = RatingProfile(220, 200, 160, 140, 110, 1.5, 1.4, 1.8, 1.3, invalid_hole_score=9)


@dataclass
class RatingSummary:
    holes_used: int  # 9 or 18
    expected_scratch_score: float  # 18-hole equivalent
    expected_bogey_score: float
    course_rating: float
    slope_raw: float
    slope: int


def estimate_shots_to_reach_green(distance_yards, profile):
    """Greedy: hit the longest club that doesn't overshoot by more than 20y."""
    carries = profile.carries
    remaining = max(0.0, distance_yards)
    shots = 0
    guard = 0
    while remaining > 5 and guard < 20:
        guard += 1
        carry = next((c for c in carries if c <= remaining + 20), carries[-1])
        remaining = max(0.0, remaining - carry)
        shots += 1
    return shots


def hazard_penalty_strokes(water_frac, sand_frac, rough_frac, deep_rough_frac,
                           obstacle_penalty, distance_yards, profile):
    # Long holes amplify the impact.
    dist_factor = _clamp(distance_yards / 480, 0.3, 1.4)

    hazard = profile.hazard_mult * (2.2 * water_frac + 0.9 * sand_frac)
    lie = profile.rough_mult * 0.9 * rough_frac + profile.deep_rough_mult * 1.2 * deep_rough_frac
    obst = profile.obstacle_mult * obstacle_penalty

    raw = dist_factor * (hazard + lie + obst)
    return _clamp(raw * 1.4, 0, 2.5)


def expected_score_for_hole(hole_score, yards_per_tile, profile):
    if hole_score is None or not hole_score.is_complete or not hole_score.is_valid:
        # Broken holes are expensive so the rating pushes towards a fix.
        return profile.invalid_hole_score

    distance_yards = hole_score.effective_distance * yards_per_tile
    c = hole_score.corridor
    s = c["samples"] or 1
    obstacle_penalty = _clamp((hole_score.difficulty_score - 45) / 100, 0, 1)

    base_shots = estimate_shots_to_reach_green(distance_yards, profile)
    penalty = hazard_penalty_strokes(
        water_frac=c[WATER] / s,
        sand_frac=c[SAND] / s,
        rough_frac=c[ROUGH] / s,
        deep_rough_frac=c[DEEP_ROUGH] / s,
        obstacle_penalty=obstacle_penalty,
        distance_yards=distance_yards,
        profile=profile,
    )
    return base_shots + penalty + PUTTING_BASELINE


def compute_course_rating_and_slope(course, config=DEFAULT_BALANCE) -> RatingSummary:
    summary = score_course_holes(course, config=config)
    n = len(summary.holes)
    holes_used = 18 if n >= 18 else 9
    rated = summary.holes[:holes_used]
    ypt = course.yards_per_tile or config.default_yards_per_tile

    scratch_total = sum(expected_score_for_hole(h, ypt, SCRATCH_RATING) for h in rated)
    bogey_total = sum(expected_score_for_hole(h, ypt, BOGEY_RATING) for h in rated)

    mult = 2 if holes_used == 9 else 1
    expected_scratch = scratch_total * mult
    expected_bogey = bogey_total * mult
    slope_raw = expected_bogey - expected_scratch

    slope = int(round(_clamp(AVERAGE_SLOPE * slope_raw / TYPICAL_SPREAD_18, 55, 155)))

    return RatingSummary(
        holes_used=holes_used,
        expected_scratch_score=round(expected_scratch, 1),
        expected_bogey_score=round(expected_bogey, 1),
        course_rating=round(expected_scratch, 1),
        slope_raw=round(slope_raw, 1),
        slope=slope,
    )
