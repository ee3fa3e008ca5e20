"""
Balance knobs for the shot planner and hole scorer.

Every number that tunes how golfers play a hole lives here, in one
configuration value that is passed into the engine instead of being read
from module globals. Tuning or testing with different numbers means
building a new config with get_config(**overrides); nothing in the engine
mutates it.
"""

import copy
from dataclasses import dataclass, field, replace
from typing import Dict, List, Tuple

# ============================================================
# Golfer bags
# ============================================================

DEFAULT_YARDS_PER_TILE = 10.0

# club, carry (yds), base dispersion (tiles)
SCRATCH_BAG = [
    ("Driver", 280, 1.6),
    ("3W",     250, 1.45),
    ("5i",     200, 1.15),
    ("7i",     170, 0.95),
    ("9i",     145, 0.8),
    ("PW",     130, 0.7),
    ("SW",      95, 0.6),
]

BOGEY_BAG = [
    ("Driver", 220, 2.4),
    ("3W",     200, 2.2),
    ("5i",     160, 1.8),
    ("7i",     140, 1.5),
    ("9i",     120, 1.3),
    ("PW",     110, 1.2),
    ("SW",      80, 1.0),
]

GOLFER_BAGS = {
    "SCRATCH": {"yards_per_tile": DEFAULT_YARDS_PER_TILE, "clubs": SCRATCH_BAG},
    "BOGEY":   {"yards_per_tile": DEFAULT_YARDS_PER_TILE, "clubs": BOGEY_BAG},
}

# ============================================================
# Landing penalties (strokes added for finishing on a terrain)
# ============================================================

LANDING_PENALTY_STROKES = {
    "water": 2.6,
    "sand": 0.6,
    "deep_rough": 0.85,
    "rough": 0.2,
    "fairway": 0.0,
    "green": 0.0,
    "tee": 0.0,
    "path": 0.0,
}

# Compass + diagonal unit steps used to propose landing spots.
DIRECTIONS_8 = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)


@dataclass(frozen=True)
class BalanceConfig:
    """All tunable numbers for shot costs, the solver and hole scoring."""

    # Dispersion grows once a shot asks for more than this share of carry
    utilization_threshold: float = 0.9
    dispersion_ramp: float = 2.2

    # Water carries
    carry_buffer_yards: float = 10.0
    short_miss_util_start: float = 0.92
    short_miss_max_prob: float = 0.22
    water_penalty_strokes: float = 2.6

    # Landing footprint
    landing_max_radius_tiles: int = 6
    landing_penalty_strokes: Dict[str, float] = field(
        default_factory=lambda: dict(LANDING_PENALTY_STROKES)
    )

    # Hole gates
    min_hole_distance_yards: float = 90.0
    reachable_in_two_threshold: float = 2.3
    max_expected_shots_to_green: float = 6.0

    # Solver
    max_expansions: int = 12_000
    candidate_fractions: Tuple[float, ...] = (0.55, 0.75, 0.92, 1.0)
    candidate_directions: Tuple[Tuple[int, int], ...] = DIRECTIONS_8
    range_overshoot: float = 1.05

    # Golfers
    default_yards_per_tile: float = DEFAULT_YARDS_PER_TILE
    golfer_bags: Dict[str, dict] = field(
        default_factory=lambda: {
            name: {"yards_per_tile": bag["yards_per_tile"], "clubs": list(bag["clubs"])}
            for name, bag in GOLFER_BAGS.items()
        }
    )

    def penalty_for(self, terrain: str) -> float:
        return self.landing_penalty_strokes.get(terrain, 0.0)

    def club_table(self, golfer_name: str) -> List[tuple]:
        return list(self.golfer_bags[golfer_name]["clubs"])


DEFAULT_BALANCE = BalanceConfig()


def get_config(**overrides) -> BalanceConfig:
    """
    Return a copy of the default balance with any knobs overridden by keyword.

    The lookup tables are deep-copied, so editing them on the returned config
    never reaches DEFAULT_BALANCE.
    """
    tables = {
        "landing_penalty_strokes": copy.deepcopy(DEFAULT_BALANCE.landing_penalty_strokes),
        "golfer_bags": copy.deepcopy(DEFAULT_BALANCE.golfer_bags),
    }
    tables.update(overrides)
    return replace(DEFAULT_BALANCE, **tables)
