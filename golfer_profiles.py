"""
Golfer skill profiles: yards-per-tile conversion and an ordered bag of clubs.
"""

from dataclasses import dataclass, field
from typing import List

from balance_config import DEFAULT_BALANCE

SCRATCH = "SCRATCH"
BOGEY = "BOGEY"


@dataclass(frozen=True)
class ClubSpec:
    name: str
    carry_yards: float
    dispersion_tiles_base: float  # longer clubs generally wider


@dataclass
class GolferProfile:
    name: str
    yards_per_tile: float
    clubs: List[ClubSpec] = field(default_factory=list)


def get_golfer_profile(name, course=None, config=DEFAULT_BALANCE) -> GolferProfile:
    """
    Look up a golfer by name ("SCRATCH" or "BOGEY").

    The course's own yards-per-tile wins over the profile default when a
    course is given. An unknown name raises KeyError.
    """
    bag = config.golfer_bags[name]
    yards_per_tile = bag.get("yards_per_tile", config.default_yards_per_tile)
    if course is not None and course.yards_per_tile:
        yards_per_tile = course.yards_per_tile

    clubs = [
        ClubSpec(club, float(carry), float(disp))
        for club, carry, disp in config.club_table(name)
    ]
    return GolferProfile(name=name, yards_per_tile=float(yards_per_tile), clubs=clubs)
