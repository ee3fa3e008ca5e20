"""
Course snapshot types and grid helpers.

A course is a rectangular, row-major grid of terrain tiles plus an overlay
of obstacles (trees, bushes, rocks) and a list of hole definitions. The
engine treats a course as a read-only snapshot.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional

from balance_config import DEFAULT_YARDS_PER_TILE

# ============================================================
# Terrain & obstacles
# ============================================================

FAIRWAY = "fairway"
ROUGH = "rough"
DEEP_ROUGH = "deep_rough"
SAND = "sand"
WATER = "water"
GREEN = "green"
TEE = "tee"
PATH = "path"

TERRAIN_TYPES = (FAIRWAY, ROUGH, DEEP_ROUGH, SAND, WATER, GREEN, TEE, PATH)
HAZARD_TERRAIN = (WATER, SAND)

TREE = "tree"
BUSH = "bush"
ROCK = "rock"

PAR_AUTO = "AUTO"
PAR_MANUAL = "MANUAL"


class Point(NamedTuple):
    x: int
    y: int


@dataclass
class Obstacle:
    x: int
    y: int
    type: str = TREE


@dataclass
class Hole:
    """Tee/green markers plus par settings. Missing markers are None."""
    tee: Optional[Point] = None
    green: Optional[Point] = None
    par_mode: str = PAR_AUTO
    par_manual: Optional[int] = None
    name: str = ""


@dataclass
class Course:
    width: int
    height: int
    tiles: List[str]  # length = width * height, row-major
    yards_per_tile: float = DEFAULT_YARDS_PER_TILE
    obstacles: List[Obstacle] = field(default_factory=list)
    holes: List[Hole] = field(default_factory=list)
    name: str = "Untitled Course"

    def set_tile(self, x: int, y: int, terrain: str) -> None:
        if in_bounds(self, Point(x, y)):
            self.tiles[y * self.width + x] = terrain


def filled_course(width, height, terrain=FAIRWAY, **kwargs) -> Course:
    """A course where every tile is the same terrain."""
    return Course(width=width, height=height, tiles=[terrain] * (width * height), **kwargs)


def paint_rect(course: Course, x0, y0, x1, y1, terrain) -> None:
    """Paint an inclusive rectangle, silently clipping to the grid."""
    for y in range(min(y0, y1), max(y0, y1) + 1):
        for x in range(min(x0, x1), max(x0, x1) + 1):
            course.set_tile(x, y, terrain)


def paint_disc(course: Course, center, radius, terrain) -> None:
    r = int(math.ceil(radius))
    for dy in range(-r, r + 1):
        for dx in range(-r, r + 1):
            if dx * dx + dy * dy <= radius * radius:
                course.set_tile(center[0] + dx, center[1] + dy, terrain)


# ============================================================
# Grid helpers
# ============================================================

def in_bounds(course: Course, p) -> bool:
    return 0 <= p[0] < course.width and 0 <= p[1] < course.height


def tile_at(course: Course, p, default: Optional[str] = ROUGH) -> Optional[str]:
    """Terrain at p; off-grid tiles read as `default` (rough unless told otherwise)."""
    if not in_bounds(course, p):
        return default
    return course.tiles[p[1] * course.width + p[0]]


def obstacle_index(obstacles: Iterable[Obstacle]) -> Dict[Point, Obstacle]:
    """Map tile -> obstacle. The first obstacle listed on a tile wins."""
    index: Dict[Point, Obstacle] = {}
    for o in obstacles:
        index.setdefault(Point(o.x, o.y), o)
    return index


def distance_tiles(a, b) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def chebyshev(a, b) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def path_length_tiles(points) -> float:
    """Cumulative Euclidean length of a polyline."""
    return sum(distance_tiles(a, b) for a, b in zip(points, points[1:]))


def bresenham_line(a, b) -> List[Point]:
    """Rasterized straight line from a to b, both endpoints included."""
    x0, y0 = int(a[0]), int(a[1])
    x1, y1 = int(b[0]), int(b[1])
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    pts = []
    while True:
        pts.append(Point(x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return pts


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def sample_line(a, b, samples=13) -> List[Point]:
    """
    `samples` evenly spaced points from a to b, rounded to tiles.

    Rounding can land neighbouring samples on the same tile; consecutive
    repeats are dropped.
    """
    pts: List[Point] = []
    for i in range(samples):
        t = 0.0 if samples == 1 else i / (samples - 1)
        p = Point(
            _round_half_up(a[0] + (b[0] - a[0]) * t),
            _round_half_up(a[1] + (b[1] - a[1]) * t),
        )
        if not pts or pts[-1] != p:
            pts.append(p)
    return pts
