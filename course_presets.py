"""
Sample holes for the inspector and the tests.

Each builder returns a (Course, Hole) pair on its own small grid. The
random generator is for practice/exploration only; pass a seeded
random.Random to get repeatable layouts.
"""

import random

from course_model import (
    BUSH,
    DEEP_ROUGH,
    FAIRWAY,
    GREEN,
    ROUGH,
    SAND,
    TEE,
    TREE,
    WATER,
    Hole,
    Obstacle,
    Point,
    filled_course,
    paint_disc,
    paint_rect,
)


def _finish(course, tee, green, name):
    course.set_tile(tee.x, tee.y, TEE)
    paint_disc(course, green, 1.5, GREEN)
    hole = Hole(tee=tee, green=green, name=name)
    course.holes = [hole]
    return course, hole


def straight_fairway_hole(length_tiles=30, yards_per_tile=10.0):
    """A straight hole: fairway strip through rough, tee on the left."""
    width = length_tiles + 10
    height = 21
    mid = height // 2
    course = filled_course(width, height, ROUGH, yards_per_tile=yards_per_tile, name="Straightaway")
    tee = Point(4, mid)
    green = Point(4 + length_tiles, mid)
    paint_rect(course, tee.x, mid - 3, green.x, mid + 3, FAIRWAY)
    return _finish(course, tee, green, "Straightaway")


def island_carry_hole(water_tiles=12, yards_per_tile=10.0):
    """Full-height water band between tee and green: carryable, but not walkable."""
    width = water_tiles + 26
    height = 15
    mid = height // 2
    course = filled_course(width, height, FAIRWAY, yards_per_tile=yards_per_tile, name="Island Carry")
    water_x0 = 10
    paint_rect(course, water_x0, 0, water_x0 + water_tiles - 1, height - 1, WATER)
    tee = Point(3, mid)
    green = Point(water_x0 + water_tiles + 6, mid)
    return _finish(course, tee, green, "Island Carry")


def water_band_hole(band_tiles=32, yards_per_tile=10.0):
    """Water band wider than any club carries: the green cannot be reached."""
    width = band_tiles + 14
    height = 9
    mid = height // 2
    course = filled_course(width, height, FAIRWAY, yards_per_tile=yards_per_tile, name="Water Band")
    paint_rect(course, 6, 0, 6 + band_tiles - 1, height - 1, WATER)
    tee = Point(2, mid)
    green = Point(6 + band_tiles + 4, mid)
    return _finish(course, tee, green, "Water Band")


def dogleg_hole(leg_tiles=22, yards_per_tile=10.0):
    """L-shaped fairway turning right, with trees guarding the corner."""
    width = leg_tiles + 12
    height = leg_tiles + 12
    course = filled_course(width, height, DEEP_ROUGH, yards_per_tile=yards_per_tile, name="Dogleg")
    tee = Point(4, 4)
    corner = Point(4 + leg_tiles, 4)
    green = Point(corner.x, 4 + leg_tiles)
    paint_rect(course, tee.x, tee.y - 2, corner.x + 2, tee.y + 2, FAIRWAY)
    paint_rect(course, corner.x - 2, corner.y, corner.x + 2, green.y, FAIRWAY)
    paint_disc(course, Point(corner.x - 5, corner.y + 6), 2, SAND)
    course.obstacles = [Obstacle(corner.x - 4 + i, corner.y + 3 + i, TREE) for i in range(3)]
    return _finish(course, tee, green, "Dogleg")


PRESETS = {
    "Straightaway": straight_fairway_hole,
    "Island Carry": island_carry_hole,
    "Dogleg": dogleg_hole,
    "Water Band": water_band_hole,
}


def generate_random_hole(rng=None, width=60, height=30, yards_per_tile=10.0):
    """
    Random practice hole: a fairway corridor through rough, plus a few
    optional bunkers, a pond and some trees/bushes.
    """
    rng = rng or random.Random()
    course = filled_course(width, height, ROUGH, yards_per_tile=yards_per_tile, name="Random Hole")

    tee = Point(rng.randint(2, 6), rng.randint(4, height - 5))
    length = rng.randint(12, width - tee.x - 4)
    green = Point(tee.x + length, rng.randint(4, height - 5))

    half_width = rng.choice([2, 3, 4])
    steps = max(1, length)
    for i in range(steps + 1):
        x = tee.x + i
        y = round(tee.y + (green.y - tee.y) * i / steps)
        paint_rect(course, x, y - half_width, x, y + half_width, FAIRWAY)

    for _ in range(rng.randint(0, 3)):
        bx = rng.randint(tee.x + 4, green.x)
        by = rng.randint(1, height - 2)
        paint_disc(course, Point(bx, by), rng.choice([1, 1.5, 2]), SAND)

    if rng.random() < 0.4:
        px = rng.randint(tee.x + 6, max(tee.x + 6, green.x - 4))
        py = rng.randint(2, height - 3)
        paint_disc(course, Point(px, py), rng.choice([2, 3]), WATER)

    for _ in range(rng.randint(0, 8)):
        course.obstacles.append(Obstacle(
            rng.randint(0, width - 1),
            rng.randint(0, height - 1),
            rng.choice([TREE, TREE, BUSH]),
        ))

    return _finish(course, tee, green, "Random Hole")
