"""
Shot-agnostic walking route finder.

Answers one question: can anyone get from A to B across the grid without
going through water? It ignores clubs entirely and simply walks the
4-connected grid with terrain-based step costs.
"""

import heapq
import math
from dataclasses import dataclass
from typing import List, Optional

from course_model import (
    DEEP_ROUGH,
    FAIRWAY,
    GREEN,
    PATH,
    ROUGH,
    SAND,
    TEE,
    TREE,
    WATER,
    Point,
    in_bounds,
    obstacle_index,
    tile_at,
)

# Lower is better. Tuned for "golfability", not realism.
TRAVERSAL_COST = {
    FAIRWAY: 1.0,
    PATH: 1.2,
    TEE: 1.2,
    GREEN: 1.4,
    ROUGH: 2.2,
    DEEP_ROUGH: 3.4,
    SAND: 2.8,
    WATER: math.inf,
}
DEFAULT_TRAVERSAL_COST = 2.2

WATER_ADJACENCY_PENALTY = 0.9
SAND_ADJACENCY_PENALTY = 0.25
TREE_PENALTY = 5.0
BUSH_PENALTY = 2.5

NEIGHBORS_4 = ((1, 0), (-1, 0), (0, 1), (0, -1))


@dataclass
class PathResult:
    path: List[Point]  # start and end included
    cost: float
    steps: int


def hazard_adjacency_penalty(course, x, y):
    """Extra cost for each of the 8 surrounding tiles that is water or sand."""
    p = 0.0
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            q = (x + dx, y + dy)
            if not in_bounds(course, q):
                continue
            t = tile_at(course, q)
            if t == WATER:
                p += WATER_ADJACENCY_PENALTY
            elif t == SAND:
                p += SAND_ADJACENCY_PENALTY
    return p


def obstacle_penalty(obstacle):
    # Obstacles never block, they only discourage.
    if obstacle is None:
        return 0.0
    return TREE_PENALTY if obstacle.type == TREE else BUSH_PENALTY


def step_cost(course, obstacles_by_tile, x, y):
    base = TRAVERSAL_COST.get(tile_at(course, (x, y)), DEFAULT_TRAVERSAL_COST)
    if not math.isfinite(base):
        return math.inf
    return (
        base
        + hazard_adjacency_penalty(course, x, y)
        + obstacle_penalty(obstacles_by_tile.get((x, y)))
    )


def find_best_playable_path(course, start, goal) -> Optional[PathResult]:
    """
    Dijkstra on the 4-neighbour grid.

    Returns None when either endpoint is off the grid or impassable, or
    when no finite-cost route exists.
    """
    start = Point(*start)
    goal = Point(*goal)
    if not in_bounds(course, start) or not in_bounds(course, goal):
        return None

    obstacles_by_tile = obstacle_index(course.obstacles or [])
    if not math.isfinite(step_cost(course, obstacles_by_tile, *start)):
        return None
    if not math.isfinite(step_cost(course, obstacles_by_tile, *goal)):
        return None

    dist = {start: 0.0}
    prev = {}
    visited = set()
    heap = [(0.0, start)]

    while heap:
        cur_d, cur = heapq.heappop(heap)
        if cur in visited:
            continue
        visited.add(cur)
        if cur == goal:
            break

        for dx, dy in NEIGHBORS_4:
            nxt = Point(cur.x + dx, cur.y + dy)
            if not in_bounds(course, nxt) or nxt in visited:
                continue
            sc = step_cost(course, obstacles_by_tile, nxt.x, nxt.y)
            if not math.isfinite(sc):
                continue
            nd = cur_d + sc
            if nd < dist.get(nxt, math.inf):
                dist[nxt] = nd
                prev[nxt] = cur
                heapq.heappush(heap, (nd, nxt))

    if goal not in dist:
        return None

    path = [goal]
    while path[-1] != start:
        path.append(prev[path[-1]])
    path.reverse()
    return PathResult(path=path, cost=dist[goal], steps=max(0, len(path) - 1))
