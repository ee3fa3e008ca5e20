import math
import random

import pytest

import balance_config as bc
import course_presets as presets
import hole_scoring as hs
from course_model import (
    BUSH,
    DEEP_ROUGH,
    FAIRWAY,
    PAR_MANUAL,
    ROCK,
    SAND,
    TREE,
    WATER,
    Hole,
    Obstacle,
    Point,
    filled_course,
    paint_rect,
)
from shot_planning_engine import ShotPlanStep


def test_missing_tee_gets_sentinel_score():
    course = filled_course(20, 20, FAIRWAY)
    score = hs.score_hole(course, Hole(tee=None, green=Point(5, 5)), hole_index=3)

    assert score.hole_index == 3
    assert not score.is_complete
    assert not score.is_valid
    assert score.par == 4
    assert math.isinf(score.scratch_shots_to_green)
    assert math.isinf(score.bogey_shots_to_green)
    assert score.overall_hole_score == 0.0
    assert score.corridor["samples"] == 0
    assert score.issues == [hs.MISSING_MARKERS_ISSUE]


def test_missing_green_keeps_manual_par():
    course = filled_course(20, 20, FAIRWAY)
    hole = Hole(tee=Point(1, 1), green=None, par_mode=PAR_MANUAL, par_manual=5)

    assert hs.score_hole(course, hole).par == 5


def test_short_open_hole_scores(open_fairway):
    course, hole = open_fairway

    score = hs.score_hole(course, hole)

    assert score.is_complete
    assert score.is_valid
    assert score.issues == []
    assert score.scratch_shots_to_green == pytest.approx(1.0)
    assert math.isfinite(score.bogey_shots_to_green)
    assert score.auto_par == 3
    assert score.par == 3
    assert score.reachable_in_two
    assert len(score.shot_plan) == 1
    assert score.straight_distance == pytest.approx(10.0)
    assert score.effective_distance == pytest.approx(10.0)
    assert score.corridor["samples"] == 9
    assert score.corridor[FAIRWAY] == 9

    assert score.playability_score == pytest.approx(100.0)
    assert score.difficulty_score == pytest.approx(27.0)
    assert score.aesthetics_score == pytest.approx(55.0)
    assert score.overall_hole_score == pytest.approx(84.7)
    assert score.score == score.overall_hole_score


def _lined_hole(above=FAIRWAY, line=FAIRWAY, below=FAIRWAY):
    """
    11x3 course played along the middle row, tee (0, 1) to green (10, 1).

    The scratch plan is a single 100 yd wedge, so the corridor is the nine
    tiles x = 0, 1, 3, 4, 5, 6, 8, 9, 10 and their 66 in-bounds neighbours
    (8 each, 5 at either end).
    """
    course = filled_course(11, 3, FAIRWAY)
    paint_rect(course, 0, 0, 10, 0, above)
    paint_rect(course, 1, 1, 9, 1, line)
    paint_rect(course, 0, 2, 10, 2, below)
    return course, Hole(tee=Point(0, 1), green=Point(10, 1))


def test_water_beside_the_line_raises_aesthetics():
    course, hole = _lined_hole(above=WATER)

    score = hs.score_hole(course, hole)

    # 3 water neighbours per inner point, 2 at each end
    near_water = 25 / 66
    aesthetics = 55 + 75 * near_water + 10
    assert score.scratch_shots_to_green == pytest.approx(1.0)
    assert score.issues == []
    assert score.playability_score == pytest.approx(100.0)
    assert score.difficulty_score == pytest.approx(27.0)
    assert score.aesthetics_score == pytest.approx(aesthetics)
    assert score.overall_hole_score == pytest.approx(60 + 0.25 * aesthetics + 0.15 * 73)


def test_sand_and_deep_rough_beside_the_line():
    course, hole = _lined_hole(above=SAND, below=DEEP_ROUGH)

    score = hs.score_hole(course, hole)

    near_sand = 25 / 66
    near_deep_rough = 25 / 66
    aesthetics = 55 + 75 * 0.6 * near_sand - 35 * (near_deep_rough - 0.12)
    assert score.playability_score == pytest.approx(100.0)
    assert score.difficulty_score == pytest.approx(27.0)
    assert score.aesthetics_score == pytest.approx(aesthetics)
    assert score.overall_hole_score == pytest.approx(60 + 0.25 * aesthetics + 0.15 * 73)


def test_sand_heavy_corridor_is_penalised():
    course, hole = _lined_hole(line=SAND)

    score = hs.score_hole(course, hole)

    # 7 of the 9 corridor tiles are sand; 14 of 66 neighbours are sand
    sand = 7 / 9
    fairway = 2 / 9
    near_sand = 14 / 66
    playability = 90 + 35 * fairway - 55 * sand
    difficulty = 20 + 65 * 0.55 * sand + 28 * 0.25
    aesthetics = 55 + 75 * 0.6 * near_sand - 120 * 0.6 * sand
    overall = (
        0.6 * playability
        + 0.25 * aesthetics
        + 0.15 * (100 - difficulty)
        - 30 * (sand - 0.25)
        - 18 * (sand - 0.55)
    )

    assert score.scratch_shots_to_green == pytest.approx(1.0)
    assert score.corridor[SAND] == 7
    assert score.corridor[FAIRWAY] == 2
    assert score.playability_score == pytest.approx(55.0)
    assert score.difficulty_score == pytest.approx(difficulty)
    assert score.aesthetics_score == pytest.approx(aesthetics)
    assert score.overall_hole_score == pytest.approx(overall)


def test_obstacles_feed_every_score():
    course = filled_course(20, 5, FAIRWAY)
    course.obstacles = [
        Obstacle(4, 2, TREE),  # on the line
        Obstacle(6, 2, TREE),  # on the line
        Obstacle(3, 3, BUSH),  # next to it
        Obstacle(5, 0, TREE),  # two tiles off
        Obstacle(19, 4, BUSH),  # far away
    ]
    hole = Hole(tee=Point(0, 2), green=Point(10, 2))

    score = hs.score_hole(course, hole)

    assert score.playability_score == pytest.approx(125 - 2 * 20 - 5)
    assert score.difficulty_score == pytest.approx(27 + 2 * 12 + 3)
    assert score.aesthetics_score == pytest.approx(55 + 4 + 0.5 - 2 * 12)
    assert score.overall_hole_score == pytest.approx(0.6 * 80 + 0.25 * 35.5 + 0.15 * 46)


def test_route_over_the_ceiling_is_too_costly(open_fairway):
    course, hole = open_fairway
    strict = bc.get_config(max_expected_shots_to_green=0.5)

    score = hs.score_hole(course, hole, config=strict)

    assert not score.is_valid
    assert "Routing is too costly (forced penalties / no safe layup)" in score.issues
    assert "Green unreachable with club-based shot planning" not in score.issues
    assert score.auto_par == 4
    assert score.shot_plan == []


def test_hole_score_is_deterministic(horseshoe):
    course, hole = horseshoe

    first = hs.score_hole(course, hole)
    second = hs.score_hole(course, hole)

    assert first == second
    assert len(first.shot_plan) >= 2


def test_manual_par_overrides_auto(open_fairway):
    course, hole = open_fairway
    hole.par_mode = PAR_MANUAL
    hole.par_manual = 5

    score = hs.score_hole(course, hole)

    assert score.par == 5
    assert score.auto_par == 3


def test_water_band_hole_is_invalid():
    course, hole = presets.water_band_hole()

    score = hs.score_hole(course, hole)

    assert score.is_complete
    assert not score.is_valid
    assert "Green unreachable with club-based shot planning" in score.issues
    assert score.layout_issues == []
    assert math.isinf(score.scratch_shots_to_green)
    assert score.auto_par == 4
    assert not score.reachable_in_two
    assert score.shot_plan == []
    assert score.path == [hole.tee, hole.green]


def test_short_and_overlapping_holes_are_flagged(open_fairway):
    course, _ = open_fairway

    short = hs.score_hole(course, Hole(tee=Point(0, 0), green=Point(5, 0)))
    assert not short.is_valid
    assert "Hole too short (tee too close to green)" in short.issues
    assert short.layout_issues == []

    overlap = hs.score_hole(course, Hole(tee=Point(5, 5), green=Point(5, 5)))
    assert not overlap.is_valid
    assert "Tee and green overlap" in overlap.layout_issues


def test_out_of_bounds_green_is_a_layout_issue(open_fairway):
    course, _ = open_fairway

    score = hs.score_hole(course, Hole(tee=Point(0, 0), green=Point(200, 0)))

    assert not score.is_valid
    assert score.layout_issues == ["Green is out of bounds"]
    assert "Green unreachable with club-based shot planning" in score.issues


def test_tee_on_sand_costs_playability(open_fairway):
    course, hole = open_fairway
    baseline = hs.score_hole(course, hole)

    course.set_tile(0, 0, SAND)
    sandy = hs.score_hole(course, hole)

    assert "Tee on hazard" in sandy.issues
    assert sandy.playability_score < baseline.playability_score
    assert sandy.difficulty_score > baseline.difficulty_score


def test_scores_stay_in_range_for_sample_holes():
    holes = [build() for build in presets.PRESETS.values()]
    holes += [presets.generate_random_hole(random.Random(seed)) for seed in (1, 2, 3)]

    for course, hole in holes:
        score = hs.score_hole(course, hole)
        for value in (
            score.playability_score,
            score.difficulty_score,
            score.aesthetics_score,
            score.overall_hole_score,
        ):
            assert 0.0 <= value <= 100.0
        assert 3 <= score.auto_par <= 5


def test_derive_auto_par_rounds_and_clamps():
    assert hs.derive_auto_par(0.0) == 3
    assert hs.derive_auto_par(1.0) == 3
    assert hs.derive_auto_par(2.4) == 4
    assert hs.derive_auto_par(2.5) == 5
    assert hs.derive_auto_par(9.0) == 5


def test_plan_polyline_joins_shots_without_repeats():
    plan = [
        ShotPlanStep(Point(0, 0), Point(4, 0), "7i", 1.0, 0.5),
        ShotPlanStep(Point(4, 0), Point(4, 4), "SW", 1.0, 0.4),
    ]

    poly = hs.plan_polyline(plan, Point(0, 0), Point(4, 4))

    assert poly[0] == Point(0, 0)
    assert poly[-1] == Point(4, 4)
    assert len(poly) == 9
    for a, b in zip(poly, poly[1:]):
        assert a != b


def test_plan_polyline_falls_back_to_straight_line():
    assert hs.plan_polyline([], (1, 2), (8, 9)) == [Point(1, 2), Point(8, 9)]


def test_obstacles_are_bucketed_by_distance_to_corridor():
    corridor = [Point(0, 0), Point(1, 0), Point(2, 0)]
    obstacles = [
        Obstacle(1, 0, TREE),
        Obstacle(1, 1, BUSH),
        Obstacle(0, 1, ROCK),
        Obstacle(2, 3, TREE),
        Obstacle(9, 9, BUSH),
    ]

    stats = hs.score_obstacles_against_corridor(obstacles, corridor)

    assert stats["tree_on_line"] == 1
    assert stats["bush_near"] == 2
    assert stats["tree_scenic"] == 1
    assert stats["bush_off"] == 1
    assert stats["total"] == 5
    assert hs.score_obstacles_against_corridor(obstacles, [])["total"] == 0


def test_course_summary_averages_complete_holes():
    course = filled_course(30, 10, FAIRWAY)
    course.holes = [
        Hole(tee=Point(0, 5), green=Point(10, 5)),
        Hole(tee=None, green=Point(3, 3)),
    ]

    summary = hs.score_course_holes(course)

    assert len(summary.holes) == 2
    assert summary.hole_quality_avg == pytest.approx(summary.holes[0].overall_hole_score)
    assert summary.hole_quality_avg == pytest.approx(84.7)
    assert summary.variety == 100
    assert summary.global_bonus == 0.0
    assert summary.course_quality == pytest.approx(89.2)


def test_course_without_holes_scores_zero():
    course = filled_course(10, 10, FAIRWAY)

    summary = hs.score_course_holes(course)

    assert summary.holes == []
    assert summary.hole_quality_avg == 0.0
    assert summary.course_quality == 0.0
