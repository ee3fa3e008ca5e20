import pytest

import course_presets as presets
import hole_linter as hl
from course_model import FAIRWAY, GREEN, WATER, Hole, Point, filled_course, paint_disc


def _issue(evaluation, code):
    return next(i for i in evaluation.issues if i.code == code)


def test_straightaway_has_no_issues():
    course, hole = presets.straight_fairway_hole()

    evaluation = hl.evaluate_hole(course, hole)

    assert evaluation.issues == []
    assert evaluation.auto_par == 3
    assert evaluation.effective_distance_yards == pytest.approx(300.0)


def test_missing_markers_short_circuits():
    course = filled_course(20, 20, FAIRWAY)

    evaluation = hl.evaluate_hole(course, Hole(tee=None, green=Point(5, 5)))

    assert evaluation.codes() == ["MISSING_MARKERS"]
    issue = evaluation.issues[0]
    assert issue.severity == hl.BAD
    assert issue.detail == "Tee marker is missing"

    both = hl.evaluate_hole(course, Hole())
    assert both.issues[0].detail == "Both tee and green markers are missing"


def test_water_band_blocks_route_and_forces_carry():
    course, hole = presets.water_band_hole()

    evaluation = hl.evaluate_hole(course, hole)
    codes = evaluation.codes()

    assert "BLOCKED_ROUTE" in codes
    carries = [i for i in evaluation.issues if i.code == "FORCED_CARRY_OVER_WATER"]
    assert any(i.severity == hl.BAD for i in carries)
    assert any(i.title == "Water Too Early" for i in carries)


def test_island_carry_is_playable_but_not_walkable():
    course, hole = presets.island_carry_hole()

    evaluation = hl.evaluate_hole(course, hole)

    assert _issue(evaluation, "BLOCKED_ROUTE").severity == hl.BAD
    assert evaluation.scratch_shots_to_green < 6


def test_short_holes_warn_then_fail(open_fairway):
    course, _ = open_fairway

    bad = hl.evaluate_hole(course, Hole(tee=Point(0, 0), green=Point(3, 0)))
    warn = hl.evaluate_hole(course, Hole(tee=Point(0, 0), green=Point(5, 0)))

    assert _issue(bad, "TOO_SHORT").severity == hl.BAD
    assert _issue(warn, "TOO_SHORT").severity == hl.WARN


def test_green_ringed_by_water_is_too_tight():
    course = filled_course(30, 15, FAIRWAY)
    paint_disc(course, Point(20, 7), 3, WATER)
    course.set_tile(20, 7, GREEN)

    evaluation = hl.evaluate_hole(course, Hole(tee=Point(2, 7), green=Point(20, 7)))

    assert _issue(evaluation, "GREEN_APPROACH_TOO_TIGHT").severity == hl.BAD


def test_corridor_buffer_grows_with_length():
    assert hl.corridor_buffer_tiles(100) == 2
    assert hl.corridor_buffer_tiles(250) == 3
    assert hl.corridor_buffer_tiles(400) == 4


def test_contiguous_water_reports_length_and_start():
    course = filled_course(10, 1, FAIRWAY)
    course.set_tile(3, 0, WATER)
    course.set_tile(4, 0, WATER)
    line = [Point(x, 0) for x in range(10)]

    length, start = hl.contiguous_water_along_line(course, line, 0)

    assert length == pytest.approx(20.0)
    assert start == pytest.approx(30.0)
    assert hl.contiguous_water_along_line(filled_course(10, 1, FAIRWAY), line, 2) == (0.0, None)


def test_points_in_circle_clips_to_grid():
    course = filled_course(5, 5, FAIRWAY)
    assert sorted(hl.points_in_circle(course, Point(0, 0), 1)) == [
        Point(0, 0),
        Point(0, 1),
        Point(1, 0),
    ]
