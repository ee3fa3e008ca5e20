import pytest

from course_model import FAIRWAY, WATER, Hole, Point, filled_course, paint_rect
from golfer_profiles import BOGEY, SCRATCH, get_golfer_profile


@pytest.fixture
def open_fairway():
    """110x70 all-fairway course with a 100 yd hole along the top edge."""
    course = filled_course(110, 70, FAIRWAY)
    hole = Hole(tee=Point(0, 0), green=Point(10, 0))
    course.holes = [hole]
    return course, hole


@pytest.fixture
def horseshoe():
    """
    Water block between tee and green, too wide to carry, with land
    underneath it. The hole has to be played around the water.
    """
    course = filled_course(26, 16, FAIRWAY, yards_per_tile=20.0, name="Horseshoe")
    paint_rect(course, 5, 0, 19, 10, WATER)
    hole = Hole(tee=Point(2, 2), green=Point(23, 2))
    course.holes = [hole]
    return course, hole


@pytest.fixture
def scratch():
    return get_golfer_profile(SCRATCH)


@pytest.fixture
def bogey():
    return get_golfer_profile(BOGEY)
