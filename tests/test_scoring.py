import pytest

from brickgame.game.scoring import level_for_lines, score_for_clear, speed_for_level


@pytest.mark.parametrize("lines,base", [(1, 100), (2, 300), (3, 500), (4, 800)])
@pytest.mark.parametrize("level", [1, 2, 7])
def test_score_table(lines, base, level):
    assert score_for_clear(lines, level) == base * level


@pytest.mark.parametrize("lines", [0, 5, -1])
def test_out_of_range_clears_score_nothing(lines):
    assert score_for_clear(lines, 3) == 0


@pytest.mark.parametrize("total,level", [(0, 1), (9, 1), (10, 2), (19, 2), (25, 3), (100, 11)])
def test_level_for_lines(total, level):
    assert level_for_lines(total) == level


@pytest.mark.parametrize("level,speed", [(1, 460), (2, 420), (5, 300), (10, 100), (11, 100), (30, 100)])
def test_speed_curve_is_floored(level, speed):
    assert speed_for_level(level) == speed


def test_speed_never_increases_with_level():
    speeds = [speed_for_level(level) for level in range(1, 40)]
    assert speeds == sorted(speeds, reverse=True)
