import pytest

from mineswep.difficulty import PRESETS, Difficulty, DifficultyProfile, custom_profile, get_profile
from mineswep.errors import InvalidProfile


def test_easy_profile():
    p = get_profile("easy")
    assert (p.columns, p.rows, p.mine_count) == (7, 10, 8)
    assert p.tile_count == 70
    assert p.safe_tile_count == 62


def test_hard_profile():
    p = get_profile(Difficulty.HARD)
    assert (p.columns, p.rows, p.mine_count) == (18, 27, 99)
    assert p.tile_count == 486


def test_lookup_is_case_insensitive():
    assert get_profile(" Hard ") is PRESETS[Difficulty.HARD]


def test_unknown_difficulty():
    with pytest.raises(InvalidProfile) as exc:
        get_profile("nightmare")
    assert str(exc.value) == "unknown_difficulty"


@pytest.mark.parametrize("columns,rows,mines,code", [
    (1, 10, 2, "board_too_small"),
    (7, 1, 2, "board_too_small"),
    (7, 10, 0, "invalid_mine_count"),
    (7, 10, 70, "invalid_mine_count"),
])
def test_invalid_profiles(columns, rows, mines, code):
    with pytest.raises(InvalidProfile) as exc:
        custom_profile(columns, rows, mines)
    assert str(exc.value) == code


def test_profile_is_immutable():
    p = DifficultyProfile("custom", 3, 3, 1)
    with pytest.raises(Exception):
        p.columns = 4
