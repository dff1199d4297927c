import pytest

from parlay_picker.modeling.stat_mappings import normalize_category_label, parse_category, stat_value
from parlay_picker.modeling.types import StatCategory


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Points", StatCategory.POINTS),
        ("PTS", StatCategory.POINTS),
        ("3-Pointers", StatCategory.THREES),
        ("3PT Made", StatCategory.THREES),
        ("ast", StatCategory.ASSISTS),
        ("r", StatCategory.REBOUNDS),
        (StatCategory.REBOUNDS, StatCategory.REBOUNDS),
    ],
)
def test_parse_category(raw, expected):
    assert parse_category(raw) is expected


def test_parse_category_unknown():
    with pytest.raises(ValueError):
        parse_category("steals")


def test_normalize_category_label():
    assert normalize_category_label(" 3-Pointers ") == "3pointers"


def test_stat_value_prefers_box_score_keys():
    assert stat_value(StatCategory.POINTS, {"PTS": 31, "points": 5}) == 31.0
    assert stat_value(StatCategory.THREES, {"fg3m": "4"}) == 4.0


def test_stat_value_rejects_non_numeric():
    assert stat_value(StatCategory.ASSISTS, {"AST": "n/a"}) is None
    assert stat_value(StatCategory.ASSISTS, {"AST": True}) is None
    assert stat_value(StatCategory.REBOUNDS, {"REB": float("nan")}) is None
    assert stat_value(StatCategory.REBOUNDS, {}) is None
