from __future__ import annotations

import pytest

from parlay_picker.core.errors import (
    IncompleteParlayError,
    PropUnavailableError,
    SelectionLimitError,
    StatsUnavailableError,
)
from parlay_picker.modeling.types import OverUnder, PlayerPropData, PropOdds, StatCategory
from parlay_picker.services.builder import PropsBuilder


def _player(player_id: int, points: float | None, over_prob: float = 0.6, *, assists: float | None = None) -> PlayerPropData:
    return PlayerPropData(
        player_id=player_id,
        full_name=f"Player {player_id}",
        abbreviation=f"P. {player_id}",
        points_median=points,
        threes_median=None,
        assists_median=assists,
        rebounds_median=None,
        games_played=10,
        odds={category: PropOdds.from_probabilities(over_prob, 1.0 - over_prob) for category in StatCategory},
    )


class _StaticProvider:
    name = "static"

    def __init__(self, players=None, error=None):
        self.players = players or []
        self.error = error

    def fetch_player_stats(self):
        if self.error:
            raise self.error
        return self.players


@pytest.fixture
def builder() -> PropsBuilder:
    b = PropsBuilder(max_legs=3, top_players_limit=10)
    b.set_players([_player(1, 30.0), _player(2, 25.0, assists=8.0), _player(3, 20.0), _player(4, 15.0)])
    return b


def test_load_player_stats_success_and_failure():
    b = PropsBuilder()
    assert b.load_player_stats(_StaticProvider([_player(1, 10.0)]))
    assert len(b.players) == 1
    assert b.top_players[0].player_id == 1
    assert b.error_message is None

    assert not b.load_player_stats(_StaticProvider(error=StatsUnavailableError("offline")))
    assert b.error_message == "Failed to load player stats: offline"
    assert len(b.players) == 1
    assert not b.is_loading


def test_category_filter_updates_top_players(builder):
    assert [p.player_id for p in builder.top_players] == [1, 2, 3, 4]
    builder.set_category(StatCategory.ASSISTS)
    assert [p.player_id for p in builder.top_players] == [2]
    builder.set_category(StatCategory.REBOUNDS)
    assert builder.top_players == []


def test_toggle_adds_removes_and_switches_side(builder):
    p1 = builder.find_player(1)
    builder.toggle_player_prop(p1, StatCategory.POINTS, OverUnder.OVER)
    assert builder.selected_prop_ids == {"1-points-over"}
    assert builder.is_player_selected(p1)

    builder.toggle_player_prop(p1, StatCategory.POINTS, OverUnder.UNDER)
    assert builder.selected_prop_ids == {"1-points-under"}
    assert builder.selected_props[0].line == pytest.approx(29.5)

    builder.toggle_player_prop(p1, StatCategory.POINTS, OverUnder.UNDER)
    assert builder.selected_props == []
    assert not builder.is_player_selected(p1)


def test_toggle_enforces_leg_limit(builder):
    for player_id in (1, 2, 3):
        builder.toggle_player_prop(builder.find_player(player_id), StatCategory.POINTS, OverUnder.OVER)
    with pytest.raises(SelectionLimitError):
        builder.toggle_player_prop(builder.find_player(4), StatCategory.POINTS, OverUnder.OVER)
    # switching a side on a full slip is still allowed
    builder.toggle_player_prop(builder.find_player(3), StatCategory.POINTS, OverUnder.UNDER)
    assert "3-points-under" in builder.selected_prop_ids


def test_toggle_rejects_unpriced_prop(builder):
    with pytest.raises(PropUnavailableError):
        builder.toggle_player_prop(builder.find_player(1), StatCategory.THREES, OverUnder.OVER)


def test_remove_and_clear_selection(builder):
    builder.toggle_player_prop(builder.find_player(1), StatCategory.POINTS, OverUnder.OVER)
    builder.toggle_player_prop(builder.find_player(2), StatCategory.ASSISTS, OverUnder.OVER)
    prop_id = builder.selected_props[0].id
    assert builder.remove_prop(prop_id)
    assert not builder.remove_prop(prop_id)
    assert builder.selected_prop_ids == {"2-assists-over"}
    builder.clear_selection()
    assert builder.selected_props == []


def test_add_current_selection_requires_full_slip(builder):
    builder.toggle_player_prop(builder.find_player(1), StatCategory.POINTS, OverUnder.OVER)
    with pytest.raises(IncompleteParlayError):
        builder.add_current_selection_to_parlays()


def test_add_current_selection_saves_sorted_and_dedupes(builder):
    def fill(side: OverUnder):
        for player_id in (1, 2, 3):
            builder.toggle_player_prop(builder.find_player(player_id), StatCategory.POINTS, side)

    fill(OverUnder.UNDER)
    first = builder.add_current_selection_to_parlays()
    assert builder.selected_props == []
    assert first.combined_probability == pytest.approx(0.4 ** 3)

    fill(OverUnder.OVER)
    second = builder.add_current_selection_to_parlays()
    assert second.id != first.id
    assert [p.id for p in builder.saved_parlays] == [second.id, first.id]

    fill(OverUnder.OVER)
    again = builder.add_current_selection_to_parlays()
    assert again is second
    assert len(builder.saved_parlays) == 2


def test_generate_all_combinations_from_category_leaders():
    b = PropsBuilder()
    b.set_players([_player(i, 10.0 + i) for i in range(1, 5)])
    assert len(b.available_props()) == 8
    parlays = b.generate_all_combinations()
    assert len(parlays) == 32
    assert parlays[0].combined_probability == pytest.approx(0.6 ** 3)
    assert b.generated_parlays == parlays
    assert len(b.generate_all_combinations(limit=5)) == 5


def test_snapshot(builder):
    state = builder.snapshot()
    assert state["players_loaded"] == 4
    assert state["selected_category"] == "points"
    assert state["selected_count"] == 0


def test_toggle_removes_selection_after_its_pricing_disappears(builder):
    builder.toggle_player_prop(builder.find_player(1), StatCategory.POINTS, OverUnder.OVER)
    unpriced = PlayerPropData(1, "Player 1", "P. 1", 30.0, None, None, None, 10)
    builder.set_players([unpriced])

    assert builder.toggle_player_prop(unpriced, StatCategory.POINTS, OverUnder.OVER) == []
    with pytest.raises(PropUnavailableError):
        builder.toggle_player_prop(unpriced, StatCategory.POINTS, OverUnder.UNDER)
