from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any
from uuid import uuid4

from parlay_picker.modeling.odds import (
    MISSING_VALUE,
    american_odds_to_probability,
    format_american_odds,
    format_probability,
    probability_to_american_odds,
)

LINE_OFFSET = 0.5


class StatCategory(str, Enum):
    POINTS = "points"
    THREES = "threes"
    ASSISTS = "assists"
    REBOUNDS = "rebounds"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def suffix(self) -> str:
        return _SUFFIXES[self]

    @property
    def stat_key(self) -> str:
        return _STAT_KEYS[self]


_DISPLAY_NAMES = {
    StatCategory.POINTS: "Points",
    StatCategory.THREES: "3-Pointers",
    StatCategory.ASSISTS: "Assists",
    StatCategory.REBOUNDS: "Rebounds",
}
_SUFFIXES = {
    StatCategory.POINTS: "p",
    StatCategory.THREES: "3",
    StatCategory.ASSISTS: "a",
    StatCategory.REBOUNDS: "r",
}
_STAT_KEYS = {
    StatCategory.POINTS: "PTS",
    StatCategory.THREES: "FG3M",
    StatCategory.ASSISTS: "AST",
    StatCategory.REBOUNDS: "REB",
}


class OverUnder(str, Enum):
    OVER = "O"
    UNDER = "U"

    @property
    def label(self) -> str:
        return "over" if self is OverUnder.OVER else "under"

    @classmethod
    def parse(cls, raw: str) -> "OverUnder":
        normalized = (raw or "").strip().lower()
        if normalized in {"o", "over"}:
            return cls.OVER
        if normalized in {"u", "under"}:
            return cls.UNDER
        raise ValueError(f"Invalid side: {raw!r}")


@dataclass(frozen=True)
class PlayerGameLog:
    player_id: str | None
    player_name: str | None
    game_date: date | None
    stats: dict[str, Any]


@dataclass(frozen=True)
class PropOdds:
    over_odds: int | None = None
    under_odds: int | None = None
    over_prob: float | None = None
    under_prob: float | None = None

    @classmethod
    def from_american(cls, over_odds: int | None, under_odds: int | None) -> "PropOdds":
        return cls(
            over_odds=over_odds,
            under_odds=under_odds,
            over_prob=american_odds_to_probability(over_odds) if over_odds is not None else None,
            under_prob=american_odds_to_probability(under_odds) if under_odds is not None else None,
        )

    @classmethod
    def from_probabilities(cls, over_prob: float | None, under_prob: float | None) -> "PropOdds":
        return cls(
            over_odds=probability_to_american_odds(over_prob) if over_prob is not None else None,
            under_odds=probability_to_american_odds(under_prob) if under_prob is not None else None,
            over_prob=over_prob,
            under_prob=under_prob,
        )

    def odds_for(self, side: OverUnder) -> int | None:
        odds = self.over_odds if side is OverUnder.OVER else self.under_odds
        if odds is None:
            prob = self.over_prob if side is OverUnder.OVER else self.under_prob
            if prob is not None and 0.0 < prob < 1.0:
                return probability_to_american_odds(prob)
        return odds

    def probability_for(self, side: OverUnder) -> float | None:
        prob = self.over_prob if side is OverUnder.OVER else self.under_prob
        if prob is None:
            odds = self.over_odds if side is OverUnder.OVER else self.under_odds
            if odds is not None:
                return american_odds_to_probability(odds)
        return prob


@dataclass(frozen=True)
class PlayerPropData:
    player_id: int
    full_name: str
    abbreviation: str
    points_median: float | None
    threes_median: float | None
    assists_median: float | None
    rebounds_median: float | None
    games_played: int
    odds: dict[StatCategory, PropOdds] = field(default_factory=dict)

    def value(self, category: StatCategory) -> float | None:
        if category is StatCategory.POINTS:
            return self.points_median
        if category is StatCategory.THREES:
            return self.threes_median
        if category is StatCategory.ASSISTS:
            return self.assists_median
        return self.rebounds_median

    def median_value(self, category: StatCategory) -> str:
        value = self.value(category)
        if value is None:
            return MISSING_VALUE
        return f"{value:.1f}"

    def line(self, category: StatCategory, side: OverUnder) -> float | None:
        value = self.value(category)
        if value is None:
            return None
        return value + LINE_OFFSET if side is OverUnder.OVER else value - LINE_OFFSET

    def over_line(self, category: StatCategory) -> str:
        line = self.line(category, OverUnder.OVER)
        return MISSING_VALUE if line is None else f"O{line:.1f}"

    def under_line(self, category: StatCategory) -> str:
        line = self.line(category, OverUnder.UNDER)
        return MISSING_VALUE if line is None else f"U{line:.1f}"

    def prop_odds(self, category: StatCategory) -> PropOdds:
        return self.odds.get(category) or PropOdds()

    def over_odds(self, category: StatCategory) -> int | None:
        return self.prop_odds(category).odds_for(OverUnder.OVER)

    def under_odds(self, category: StatCategory) -> int | None:
        return self.prop_odds(category).odds_for(OverUnder.UNDER)

    def over_prob(self, category: StatCategory) -> float | None:
        return self.prop_odds(category).probability_for(OverUnder.OVER)

    def under_prob(self, category: StatCategory) -> float | None:
        return self.prop_odds(category).probability_for(OverUnder.UNDER)


@dataclass(eq=False)
class SelectedPlayerProp:
    player_id: int
    player_name: str
    abbreviation: str
    category: StatCategory
    line: float
    over_under: OverUnder
    probability: float
    odds: int
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def shorthand(self) -> str:
        return f"{self.abbreviation} {self.over_under.value}{self.line:.1f}{self.category.suffix}"

    @property
    def selection_key(self) -> str:
        return f"{self.player_id}-{self.category.value}-{self.over_under.label}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectedPlayerProp):
            return NotImplemented
        return (
            self.player_id == other.player_id
            and self.category == other.category
            and self.over_under == other.over_under
        )

    def __hash__(self) -> int:
        return hash((self.player_id, self.category, self.over_under))

    def is_same_player_and_category(self, other: "SelectedPlayerProp") -> bool:
        return self.player_id == other.player_id and self.category == other.category

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "player_id": self.player_id,
            "player_name": self.player_name,
            "abbreviation": self.abbreviation,
            "category": self.category.value,
            "line": self.line,
            "over_under": self.over_under.value,
            "probability": self.probability,
            "odds": self.odds,
            "shorthand": self.shorthand,
            "odds_string": format_american_odds(self.odds),
            "probability_string": format_probability(self.probability),
        }


@dataclass(frozen=True)
class ParlayLeg:
    player_id: int
    shorthand: str
    category: StatCategory
    line: float
    over_under: OverUnder
    probability: float
    id: str = field(default_factory=lambda: str(uuid4()), compare=False)

    @classmethod
    def from_selection(cls, prop: SelectedPlayerProp) -> "ParlayLeg":
        return cls(
            player_id=prop.player_id,
            shorthand=prop.shorthand,
            category=prop.category,
            line=prop.line,
            over_under=prop.over_under,
            probability=prop.probability,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "player_id": self.player_id,
            "shorthand": self.shorthand,
            "category": self.category.value,
            "line": self.line,
            "over_under": self.over_under.value,
            "probability": self.probability,
            "probability_string": format_probability(self.probability),
        }


@dataclass(frozen=True)
class GeneratedParlay:
    id: int
    legs: tuple[ParlayLeg, ...]
    combined_probability: float

    @property
    def probability_string(self) -> str:
        return format_probability(self.combined_probability)

    @property
    def american_odds(self) -> int:
        return probability_to_american_odds(self.combined_probability)

    @property
    def odds_string(self) -> str:
        return format_american_odds(self.american_odds)

    def leg_keys(self) -> frozenset[tuple[int, StatCategory, OverUnder]]:
        return frozenset((leg.player_id, leg.category, leg.over_under) for leg in self.legs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "legs": [leg.to_dict() for leg in self.legs],
            "combined_probability": self.combined_probability,
            "probability_string": self.probability_string,
            "american_odds": self.american_odds,
            "odds_string": self.odds_string,
        }
