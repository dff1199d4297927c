from __future__ import annotations

import logging
import threading
import time
from typing import Any

from parlay_picker.clients.logging import log_parlays_generated, log_stats_loaded
from parlay_picker.core.config import settings
from parlay_picker.core.errors import (
    IncompleteParlayError,
    SelectionLimitError,
)
from parlay_picker.modeling.combinations import (
    build_candidate_pool,
    generate_combinations,
    make_selection,
    price_legs,
)
from parlay_picker.modeling.medians import top_players
from parlay_picker.modeling.types import (
    GeneratedParlay,
    OverUnder,
    PlayerPropData,
    SelectedPlayerProp,
    StatCategory,
)
from parlay_picker.services.providers import StatsProvider

logger = logging.getLogger(__name__)


class PropsBuilder:
    """Selection state for building three-leg player prop parlays.

    Holds the loaded players, the category filter, the current selection and
    both parlay lists: ones saved from a full selection and ones produced by
    exhaustive generation.
    """

    def __init__(
        self,
        *,
        max_legs: int = 3,
        top_players_limit: int = 10,
    ) -> None:
        self.max_legs = max_legs
        self.top_players_limit = top_players_limit
        self.players: list[PlayerPropData] = []
        self.selected_category = StatCategory.POINTS
        self.top_players: list[PlayerPropData] = []
        self.selected_props: list[SelectedPlayerProp] = []
        self.saved_parlays: list[GeneratedParlay] = []
        self.generated_parlays: list[GeneratedParlay] = []
        self.is_loading = False
        self.error_message: str | None = None
        self._next_parlay_id = 1
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load_player_stats(self, provider: StatsProvider) -> bool:
        with self._lock:
            self.is_loading = True
            self.error_message = None
        started = time.monotonic()
        try:
            players = provider.fetch_player_stats()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to load player stats from %s", provider.name, exc_info=True)
            log_stats_loaded(
                provider.name,
                players=0,
                elapsed_ms=(time.monotonic() - started) * 1000.0,
                error=str(exc),
            )
            with self._lock:
                self.error_message = f"Failed to load player stats: {exc}"
                self.is_loading = False
            return False

        log_stats_loaded(provider.name, players=len(players), elapsed_ms=(time.monotonic() - started) * 1000.0)
        with self._lock:
            self.players = list(players)
            self.update_top_players()
            self.is_loading = False
        logger.info("Loaded %d players from %s", len(players), provider.name)
        return True

    def set_players(self, players: list[PlayerPropData]) -> None:
        with self._lock:
            self.players = list(players)
            self.error_message = None
            self.update_top_players()

    # ------------------------------------------------------------------
    # Category filter
    # ------------------------------------------------------------------
    def set_category(self, category: StatCategory) -> None:
        with self._lock:
            self.selected_category = category
            self.update_top_players()

    def update_top_players(self) -> None:
        with self._lock:
            self.top_players = top_players(self.players, self.selected_category, self.top_players_limit)

    def find_player(self, player_id: int) -> PlayerPropData | None:
        with self._lock:
            for player in self.players:
                if player.player_id == player_id:
                    return player
        return None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def toggle_player_prop(
        self,
        player: PlayerPropData,
        category: StatCategory,
        over_under: OverUnder,
    ) -> list[SelectedPlayerProp]:
        with self._lock:
            # removing an existing leg must work even if its line has since disappeared
            for idx, existing in enumerate(self.selected_props):
                if (existing.player_id, existing.category, existing.over_under) == (
                    player.player_id,
                    category,
                    over_under,
                ):
                    del self.selected_props[idx]
                    return list(self.selected_props)
            candidate = make_selection(player, category, over_under)
            for idx, existing in enumerate(self.selected_props):
                if existing.is_same_player_and_category(candidate):
                    self.selected_props[idx] = candidate
                    return list(self.selected_props)
            if len(self.selected_props) >= self.max_legs:
                raise SelectionLimitError(f"A parlay holds at most {self.max_legs} legs")
            self.selected_props.append(candidate)
            return list(self.selected_props)

    def is_player_selected(self, player: PlayerPropData, category: StatCategory | None = None) -> bool:
        with self._lock:
            return any(
                prop.player_id == player.player_id and (category is None or prop.category == category)
                for prop in self.selected_props
            )

    @property
    def selected_prop_ids(self) -> set[str]:
        with self._lock:
            return {prop.selection_key for prop in self.selected_props}

    def remove_prop(self, prop: SelectedPlayerProp | str) -> bool:
        with self._lock:
            for idx, existing in enumerate(self.selected_props):
                matched = existing.id == prop if isinstance(prop, str) else existing == prop
                if matched:
                    del self.selected_props[idx]
                    return True
        return False

    def clear_selection(self) -> None:
        with self._lock:
            self.selected_props.clear()

    # ------------------------------------------------------------------
    # Parlays
    # ------------------------------------------------------------------
    def add_current_selection_to_parlays(self) -> GeneratedParlay:
        with self._lock:
            if len(self.selected_props) != self.max_legs:
                raise IncompleteParlayError(
                    f"Select exactly {self.max_legs} legs (have {len(self.selected_props)})"
                )
            parlay = price_legs(self.selected_props, parlay_id=self._next_parlay_id)
            for saved in self.saved_parlays:
                if saved.leg_keys() == parlay.leg_keys():
                    self.selected_props.clear()
                    return saved
            self._next_parlay_id += 1
            self.saved_parlays.append(parlay)
            self.saved_parlays.sort(key=lambda item: item.combined_probability, reverse=True)
            self.selected_props.clear()
            return parlay

    def available_props(self) -> list[SelectedPlayerProp]:
        with self._lock:
            pool: list[SelectedPlayerProp] = []
            for category in StatCategory:
                leaders = top_players(self.players, category, self.top_players_limit)
                pool.extend(build_candidate_pool(leaders, categories=[category]))
            return pool

    def generate_all_combinations(
        self,
        *,
        limit: int | None = None,
        min_probability: float = 0.0,
    ) -> list[GeneratedParlay]:
        with self._lock:
            started = time.monotonic()
            candidates = self.available_props()
            self.generated_parlays = generate_combinations(
                candidates,
                self.max_legs,
                min_probability=min_probability,
                limit=limit,
            )
            log_parlays_generated(
                candidates=len(candidates),
                combinations=len(self.generated_parlays),
                elapsed_ms=(time.monotonic() - started) * 1000.0,
            )
            logger.info(
                "Generated %d parlays from %d candidates",
                len(self.generated_parlays),
                len(candidates),
            )
            return list(self.generated_parlays)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "players_loaded": len(self.players),
                "selected_category": self.selected_category.value,
                "selected_count": len(self.selected_props),
                "saved_parlays": len(self.saved_parlays),
                "generated_parlays": len(self.generated_parlays),
                "is_loading": self.is_loading,
                "error_message": self.error_message,
            }


props_builder = PropsBuilder(
    max_legs=settings.max_legs,
    top_players_limit=settings.top_players_limit,
)
