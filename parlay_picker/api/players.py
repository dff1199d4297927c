from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from parlay_picker.core.config import settings
from parlay_picker.modeling.medians import top_players
from parlay_picker.modeling.stat_mappings import parse_category
from parlay_picker.modeling.types import StatCategory
from parlay_picker.services.builder import props_builder
from parlay_picker.services.providers import get_stats_provider
from parlay_picker.services.rendering import player_row

router = APIRouter()


def _parse_category(raw: str | None) -> StatCategory | None:
    if raw is None:
        return None
    try:
        return parse_category(raw)
    except ValueError as exc:
        valid = [category.value for category in StatCategory]
        raise HTTPException(status_code=400, detail=f"{exc}. Valid: {valid}")


def _categories_payload() -> dict:
    return {
        "selected": props_builder.selected_category.value,
        "categories": [
            {"value": category.value, "display_name": category.display_name, "suffix": category.suffix}
            for category in StatCategory
        ],
    }


@router.get("/categories", tags=["players"])
def list_categories() -> dict:
    return _categories_payload()


class CategoryRequest(BaseModel):
    category: str


@router.post("/categories", tags=["players"])
def select_category(req: CategoryRequest) -> dict:
    props_builder.set_category(_parse_category(req.category))
    return _categories_payload()


@router.post("/players/refresh", tags=["players"])
async def refresh_players() -> dict:
    try:
        provider = get_stats_provider(settings)
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    loaded = await asyncio.to_thread(props_builder.load_player_stats, provider)
    if not loaded:
        raise HTTPException(status_code=503, detail=props_builder.error_message)
    return {"source": provider.name, "players_loaded": len(props_builder.players)}


@router.get("/players", tags=["players"])
def get_players(
    category: str | None = Query(None, description="points, threes, assists or rebounds"),
    top: int | None = Query(None, ge=1, le=100),
) -> dict:
    """Top players for ``category`` (default: the selected one). Read-only; use POST /categories to switch."""
    active = _parse_category(category) or props_builder.selected_category
    limit = top or props_builder.top_players_limit
    players = top_players(props_builder.players, active, limit)
    selected_ids = props_builder.selected_prop_ids
    return {
        "category": active.value,
        "display_name": active.display_name,
        "count": len(players),
        "players": [player_row(player, active, selected_ids) for player in players],
    }
