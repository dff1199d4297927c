from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from parlay_picker.core.config import settings
from parlay_picker.core.errors import IncompleteParlayError
from parlay_picker.modeling.odds import (
    american_odds_to_probability,
    combined_probability,
    format_american_odds,
    format_probability,
    payout,
    probability_to_american_odds,
)
from parlay_picker.services.builder import props_builder

router = APIRouter()


class PriceLeg(BaseModel):
    label: str | None = None
    probability: float | None = None
    odds: int | None = None


class PriceRequest(BaseModel):
    legs: list[PriceLeg] = Field(min_length=1, max_length=12)
    stake: float = Field(default=100.0, gt=0)


def _leg_probability(leg: PriceLeg) -> float:
    if leg.probability is not None:
        return leg.probability
    if leg.odds is not None:
        return american_odds_to_probability(leg.odds)
    raise ValueError(f"Leg {leg.label or '?'} needs a probability or American odds")


@router.get("/parlays", tags=["parlays"])
def list_saved_parlays() -> dict:
    parlays = list(props_builder.saved_parlays)
    return {"count": len(parlays), "parlays": [parlay.to_dict() for parlay in parlays]}


@router.post("/parlays", tags=["parlays"])
def add_current_selection() -> dict:
    try:
        parlay = props_builder.add_current_selection_to_parlays()
    except IncompleteParlayError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return parlay.to_dict()


@router.get("/parlays/generated", tags=["parlays"])
def list_generated_parlays(top: int = Query(50, ge=1, le=5000)) -> dict:
    parlays = list(props_builder.generated_parlays)
    return {"count": len(parlays), "parlays": [parlay.to_dict() for parlay in parlays[:top]]}


@router.post("/parlays/generate", tags=["parlays"])
async def generate_parlays(
    top: int = Query(50, ge=1, le=5000, description="Rows to return; all combinations are kept"),
    min_probability: float = Query(0.0, ge=0.0, le=1.0),
) -> dict:
    if not props_builder.players:
        raise HTTPException(status_code=409, detail="No player stats loaded")
    parlays = await asyncio.to_thread(
        props_builder.generate_all_combinations,
        limit=settings.generated_parlays_limit,
        min_probability=min_probability,
    )
    return {"count": len(parlays), "parlays": [parlay.to_dict() for parlay in parlays[:top]]}


@router.post("/parlays/price", tags=["parlays"])
def price_parlay(req: PriceRequest) -> dict:
    try:
        probabilities = [_leg_probability(leg) for leg in req.legs]
        probability = combined_probability(probabilities)
        odds = probability_to_american_odds(probability)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return {
        "legs": [
            {"label": leg.label, "probability": p, "probability_string": format_probability(p)}
            for leg, p in zip(req.legs, probabilities)
        ],
        "combined_probability": probability,
        "probability_string": format_probability(probability),
        "american_odds": odds,
        "odds_string": format_american_odds(odds),
        "payout": round(payout(req.stake, odds), 2),
    }
