from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from parlay_picker.core.errors import PropUnavailableError, SelectionLimitError
from parlay_picker.modeling.stat_mappings import parse_category
from parlay_picker.modeling.types import OverUnder
from parlay_picker.services.builder import props_builder

router = APIRouter()


class ToggleRequest(BaseModel):
    player_id: int
    category: str | None = None
    over_under: str


def _selection_payload() -> dict:
    props = list(props_builder.selected_props)
    return {
        "count": len(props),
        "max_legs": props_builder.max_legs,
        "remaining": max(0, props_builder.max_legs - len(props)),
        "is_complete": len(props) == props_builder.max_legs,
        "selected": [prop.to_dict() for prop in props],
    }


@router.get("/selection", tags=["selection"])
def get_selection() -> dict:
    return _selection_payload()


@router.post("/selection/toggle", tags=["selection"])
def toggle_selection(req: ToggleRequest) -> dict:
    try:
        category = parse_category(req.category) if req.category else props_builder.selected_category
        side = OverUnder.parse(req.over_under)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    player = props_builder.find_player(req.player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")

    try:
        props_builder.toggle_player_prop(player, category, side)
    except SelectionLimitError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except PropUnavailableError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _selection_payload()


@router.delete("/selection/{prop_id}", tags=["selection"])
def remove_selection(prop_id: str) -> dict:
    if not props_builder.remove_prop(prop_id):
        raise HTTPException(status_code=404, detail="Selection not found")
    return _selection_payload()


@router.delete("/selection", tags=["selection"])
def clear_selection() -> dict:
    props_builder.clear_selection()
    return _selection_payload()
