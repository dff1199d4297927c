from __future__ import annotations

from fastapi import APIRouter

from parlay_picker.core.config import settings
from parlay_picker.services.builder import props_builder

router = APIRouter()


@router.get("/health", tags=["health"])
def health() -> dict:
    state = props_builder.snapshot()
    return {
        "status": "degraded" if state["error_message"] else "ok",
        "environment": settings.environment,
        "stats_source": settings.stats_source,
        "players_loaded": state["players_loaded"],
        "last_error": state["error_message"],
    }
