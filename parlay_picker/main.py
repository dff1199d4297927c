import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parlay_picker.api.health import router as health_router
from parlay_picker.api.parlays import router as parlays_router
from parlay_picker.api.players import router as players_router
from parlay_picker.api.selection import router as selection_router
from parlay_picker.clients.logging import set_log_path
from parlay_picker.core.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    set_log_path(settings.collection_log_path)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(players_router, prefix="/api")
app.include_router(selection_router, prefix="/api")
app.include_router(parlays_router, prefix="/api")


@app.get("/", tags=["root"])
def root() -> dict:
    return {"message": "ok"}
