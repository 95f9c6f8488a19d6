"""Game catalog routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from backend.models.game import (
    GameListResponse,
    GameRecord,
    GameStats,
    GameStatus,
    Platform,
)
from backend.services.game_store import GameStore, filter_games, get_store
from backend.services.stats_service import compute_stats
from backend.services.validation import FormValidationError, validate_game_form

router = APIRouter(prefix="/api/games", tags=["games"])

NOT_SAVED_DETAIL = "The change could not be saved to storage"


def _validate(data: dict[str, Any]):
    try:
        return validate_game_form(data)
    except FormValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict())


@router.get("", response_model=GameListResponse)
async def list_games(
    q: str | None = None,
    status: GameStatus | None = None,
    platform: Platform | None = None,
    store: GameStore = Depends(get_store),
):
    """List games, optionally filtered by text, status and platform."""
    all_games = await store.load()
    games = filter_games(all_games, search=q, status=status, platform=platform)
    return {"games": games, "total": len(all_games), "count": len(games)}


@router.post("", response_model=GameRecord, status_code=201)
async def create_game(
    data: dict[str, Any] = Body(...),
    store: GameStore = Depends(get_store),
):
    """Add a game to the catalog."""
    form = _validate(data)
    result = await store.create(form)
    if not result.saved:
        raise HTTPException(status_code=503, detail=NOT_SAVED_DETAIL)
    return result.record


# ── Static path routes (must come BEFORE /{game_id} to avoid conflicts) ─────

@router.get("/stats", response_model=GameStats)
async def get_stats(store: GameStore = Depends(get_store)):
    """Totals per status and the average rating."""
    return compute_stats(await store.load())


# ── Dynamic path routes (/{game_id}) ────────────────────────────────────────

@router.get("/{game_id}", response_model=GameRecord)
async def get_game(game_id: str, store: GameStore = Depends(get_store)):
    """Get game details."""
    game = await store.get_one(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


@router.put("/{game_id}", response_model=GameRecord)
async def update_game(
    game_id: str,
    data: dict[str, Any] = Body(...),
    store: GameStore = Depends(get_store),
):
    """Replace a game's details. id and dateAdded never change."""
    form = _validate(data)
    result = await store.update(game_id, form)
    if result is None:
        raise HTTPException(status_code=404, detail="Game not found")
    if not result.saved:
        raise HTTPException(status_code=503, detail=NOT_SAVED_DETAIL)
    return result.record


@router.delete("/{game_id}")
async def delete_game(game_id: str, store: GameStore = Depends(get_store)):
    """Remove a game from the catalog."""
    result = await store.delete(game_id)
    if not result:
        raise HTTPException(status_code=404, detail="Game not found")
    if not result.saved:
        raise HTTPException(status_code=503, detail=NOT_SAVED_DETAIL)
    return {"message": "Game deleted"}
