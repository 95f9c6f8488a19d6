"""Application settings routes."""

from fastapi import APIRouter, Depends

from backend.config import settings
from backend.services.game_store import GameStore, get_store

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("")
async def get_settings(store: GameStore = Depends(get_store)):
    """Describe where the catalog is stored."""
    games = await store.load()

    location = None
    if settings.storage_backend == "sqlite":
        location = str(settings.db_path)
    elif settings.storage_backend == "json":
        location = str(settings.catalog_path)

    return {
        "storage_backend": settings.storage_backend,
        "storage_key": store.namespace.name,
        "storage_location": location,
        "data_dir": str(settings.data_dir),
        "game_count": len(games),
    }


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
