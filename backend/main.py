"""GameVault FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.config import settings

# Configure logging so our INFO messages appear in container logs
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
from fastapi.middleware.cors import CORSMiddleware

from backend.database import close_db, init_db
from backend.routers import games, settings as settings_router
from backend.services.game_store import close_store, init_store
from backend.storage.factory import create_namespace, uses_database

logger = logging.getLogger(__name__)


def _log_catalog_change(action: str, game_id: str) -> None:
    logger.debug("Catalog changed: %s %s", action, game_id)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Startup
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if uses_database():
        await init_db()

    store = init_store(create_namespace())
    store.add_listener(_log_catalog_change)
    logger.info(
        "Catalog storage: %s (slot %r)", settings.storage_backend, store.namespace.name
    )

    yield
    # Shutdown
    close_store()
    if uses_database():
        await close_db()


app = FastAPI(
    title="GameVault",
    description="Personal video game catalog",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: localhost defaults plus any extra origins from GAMEVAULT_CORS_ORIGINS
_cors_origins = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(games.router)
app.include_router(settings_router.router)


# Health check
@app.get("/api/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
