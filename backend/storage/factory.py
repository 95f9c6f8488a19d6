"""Build the catalog namespace selected in settings."""

from backend.config import settings
from backend.storage.json_file import JsonFileNamespace
from backend.storage.memory import InMemoryNamespace
from backend.storage.namespace import CatalogNamespace
from backend.storage.sqlite import SqliteNamespace

STORAGE_BACKENDS = ("sqlite", "json", "memory")


def create_namespace(backend: str | None = None) -> CatalogNamespace:
    """Return a namespace for `backend` (defaults to settings.storage_backend)."""
    backend = (backend or settings.storage_backend).lower()
    if backend == "sqlite":
        return SqliteNamespace(settings.storage_key)
    if backend == "json":
        return JsonFileNamespace(settings.catalog_path, name=settings.storage_key)
    if backend == "memory":
        return InMemoryNamespace(settings.storage_key)
    raise ValueError(
        f"Unknown storage backend {backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}"
    )


def uses_database(backend: str | None = None) -> bool:
    """Whether the backend needs init_db()/close_db() around its use."""
    return (backend or settings.storage_backend).lower() == "sqlite"
