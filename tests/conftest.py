"""Shared test fixtures for all test modules."""

import os
import tempfile

import pytest

# ── Environment overrides (must be set before importing backend modules) ─────
_tmp = tempfile.mkdtemp(prefix="gv_pytest_")
os.environ["GAMEVAULT_DATA_DIR"] = _tmp
os.environ["GAMEVAULT_DB_PATH"] = os.path.join(_tmp, "test.db")
os.environ["GAMEVAULT_CATALOG_PATH"] = os.path.join(_tmp, "gamevault-games.json")
os.environ["GAMEVAULT_STORAGE_BACKEND"] = "memory"
os.environ["GAMEVAULT_LOG_LEVEL"] = "WARNING"


class FailingNamespace:
    """Namespace whose writes always fail; reads come from `payload`."""

    def __init__(self, payload: str | None = None, fail_reads: bool = False):
        self.name = "failing-slot"
        self.payload = payload
        self.fail_reads = fail_reads
        self.write_attempts = 0

    async def read(self):
        from backend.storage.namespace import StorageError

        if self.fail_reads:
            raise StorageError("storage unavailable")
        return self.payload

    async def write(self, payload):
        from backend.storage.namespace import StorageError

        self.write_attempts += 1
        raise StorageError("quota exceeded")


class CountingNamespace:
    """In-memory namespace that counts writes."""

    def __init__(self):
        self.name = "counting-slot"
        self.payload = None
        self.writes = 0

    async def read(self):
        return self.payload

    async def write(self, payload):
        self.writes += 1
        self.payload = payload


@pytest.fixture
def portal_data():
    """Raw form input for Portal, as a form or API client sends it."""
    return {
        "title": "Portal",
        "platform": "PC",
        "genre": "Puzzle",
        "releaseYear": 2007,
        "developer": "Valve",
        "status": "Completed",
    }


@pytest.fixture
def make_form(portal_data):
    """Build a validated GameFormData from Portal's data plus overrides."""
    from backend.services.validation import validate_game_form

    def _make(**overrides):
        return validate_game_form({**portal_data, **overrides})

    return _make


@pytest.fixture
def store():
    """A GameStore over a fresh in-memory namespace."""
    from backend.services.game_store import GameStore
    from backend.storage.memory import InMemoryNamespace

    return GameStore(InMemoryNamespace())


@pytest.fixture
def counting_store():
    from backend.services.game_store import GameStore

    return GameStore(CountingNamespace())
