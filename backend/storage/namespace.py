"""Storage namespace protocol for the game catalog.

A namespace is a single named slot holding the whole serialized record
set. Backends only move text in and out; encoding, decoding and
fail-soft handling belong to the GameStore.
"""

from typing import Protocol


class StorageError(Exception):
    """Raised by a namespace when its underlying storage cannot be used."""


class CatalogNamespace(Protocol):
    """Protocol every catalog storage backend implements.

    Implementations:
    - SqliteNamespace: row in the storage_slots table (default)
    - JsonFileNamespace: a JSON file on disk
    - InMemoryNamespace: process memory, for tests and throwaway sessions
    """

    name: str

    async def read(self) -> str | None:
        """Return the slot contents, or None if the slot does not exist."""
        ...

    async def write(self, payload: str) -> None:
        """Replace the slot contents in a single step."""
        ...
