"""SQLite-backed catalog namespace (one row of the storage_slots table)."""

import aiosqlite

from backend.database import get_db
from backend.storage.namespace import StorageError


class SqliteNamespace:
    """Catalog slot stored in the shared aiosqlite connection."""

    def __init__(self, name: str) -> None:
        self.name = name

    async def read(self) -> str | None:
        try:
            db = await get_db()
            cursor = await db.execute(
                "SELECT value FROM storage_slots WHERE key = ?", (self.name,)
            )
            row = await cursor.fetchone()
        except (aiosqlite.Error, RuntimeError) as exc:
            raise StorageError(f"Cannot read slot {self.name!r}: {exc}") from exc
        return row[0] if row else None

    async def write(self, payload: str) -> None:
        try:
            db = await get_db()
            await db.execute(
                """INSERT INTO storage_slots (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = datetime('now')""",
                (self.name, payload),
            )
            await db.commit()
        except (aiosqlite.Error, RuntimeError) as exc:
            raise StorageError(f"Cannot write slot {self.name!r}: {exc}") from exc
