"""Initial database schema.

The catalog lives in named storage slots: one row per slot, the value
being the whole serialized record set.
"""

import aiosqlite


async def upgrade(db: aiosqlite.Connection) -> None:
    """Create the storage slot table."""
    await db.execute("""
        CREATE TABLE storage_slots (
            key         TEXT PRIMARY KEY,
            value       TEXT NOT NULL,
            updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)
