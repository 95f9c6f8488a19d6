"""JSON file catalog namespace.

Writes go to a temporary file in the same directory which then replaces
the target, so readers see either the old or the new catalog, never a
partial one.
"""

import asyncio
import os
import tempfile
from pathlib import Path

from backend.storage.namespace import StorageError


class JsonFileNamespace:
    """Catalog slot stored as a single file on disk."""

    def __init__(self, path: Path, name: str | None = None) -> None:
        self.path = Path(path)
        self.name = name or self.path.stem

    async def read(self) -> str | None:
        # Offload sync file I/O to the thread pool
        return await asyncio.to_thread(self._read_sync)

    async def write(self, payload: str) -> None:
        await asyncio.to_thread(self._write_sync, payload)

    def _read_sync(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc

    def _write_sync(self, payload: str) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc
