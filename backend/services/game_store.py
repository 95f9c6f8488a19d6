"""Game catalog store: CRUD and queries over the whole record set.

The catalog is held in a single namespace slot as a JSON array. Every
mutation is a read-modify-write cycle: load the full set, apply one
change, persist the full set back.
"""

import asyncio
import json
import logging
import secrets
import string
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

from pydantic import TypeAdapter, ValidationError

from backend.models.game import GameFormData, GameRecord, GameStatus, Platform
from backend.storage.namespace import CatalogNamespace, StorageError

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9

_records_adapter = TypeAdapter(list[GameRecord])

# Called as listener(action, game_id) after a change has been saved
ChangeListener = Callable[[str, str], None]


@dataclass(frozen=True)
class SaveResult:
    """Outcome of create/update: the record, and whether it reached storage."""

    record: GameRecord
    saved: bool


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of delete. Falsy when no record matched."""

    deleted: bool
    saved: bool = False

    def __bool__(self) -> bool:
        return self.deleted


def utc_now_iso() -> str:
    """Current UTC time as e.g. 2024-01-15T10:00:00.000Z.

    Rounded up to the next millisecond, never earlier than the call.
    """
    now = datetime.now(timezone.utc)
    remainder = now.microsecond % 1000
    if remainder:
        now += timedelta(microseconds=1000 - remainder)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_id(existing_ids: Iterable[str] = ()) -> str:
    """Build a game id from the current time and a random base36 suffix.

    Re-rolls until the id is not in `existing_ids`.
    """
    taken = set(existing_ids)
    while True:
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
        candidate = f"game-{int(time.time() * 1000)}-{suffix}"
        if candidate not in taken:
            return candidate


class GameStore:
    """Sole reader and writer of the catalog namespace."""

    def __init__(self, namespace: CatalogNamespace) -> None:
        self.namespace = namespace
        self._lock = asyncio.Lock()
        self._listeners: list[ChangeListener] = []

    # ── Persistence ──────────────────────────────────────────────────────

    async def load(self) -> list[GameRecord]:
        """Return every stored game, or [] if the slot is missing or unusable."""
        games, _ = await self._read()
        return games

    async def _read(self) -> tuple[list[GameRecord], bool]:
        """Decode the slot. The flag is False when the slot must not be overwritten."""
        try:
            raw = await self.namespace.read()
        except StorageError:
            logger.exception("Error loading games from %s", self.namespace.name)
            return [], False

        if raw is None:
            return [], True

        try:
            records = _records_adapter.validate_json(raw)
        except ValidationError as exc:
            logger.error(
                "Ignoring corrupt catalog in %s (%d problems): %s",
                self.namespace.name,
                exc.error_count(),
                exc.errors(include_url=False)[:3],
            )
            return [], False

        ids = [record.id for record in records]
        if len(set(ids)) != len(ids):
            logger.error("Ignoring catalog in %s: duplicate game ids", self.namespace.name)
            return [], False

        return records, True

    async def persist(self, records: list[GameRecord]) -> bool:
        """Overwrite the slot with `records`. Returns False if the write failed."""
        try:
            payload = json.dumps(
                [
                    record.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for record in records
                ]
            )
            await self.namespace.write(payload)
        except (StorageError, TypeError, ValueError):
            logger.exception("Error saving games to %s", self.namespace.name)
            return False
        return True

    def generate_id(self, existing_ids: Iterable[str] = ()) -> str:
        return generate_id(existing_ids)

    # ── Mutations ────────────────────────────────────────────────────────

    async def create(self, data: GameFormData) -> SaveResult:
        """Add a new game with a fresh id and dateAdded.

        An unreadable slot is left alone: the game is reported as not saved.
        """
        async with self._lock:
            games, writable = await self._read()
            record = GameRecord(
                **data.model_dump(),
                id=self.generate_id(game.id for game in games),
                date_added=utc_now_iso(),
            )
            games.append(record)
            saved = writable and await self.persist(games)

        if saved:
            logger.info("Added game %s (%s)", record.id, record.title)
            self._notify("create", record.id)
        else:
            logger.warning("Game %s was created but could not be saved", record.id)
        return SaveResult(record=record, saved=saved)

    async def update(self, game_id: str, data: GameFormData) -> SaveResult | None:
        """Replace every field of a game except id and dateAdded.

        Returns None if no game has `game_id`; nothing is written then.
        """
        async with self._lock:
            games = await self.load()
            index = next((i for i, game in enumerate(games) if game.id == game_id), None)
            if index is None:
                return None

            record = GameRecord(
                **data.model_dump(),
                id=game_id,
                date_added=games[index].date_added,
            )
            games[index] = record
            saved = await self.persist(games)

        if saved:
            logger.info("Updated game %s", game_id)
            self._notify("update", game_id)
        else:
            logger.warning("Game %s was updated but could not be saved", game_id)
        return SaveResult(record=record, saved=saved)

    async def delete(self, game_id: str) -> DeleteResult:
        """Remove a game. Nothing is written when no game matches."""
        async with self._lock:
            games = await self.load()
            remaining = [game for game in games if game.id != game_id]
            if len(remaining) == len(games):
                return DeleteResult(deleted=False)
            saved = await self.persist(remaining)

        if saved:
            logger.info("Deleted game %s", game_id)
            self._notify("delete", game_id)
        else:
            logger.warning("Game %s was removed but the change could not be saved", game_id)
        return DeleteResult(deleted=True, saved=saved)

    # ── Queries ──────────────────────────────────────────────────────────

    async def get_one(self, game_id: str) -> GameRecord | None:
        games = await self.load()
        return next((game for game in games if game.id == game_id), None)

    async def filter_by_status(self, status: GameStatus | str) -> list[GameRecord]:
        status = GameStatus(status)
        return [game for game in await self.load() if game.status == status]

    async def filter_by_platform(self, platform: Platform | str) -> list[GameRecord]:
        platform = Platform(platform)
        return [game for game in await self.load() if game.platform == platform]

    async def search(self, query: str) -> list[GameRecord]:
        """Games whose title, developer or genre contains `query` (any case)."""
        return [game for game in await self.load() if matches_text(game, query)]

    async def query(
        self,
        search: str | None = None,
        status: GameStatus | str | None = None,
        platform: Platform | str | None = None,
    ) -> list[GameRecord]:
        """Table-view filter: every criterion given must match. None means all."""
        return filter_games(await self.load(), search=search, status=status, platform=platform)

    # ── Change notification ──────────────────────────────────────────────

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, action: str, game_id: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(action, game_id)
            except Exception:
                logger.exception("Catalog listener %r failed on %s %s", listener, action, game_id)


def matches_text(game: GameRecord, query: str) -> bool:
    needle = query.lower()
    return (
        needle in game.title.lower()
        or needle in game.developer.lower()
        or needle in game.genre.lower()
    )


def filter_games(
    games: Iterable[GameRecord],
    search: str | None = None,
    status: GameStatus | str | None = None,
    platform: Platform | str | None = None,
) -> list[GameRecord]:
    status = GameStatus(status) if status is not None else None
    platform = Platform(platform) if platform is not None else None

    results = []
    for game in games:
        if search and not matches_text(game, search):
            continue
        if status is not None and game.status != status:
            continue
        if platform is not None and game.platform != platform:
            continue
        results.append(game)
    return results


# ── Application-wide store ───────────────────────────────────────────────

_store: GameStore | None = None


async def get_store() -> GameStore:
    """Get the catalog store. Raises if not initialized."""
    if _store is None:
        raise RuntimeError("Game store not initialized. Call init_store() first.")
    return _store


def init_store(namespace: CatalogNamespace) -> GameStore:
    """Install the application-wide store on top of `namespace`."""
    global _store
    _store = GameStore(namespace)
    return _store


def close_store() -> None:
    global _store
    _store = None
