"""
GameVault command-line client: manage the catalog from a terminal.

Works directly against the configured storage (same settings as the
server), so it can be used with or without the API running.

Usage:
    gamevault list [--search TEXT] [--status STATUS] [--platform PLATFORM]
    gamevault add --title "Portal" --platform PC --genre Puzzle --year 2007 --developer Valve
    gamevault edit GAME_ID --status Completed --rating 9
    gamevault edit GAME_ID --clear rating --clear notes
    gamevault delete GAME_ID [--yes]
    gamevault show GAME_ID
    gamevault stats
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Sequence

from backend.config import settings
from backend.database import close_db, init_db
from backend.models.game import GameRecord, GameStats, GameStatus, Platform
from backend.services.game_store import GameStore, filter_games
from backend.services.stats_service import compute_stats
from backend.services.validation import FormValidationError, validate_game_form
from backend.storage.factory import STORAGE_BACKENDS, create_namespace, uses_database

logger = logging.getLogger("gamevault")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NOT_SAVED = 2
EXIT_NOT_FOUND = 3

# argparse dest -> stored field name
_FORM_OPTIONS = {
    "title": "title",
    "platform": "platform",
    "genre": "genre",
    "year": "releaseYear",
    "developer": "developer",
    "status": "status",
    "rating": "rating",
    "playtime": "playtimeHours",
    "completion": "completionPercentage",
    "notes": "notes",
}

# Optional options `edit --clear` can remove
_CLEARABLE = ("rating", "playtime", "completion", "notes")

_COLUMNS = ("ID", "Title", "Platform", "Year", "Developer", "Genre", "Status", "Rating", "Done")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def format_rating(rating: int | None) -> str:
    """Five stars, one per two rating points, e.g. ``★★★★☆ (8/10)``."""
    if not rating:
        return "No rating"
    filled = rating // 2
    return "★" * filled + "☆" * (5 - filled) + f" ({rating}/10)"


def format_number(value: float | None, suffix: str = "") -> str:
    if value is None:
        return "-"
    text = f"{value:g}"
    return f"{text}{suffix}"


def _row(game: GameRecord) -> tuple[str, ...]:
    return (
        game.id,
        game.title,
        game.platform.value,
        str(game.release_year),
        game.developer,
        game.genre,
        game.status.value,
        format_rating(game.rating),
        format_number(game.completion_percentage, "%"),
    )


def render_table(games: Sequence[GameRecord], total: int | None = None) -> str:
    """Render games as a fixed-width text table with an "n of m" footer."""
    total = len(games) if total is None else total
    if total == 0:
        return "No games yet. Start building your collection with `gamevault add`."

    rows = [_row(game) for game in games]
    widths = [len(col) for col in _COLUMNS]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def line(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(w) for cell, w in zip(cells, widths)).rstrip()

    out = [line(_COLUMNS), line(["-" * w for w in widths])]
    if rows:
        out.extend(line(row) for row in rows)
    else:
        out.append("No games match the current filters.")
    out.append("")
    out.append(f"{len(games)} of {total} games")
    return "\n".join(out)


def render_game(game: GameRecord) -> str:
    fields = [
        ("ID", game.id),
        ("Title", game.title),
        ("Platform", game.platform.value),
        ("Genre", game.genre),
        ("Release year", str(game.release_year)),
        ("Developer", game.developer),
        ("Status", game.status.value),
        ("Rating", format_rating(game.rating)),
        ("Playtime", format_number(game.playtime_hours, " h")),
        ("Completion", format_number(game.completion_percentage, "%")),
        ("Added", game.date_added),
        ("Notes", game.notes or "-"),
    ]
    width = max(len(label) for label, _ in fields)
    return "\n".join(f"{label.ljust(width)}  {value}" for label, value in fields)


def render_stats(stats: GameStats) -> str:
    lines = [f"Total games: {stats.total}"]
    for status, count in stats.by_status.items():
        lines.append(f"  {status}: {count}")
    if stats.rated:
        lines.append(f"Average rating: {stats.average_rating}/10 ({stats.rated} rated)")
    else:
        lines.append("Average rating: -")
    return "\n".join(lines)


def _print_errors(exc: FormValidationError) -> None:
    print("Invalid game data:", file=sys.stderr)
    for field, message in exc.errors.items():
        print(f"  {field}: {message}", file=sys.stderr)


def _form_values(args: argparse.Namespace) -> dict[str, Any]:
    """Collect the form options the user actually passed."""
    values = {}
    for dest, field in _FORM_OPTIONS.items():
        value = getattr(args, dest, None)
        if value is not None:
            values[field] = value
    return values


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

async def cmd_list(store: GameStore, args: argparse.Namespace) -> int:
    all_games = await store.load()
    games = filter_games(all_games, search=args.search, status=args.status, platform=args.platform)
    print(render_table(games, total=len(all_games)))
    return EXIT_OK


async def cmd_show(store: GameStore, args: argparse.Namespace) -> int:
    game = await store.get_one(args.game_id)
    if game is None:
        print(f"Game not found: {args.game_id}", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(render_game(game))
    return EXIT_OK


async def cmd_add(store: GameStore, args: argparse.Namespace) -> int:
    try:
        form = validate_game_form(_form_values(args))
    except FormValidationError as exc:
        _print_errors(exc)
        return EXIT_INVALID

    result = await store.create(form)
    if not result.saved:
        print("An error occurred while saving the game.", file=sys.stderr)
        return EXIT_NOT_SAVED
    print(f'Game added successfully! "{result.record.title}" ({result.record.id})')
    return EXIT_OK


async def cmd_edit(store: GameStore, args: argparse.Namespace) -> int:
    game = await store.get_one(args.game_id)
    if game is None:
        print(f"Game not found: {args.game_id}", file=sys.stderr)
        return EXIT_NOT_FOUND

    data = game.model_dump(
        mode="json", by_alias=True, exclude_none=True, exclude={"id", "date_added"}
    )
    for dest in args.clear or ():
        data.pop(_FORM_OPTIONS[dest], None)
    data.update(_form_values(args))
    try:
        form = validate_game_form(data)
    except FormValidationError as exc:
        _print_errors(exc)
        return EXIT_INVALID

    result = await store.update(args.game_id, form)
    if result is None:
        # Removed by someone else between the read and the write
        print(f"Game not found: {args.game_id}", file=sys.stderr)
        return EXIT_NOT_FOUND
    if not result.saved:
        print("An error occurred while saving the game.", file=sys.stderr)
        return EXIT_NOT_SAVED
    print(f'Game updated successfully! "{result.record.title}"')
    return EXIT_OK


async def cmd_delete(store: GameStore, args: argparse.Namespace) -> int:
    game = await store.get_one(args.game_id)
    if game is None:
        print(f"Game not found: {args.game_id}", file=sys.stderr)
        return EXIT_NOT_FOUND

    if not args.yes:
        resp = input(
            f'Are you sure you want to delete "{game.title}"? '
            "This action cannot be undone. [y/N] "
        ).strip().lower()
        if resp != "y":
            print("Cancelled.")
            return EXIT_OK

    result = await store.delete(args.game_id)
    if not result:
        print(f"Game not found: {args.game_id}", file=sys.stderr)
        return EXIT_NOT_FOUND
    if not result.saved:
        print("An error occurred while deleting the game.", file=sys.stderr)
        return EXIT_NOT_SAVED
    print(f'"{game.title}" has been deleted successfully!')
    return EXIT_OK


async def cmd_stats(store: GameStore, args: argparse.Namespace) -> int:
    print(render_stats(compute_stats(await store.load())))
    return EXIT_OK


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "stats": cmd_stats,
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _add_form_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--title")
    parser.add_argument("--platform", help=", ".join(p.value for p in Platform))
    parser.add_argument("--genre")
    parser.add_argument("--year", type=int, help="Release year")
    parser.add_argument("--developer")
    parser.add_argument("--status", help=", ".join(s.value for s in GameStatus))
    parser.add_argument("--rating", type=int, help="1-10")
    parser.add_argument("--playtime", type=float, help="Hours played")
    parser.add_argument("--completion", type=float, help="Completion percentage, 0-100")
    parser.add_argument("--notes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gamevault",
        description="Manage your personal video game catalog.",
    )
    parser.add_argument(
        "--storage",
        choices=STORAGE_BACKENDS,
        default=None,
        help=f"Storage backend (default: {settings.storage_backend})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Show the catalog as a table")
    p_list.add_argument("--search", "-s", help="Match title, developer or genre")
    p_list.add_argument("--status", choices=[s.value for s in GameStatus])
    p_list.add_argument("--platform", choices=[p.value for p in Platform])

    p_show = sub.add_parser("show", help="Show one game")
    p_show.add_argument("game_id")

    p_add = sub.add_parser("add", help="Add a game")
    _add_form_options(p_add)

    p_edit = sub.add_parser("edit", help="Change a game; omitted options keep their value")
    p_edit.add_argument("game_id")
    _add_form_options(p_edit)
    p_edit.add_argument(
        "--clear",
        action="append",
        choices=_CLEARABLE,
        metavar="FIELD",
        help=f"Remove an optional value; repeatable ({', '.join(_CLEARABLE)})",
    )

    p_delete = sub.add_parser("delete", help="Delete a game")
    p_delete.add_argument("game_id")
    p_delete.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("stats", help="Collection statistics")
    return parser


async def run(args: argparse.Namespace) -> int:
    backend = args.storage or settings.storage_backend
    logger.debug("Running %s against %s storage", args.command, backend)
    if uses_database(backend):
        await init_db()
    try:
        store = GameStore(create_namespace(backend))
        return await COMMANDS[args.command](store, args)
    finally:
        if uses_database(backend):
            await close_db()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
