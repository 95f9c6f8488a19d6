"""Tests for the gamevault command-line client."""

import json

import pytest

from backend import cli
from backend.config import settings
from backend.models.game import GameRecord


@pytest.fixture
def catalog_file(tmp_path, monkeypatch):
    path = tmp_path / "games.json"
    monkeypatch.setattr(settings, "catalog_path", path)
    return path


def run(*argv: str) -> int:
    return cli.main(["--storage", "json", *argv])


def add_portal(*extra: str) -> int:
    return run(
        "add", "--title", "Portal", "--platform", "PC", "--genre", "Puzzle",
        "--year", "2007", "--developer", "Valve", *extra,
    )


def stored(path) -> list[dict]:
    return json.loads(path.read_text(encoding="utf-8"))


# ── Commands ─────────────────────────────────────────────────────────────────


class TestAddAndList:
    def test_add(self, catalog_file, capsys):
        assert add_portal("--rating", "9") == cli.EXIT_OK

        games = stored(catalog_file)
        assert len(games) == 1
        assert games[0]["title"] == "Portal"
        assert games[0]["status"] == "New"
        assert games[0]["rating"] == 9
        assert "Game added successfully!" in capsys.readouterr().out

    def test_add_invalid(self, catalog_file, capsys):
        code = run(
            "add", "--title", "Pong", "--platform", "Other", "--genre", "Sports",
            "--year", "1969", "--developer", "Atari",
        )

        assert code == cli.EXIT_INVALID
        assert "releaseYear" in capsys.readouterr().err
        assert not catalog_file.exists()

    def test_list(self, catalog_file, capsys):
        add_portal("--status", "Completed")
        run(
            "add", "--title", "Halo", "--platform", "Xbox", "--genre", "Shooter",
            "--year", "2001", "--developer", "Bungie",
        )
        capsys.readouterr()

        assert run("list") == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "Portal" in out
        assert "Halo" in out
        assert "2 of 2 games" in out

    def test_list_filtered(self, catalog_file, capsys):
        add_portal("--status", "Completed")
        run(
            "add", "--title", "Halo", "--platform", "Xbox", "--genre", "Shooter",
            "--year", "2001", "--developer", "Bungie",
        )
        capsys.readouterr()

        run("list", "--search", "bung")
        out = capsys.readouterr().out
        assert "Halo" in out
        assert "Portal" not in out
        assert "1 of 2 games" in out

        run("list", "--status", "On Hold")
        assert "No games match the current filters." in capsys.readouterr().out

    def test_list_empty(self, catalog_file, capsys):
        run("list")
        assert "No games yet" in capsys.readouterr().out


class TestEditShowDelete:
    def test_edit_keeps_other_fields(self, catalog_file, capsys):
        add_portal("--notes", "First run")
        original = stored(catalog_file)[0]

        assert run("edit", original["id"], "--status", "Completed", "--rating", "10") == cli.EXIT_OK

        updated = stored(catalog_file)[0]
        assert updated["status"] == "Completed"
        assert updated["rating"] == 10
        assert updated["title"] == "Portal"
        assert updated["notes"] == "First run"
        assert updated["id"] == original["id"]
        assert updated["dateAdded"] == original["dateAdded"]

    def test_edit_clears_optional_fields(self, catalog_file):
        add_portal("--rating", "9", "--notes", "First run", "--playtime", "3")
        game_id = stored(catalog_file)[0]["id"]

        assert run("edit", game_id, "--clear", "rating", "--clear", "notes") == cli.EXIT_OK

        updated = stored(catalog_file)[0]
        assert "rating" not in updated
        assert "notes" not in updated
        assert updated["playtimeHours"] == 3
        assert updated["title"] == "Portal"

    def test_edit_clear_then_set(self, catalog_file):
        add_portal("--rating", "9")
        game_id = stored(catalog_file)[0]["id"]

        assert run("edit", game_id, "--clear", "rating", "--rating", "4") == cli.EXIT_OK
        assert stored(catalog_file)[0]["rating"] == 4

    def test_edit_record_outside_form_limits(self, catalog_file, capsys):
        add_portal()
        games = stored(catalog_file)
        games[0]["notes"] = "n" * 501
        catalog_file.write_text(json.dumps(games), encoding="utf-8")
        game_id = games[0]["id"]

        assert run("edit", game_id, "--rating", "8") == cli.EXIT_INVALID
        assert "notes" in capsys.readouterr().err

        assert run("edit", game_id, "--rating", "8", "--clear", "notes") == cli.EXIT_OK
        updated = stored(catalog_file)[0]
        assert updated["rating"] == 8
        assert "notes" not in updated

    def test_clear_rejects_required_fields(self, catalog_file):
        add_portal()
        game_id = stored(catalog_file)[0]["id"]

        with pytest.raises(SystemExit):
            run("edit", game_id, "--clear", "title")
        assert stored(catalog_file)[0]["title"] == "Portal"

    def test_edit_invalid(self, catalog_file, capsys):
        add_portal()
        game_id = stored(catalog_file)[0]["id"]

        assert run("edit", game_id, "--completion", "120") == cli.EXIT_INVALID
        assert "completionPercentage" in capsys.readouterr().err
        assert "completionPercentage" not in stored(catalog_file)[0]

    def test_edit_missing(self, catalog_file):
        assert run("edit", "game-0-missing", "--rating", "5") == cli.EXIT_NOT_FOUND

    def test_show(self, catalog_file, capsys):
        add_portal("--playtime", "4.5")
        game_id = stored(catalog_file)[0]["id"]
        capsys.readouterr()

        assert run("show", game_id) == cli.EXIT_OK
        out = capsys.readouterr().out
        assert game_id in out
        assert "4.5 h" in out
        assert "No rating" in out

    def test_show_missing(self, catalog_file):
        assert run("show", "game-0-missing") == cli.EXIT_NOT_FOUND

    def test_delete_confirmed(self, catalog_file, capsys):
        add_portal()
        game_id = stored(catalog_file)[0]["id"]

        assert run("delete", game_id, "--yes") == cli.EXIT_OK
        assert stored(catalog_file) == []
        assert "has been deleted successfully" in capsys.readouterr().out

    def test_delete_cancelled(self, catalog_file, monkeypatch, capsys):
        add_portal()
        game_id = stored(catalog_file)[0]["id"]
        monkeypatch.setattr("builtins.input", lambda prompt: "n")

        assert run("delete", game_id) == cli.EXIT_OK
        assert len(stored(catalog_file)) == 1
        assert "Cancelled." in capsys.readouterr().out

    def test_delete_missing(self, catalog_file):
        assert run("delete", "game-0-missing", "--yes") == cli.EXIT_NOT_FOUND


class TestStatsAndStorage:
    def test_stats(self, catalog_file, capsys):
        add_portal("--rating", "8", "--status", "Completed")
        add_portal("--rating", "6")
        add_portal()
        capsys.readouterr()

        assert run("stats") == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "Total games: 3" in out
        assert "Completed: 1" in out
        assert "Average rating: 7.0/10 (2 rated)" in out

    def test_unsaved_add(self, tmp_path, monkeypatch, capsys):
        blocker = tmp_path / "blocker"
        blocker.write_text("I am a file")
        monkeypatch.setattr(settings, "catalog_path", blocker / "games.json")

        assert add_portal() == cli.EXIT_NOT_SAVED
        assert "An error occurred while saving the game." in capsys.readouterr().err

    def test_sqlite_storage(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(settings, "db_path", tmp_path / "cli.db")
        code = cli.main([
            "--storage", "sqlite", "add", "--title", "Portal", "--platform", "PC",
            "--genre", "Puzzle", "--year", "2007", "--developer", "Valve",
        ])
        assert code == cli.EXIT_OK
        capsys.readouterr()

        cli.main(["--storage", "sqlite", "list"])
        assert "1 of 1 games" in capsys.readouterr().out


# ── Rendering ────────────────────────────────────────────────────────────────


def _record(**overrides) -> GameRecord:
    data = {
        "id": "game-1-abc",
        "title": "Portal",
        "platform": "PC",
        "genre": "Puzzle",
        "releaseYear": 2007,
        "developer": "Valve",
        "dateAdded": "2024-01-15T10:00:00.000Z",
        **overrides,
    }
    return GameRecord.model_validate(data)


class TestRendering:
    def test_format_rating(self):
        assert cli.format_rating(None) == "No rating"
        assert cli.format_rating(8) == "★★★★☆ (8/10)"
        assert cli.format_rating(1) == "☆☆☆☆☆ (1/10)"
        assert cli.format_rating(10) == "★★★★★ (10/10)"

    def test_format_number(self):
        assert cli.format_number(None) == "-"
        assert cli.format_number(75.0, "%") == "75%"
        assert cli.format_number(12.5, " h") == "12.5 h"

    def test_render_table_columns_line_up(self):
        table = cli.render_table([
            _record(),
            _record(id="game-2-def", title="The Legend of Zelda", completionPercentage=40),
        ])
        lines = table.splitlines()

        assert lines[0].startswith("ID")
        assert lines[1].startswith("---")
        status_col = lines[0].index("Status")
        assert lines[2][status_col:].startswith("New")
        assert lines[3][status_col:].startswith("New")
        assert "40%" in lines[3]
        assert lines[-1] == "2 of 2 games"

    def test_render_table_empty_catalog(self):
        assert "No games yet" in cli.render_table([])
