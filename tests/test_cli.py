import json

import pytest
from typer.testing import CliRunner

from bookstore.main import app
from bookstore.ui_helpers import OUTPUT_MODE_ENV

runner = CliRunner()


@pytest.fixture
def db_args(tmp_path, monkeypatch):
    # Plain output unless a test asks otherwise
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
    monkeypatch.delenv("BOOKSTORE_DB_FILE", raising=False)
    return ["--db-file", str(tmp_path / "cli.db")]


def test_list_no_books(db_args):
    result = runner.invoke(app, db_args + ["list"])
    assert result.exit_code == 0
    assert "No books in store." in result.stdout


def test_add_and_list(db_args):
    result = runner.invoke(app, db_args + ["add", "--title", "Ulysses", "--author", "James Joyce"])
    assert result.exit_code == 0
    assert "Book added successfully" in result.stdout

    result = runner.invoke(app, db_args + ["list"])
    assert result.exit_code == 0
    assert "1 - Ulysses by James Joyce" in result.stdout


def test_show_json_output(db_args):
    runner.invoke(app, db_args + ["add", "--title", "A", "--author", "B", "--price", "9.5"])
    result = runner.invoke(app, db_args + ["-o", "json", "show", "1"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"id": 1, "title": "A", "author": "B", "price": 9.5, "genre": None}


def test_update_clears_omitted_fields(db_args):
    runner.invoke(app, db_args + ["add", "--title", "A", "--author", "B", "--genre", "Drama"])
    result = runner.invoke(app, db_args + ["update", "1", "--title", "C", "--author", "D"])
    assert result.exit_code == 0
    assert "Book updated successfully" in result.stdout

    result = runner.invoke(app, db_args + ["show", "1"])
    assert "title: C" in result.stdout
    assert "genre: -" in result.stdout


def test_remove_book_not_found(db_args):
    result = runner.invoke(app, db_args + ["remove", "999"])
    assert result.exit_code == 1
    assert "Book with ID: 999 not found" in result.stdout


def test_show_invalid_id(db_args):
    result = runner.invoke(app, db_args + ["show", "abc"])
    assert result.exit_code == 1
    assert "'id' must be a positive integer." in result.stdout


def test_remove_book_success(db_args):
    runner.invoke(app, db_args + ["add", "--title", "To Be Removed", "--author", "Remover"])
    result = runner.invoke(app, db_args + ["remove", "1"])
    assert result.exit_code == 0
    assert "Book successfully deleted" in result.stdout


def test_init_db(db_args, tmp_path):
    result = runner.invoke(app, db_args + ["init-db"])
    assert result.exit_code == 0
    assert (tmp_path / "cli.db").exists()


def test_serve_uses_settings(db_args, monkeypatch):
    calls = {}

    def fake_run(target, **kwargs):
        calls["target"] = target
        calls.update(kwargs)

    monkeypatch.setattr("bookstore.main.uvicorn.run", fake_run)
    result = runner.invoke(app, ["serve", "--port", "8123"])
    assert result.exit_code == 0
    assert calls["target"] == "bookstore.api:app"
    assert calls["port"] == 8123


def test_list_rich_output(db_args):
    runner.invoke(app, db_args + ["add", "--title", "Dune", "--author", "Frank Herbert", "--price", "12"])
    result = runner.invoke(app, db_args + ["-o", "rich", "list"])
    assert result.exit_code == 0
    assert "Dune" in result.stdout
    assert "Frank Herbert" in result.stdout
