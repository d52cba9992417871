from contextlib import closing
from typing import Any, Callable, Dict, Optional

import typer
import uvicorn

from bookstore import handlers
from bookstore.config import configure_logging, settings
from bookstore.database import initialize_database
from bookstore.handlers import Result
from bookstore.ui_helpers import print_book, print_book_list, print_message, set_output_mode

APP_NAME = "Bookstore CLI"

app = typer.Typer(help=APP_NAME)

_state: Dict[str, Optional[str]] = {"db_file": None}


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    db_file: Optional[str] = typer.Option(
        None,
        "--db-file",
        envvar="BOOKSTORE_DB_FILE",
        help="SQLite file to use; the in-memory default does not outlive the command",
    ),
):
    """Global CLI options (output mode, database file)."""
    if output:
        set_output_mode(output)
    _state["db_file"] = db_file


def _db_file() -> str:
    return _state["db_file"] or settings.database_file


def _run(operation: Callable[..., Result], *args: Any, on_success: Callable[[Any], None] = print_message) -> None:
    with closing(initialize_database(_db_file())) as storage:
        result = operation(storage, *args)
    if not result.ok:
        print_message(result.error.to_dict(), error=True)
        raise typer.Exit(code=1)
    on_success(result.value)


def _payload(title: str, author: str, price: Optional[float], genre: Optional[str]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"title": title, "author": author}
    if price is not None:
        payload["price"] = price
    if genre is not None:
        payload["genre"] = genre
    return payload


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: PORT or 3000)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Start the HTTP API with uvicorn."""
    configure_logging()
    host = host or settings.api_host
    port = port or settings.api_port
    print(f"Listening on http://{host}:{port}/")
    uvicorn.run("bookstore.api:app", host=host, port=port, reload=reload, log_level=settings.log_level.lower())


@app.command("init-db")
def cli_init_db():
    """Create the books table if it does not exist."""
    with closing(initialize_database(_db_file())):
        pass
    print(f"Database ready: {_db_file()}")


@app.command("list")
def cli_list():
    """List all books."""
    _run(handlers.list_books, on_success=print_book_list)


@app.command("show")
def cli_show(book_id: str):
    """Show one book by ID."""
    _run(handlers.get_book, book_id, on_success=print_book)


@app.command("add")
def cli_add(
    title: str = typer.Option(..., "--title"),
    author: str = typer.Option(..., "--author"),
    price: Optional[float] = typer.Option(None, "--price"),
    genre: Optional[str] = typer.Option(None, "--genre"),
):
    """Add a new book."""
    _run(handlers.create_book, _payload(title, author, price, genre))


@app.command("update")
def cli_update(
    book_id: str,
    title: str = typer.Option(..., "--title"),
    author: str = typer.Option(..., "--author"),
    price: Optional[float] = typer.Option(None, "--price"),
    genre: Optional[str] = typer.Option(None, "--genre"),
):
    """Replace every field of a book; omitted price/genre are cleared."""
    _run(handlers.update_book, book_id, _payload(title, author, price, genre))


@app.command("remove")
def cli_remove(book_id: str):
    """Delete a book by ID."""
    _run(handlers.delete_book, book_id)


if __name__ == "__main__":
    app()
