import json
import os
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Environment variable controlling CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKSTORE_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def _fmt(value: Any) -> str:
    return "-" if value is None else str(value)


def print_book_list(books: List[Dict[str, Any]]) -> None:
    """Print books according to the current output mode.
    - plain: 'ID - Title by Author' lines, or 'No books in store.'
    - json: JSON array of book objects
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(books, ensure_ascii=False))
        return

    if not books:
        print("No books in store.")
        return

    if mode == "rich":
        table = Table(title="Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Price", justify="right")
        table.add_column("Genre")
        for b in books:
            table.add_row(str(b["id"]), b["title"], b["author"], _fmt(b.get("price")), _fmt(b.get("genre")))
        _console.print(table)
    else:
        for b in books:
            print(f"{b['id']} - {b['title']} by {b['author']}")


def print_book(book: Dict[str, Any]) -> None:
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(book, ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{key.title()}:[/] {_fmt(value)}" for key, value in book.items())
        _console.print(Panel.fit(content, title=f"Book {book['id']}", border_style="blue"))
    else:
        for key, value in book.items():
            print(f"{key}: {_fmt(value)}")


def print_message(body: Dict[str, Any], error: bool = False) -> None:
    """Print a confirmation or error body returned by a handler."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(body, ensure_ascii=False))
        return

    lines = list(body.get("errors", []))
    for key in ("message", "error"):
        if key in body:
            lines.append(str(body[key]))

    if mode == "rich":
        style = "bold red" if error else "green"
        for line in lines:
            _console.print(f"[{style}]{line}[/]")
    else:
        for line in lines:
            print(line)
