"""Request handlers for the books resource.

Each handler validates its input, talks to the injected storage at most once
and returns an ``Ok`` or an ``Err``. Nothing here knows about HTTP; the API
layer (and the CLI) turn results into responses.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, List, TypeVar, Union

from bookstore.book import Book, BookPayload
from bookstore.database import Storage
from bookstore.errors import BookstoreError, NotFoundError, StorageError, ValidationError
from bookstore.validators import MAX_ROW_ID, parse_id, validate_body, validate_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

SELECT_ALL = "SELECT id, title, author, price, genre FROM books ORDER BY id"
SELECT_ONE = "SELECT id, title, author, price, genre FROM books WHERE id = ?"
INSERT = "INSERT INTO books (title, author, price, genre) VALUES (?, ?, ?, ?)"
UPDATE = "UPDATE books SET title = ?, author = ?, price = ?, genre = ? WHERE id = ?"
DELETE = "DELETE FROM books WHERE id = ?"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: BookstoreError

    @property
    def ok(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return self.error.status_code


Result = Union[Ok[T], Err]


def _invalid(errors: List[str]) -> Err:
    logger.debug(f"Rejected request: {errors}")
    return Err(ValidationError(errors))


def _storage_failure(operation: str, error: StorageError) -> Err:
    logger.error(f"{operation} failed: {error}")
    return Err(error)


def list_books(storage: Storage) -> Result[List[dict]]:
    """Return every stored book, possibly none."""
    try:
        rows = storage.query_all(SELECT_ALL)
    except StorageError as e:
        return _storage_failure("Listing books", e)
    return Ok([Book.from_dict(row).to_dict() for row in rows])


def get_book(storage: Storage, raw_id: Any) -> Result[dict]:
    errors = validate_id(raw_id)
    if errors:
        return _invalid(errors)

    book_id = parse_id(raw_id)
    if book_id > MAX_ROW_ID:
        return Err(NotFoundError(raw_id))

    try:
        row = storage.query_one(SELECT_ONE, (book_id,))
    except StorageError as e:
        return _storage_failure(f"Fetching book {raw_id}", e)
    if row is None:
        return Err(NotFoundError(raw_id))
    return Ok(Book.from_dict(row).to_dict())


def create_book(storage: Storage, payload: Any) -> Result[dict]:
    """Insert a new book; price and genre are stored as null when omitted."""
    errors = validate_body(payload)
    if errors:
        return _invalid(errors)

    book = BookPayload.from_payload(payload)
    try:
        result = storage.execute(INSERT, book.as_params())
    except StorageError as e:
        return _storage_failure("Adding book", e)
    logger.info(f"Book {result.inserted_id} added")
    return Ok({"message": "Book added successfully", "id": result.inserted_id}, status_code=201)


def update_book(storage: Storage, raw_id: Any, payload: Any) -> Result[dict]:
    """Overwrite all content fields of an existing book.

    There is no partial update: an omitted price or genre is reset to null.
    Both the id and the body are always checked so every problem is
    reported in one response, id errors first.
    """
    errors = validate_id(raw_id) + validate_body(payload)
    if errors:
        return _invalid(errors)

    book_id = parse_id(raw_id)
    if book_id > MAX_ROW_ID:
        return Err(NotFoundError(raw_id))

    book = BookPayload.from_payload(payload)
    try:
        result = storage.execute(UPDATE, book.as_params() + (book_id,))
    except StorageError as e:
        return _storage_failure(f"Updating book {raw_id}", e)
    if result.changed_row_count == 0:
        return Err(NotFoundError(raw_id))
    logger.info(f"Book {raw_id} updated")
    return Ok({"message": "Book updated successfully", "id": raw_id}, status_code=201)


def delete_book(storage: Storage, raw_id: Any) -> Result[dict]:
    errors = validate_id(raw_id)
    if errors:
        return _invalid(errors)

    book_id = parse_id(raw_id)
    if book_id > MAX_ROW_ID:
        return Err(NotFoundError(raw_id))

    try:
        result = storage.execute(DELETE, (book_id,))
    except StorageError as e:
        return _storage_failure(f"Deleting book {raw_id}", e)
    if result.changed_row_count == 0:
        return Err(NotFoundError(raw_id))
    logger.info(f"Book {raw_id} deleted")
    return Ok({"message": "Book successfully deleted", "id": raw_id})
