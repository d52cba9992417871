from __future__ import annotations

from typing import Any, Dict, List


class BookstoreError(Exception):
    """Base class for errors that are reported back to the caller."""

    status_code: int = 500

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


class ValidationError(BookstoreError):
    """One or more input rules were violated. Always the caller's to fix."""

    status_code = 400

    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class NotFoundError(BookstoreError):
    """The request was well formed but no book has the requested id."""

    status_code = 404

    def __init__(self, book_id: Any) -> None:
        self.book_id = book_id
        super().__init__(f"Book with ID: {book_id} not found")

    def to_dict(self) -> Dict[str, Any]:
        return {"message": str(self)}


class StorageError(BookstoreError):
    """The database rejected or failed a statement."""

    status_code = 500

    def to_dict(self) -> Dict[str, Any]:
        return {"error": str(self)}
