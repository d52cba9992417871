from __future__ import annotations

from typing import Any, Dict

from bookstore.validators import coerce_price


class Book:
    """Represents a single stored book row."""

    def __init__(self, id: int, title: str, author: str, price: float | None = None,
                 genre: str | None = None) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.price = price
        self.genre = genre

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "price": self.price,
            "genre": self.genre,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            id=data["id"],
            title=data["title"],
            author=data["author"],
            price=data.get("price"),
            genre=data.get("genre"),
        )


class BookPayload:
    """The content fields of a create or update request.

    Only build one from a payload that already passed ``validate_body``;
    omitted optional fields become ``None`` so an update resets them.
    """

    def __init__(self, title: str, author: str, price: float | None = None,
                 genre: str | None = None) -> None:
        self.title = title
        self.author = author
        self.price = price
        self.genre = genre

    @staticmethod
    def from_payload(data: Dict[str, Any]) -> "BookPayload":
        return BookPayload(
            title=data["title"],
            author=data["author"],
            price=coerce_price(data.get("price")),
            genre=data.get("genre"),
        )

    def as_params(self) -> tuple:
        return (self.title, self.author, self.price, self.genre)
