import math
import re
from typing import Any, List

EXPECTED_FIELDS = ("title", "author", "price", "genre")
REQUIRED_STRING_FIELDS = ("title", "author")
OPTIONAL_NUMBER_FIELDS = ("price",)
OPTIONAL_STRING_FIELDS = ("genre",)

NOT_AN_OBJECT = "Request body must be a JSON object."

# largest rowid SQLite can store
MAX_ROW_ID = 2**63 - 1

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def parse_id(raw: Any) -> int:
    """Convert a raw identifier (usually a path segment) to a positive int.

    Strings are stripped and read as an int, falling back to a float so that
    "3.0" or "1e2" still name a whole number. Raises ValueError otherwise.
    """
    if isinstance(raw, bool):
        raise ValueError(f"{raw!r} is not a number")
    if isinstance(raw, (int, float)):
        number = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not _NUMBER_RE.match(text):
            raise ValueError(f"{raw!r} is not a number")
        try:
            number = int(text)
        except ValueError:
            number = float(text)
    else:
        raise ValueError(f"{raw!r} is not a number")

    if isinstance(number, float):
        if not number.is_integer():
            raise ValueError(f"{raw!r} is not an integer")
        number = int(number)
    if number <= 0:
        raise ValueError(f"{raw!r} is not positive")
    return number


def coerce_price(value: Any) -> float | None:
    """Return a finite number for ``price``, or None when it is null.

    Booleans are refused even though they are ints in Python.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("booleans are not prices")
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        number = float(value.strip())
    else:
        raise ValueError(f"{type(value).__name__} is not a number")
    if not math.isfinite(number):
        raise ValueError(f"{value!r} is not finite")
    return number


class BookValidator:
    """Input validation for book identifiers and write payloads.

    Both methods return a list of messages; an empty list means the input is
    acceptable. Callers only branch on the length of the list.
    """

    @staticmethod
    def validate_id(raw: Any) -> List[str]:
        try:
            parse_id(raw)
        except (ValueError, TypeError, OverflowError):
            return ["'id' must be a positive integer."]
        return []

    @staticmethod
    def validate_body(payload: Any) -> List[str]:
        """Check a create/update payload and report every problem at once.

        Order is significant: unknown fields (in payload order), then the
        required strings, then price, then genre.
        """
        if not isinstance(payload, dict):
            return [NOT_AN_OBJECT]

        errors: List[str] = []

        for field in payload:
            if field not in EXPECTED_FIELDS:
                errors.append(f"'{field}' is not an expected field. Please remove this from payload.")

        for field in REQUIRED_STRING_FIELDS:
            if field not in payload:
                errors.append(f"'{field}' is required.")
            elif not isinstance(payload[field], str):
                errors.append(f"'{field}' must be a string.")

        for field in OPTIONAL_NUMBER_FIELDS:
            if field in payload:
                try:
                    coerce_price(payload[field])
                except (ValueError, TypeError, OverflowError):
                    errors.append(f"'{field}' must be a valid number.")

        for field in OPTIONAL_STRING_FIELDS:
            if field in payload and not isinstance(payload[field], str):
                errors.append(f"'{field}' must be a string.")

        return errors


validate_id = BookValidator.validate_id
validate_body = BookValidator.validate_body
