import pytest
from fastapi.testclient import TestClient

from bookstore.api import create_app
from bookstore.database import initialize_database
from bookstore.errors import StorageError

SAMPLE_BOOKS = [
    ("Title 1", "Author 1", 100, "Genre 1"),
    ("Title 2", "Author 2", 200, "Genre 2"),
    ("Title 3", "Author 3", None, "Genre 3"),
    ("Title 4", "Author 4", 400, None),
    ("Title 5", "Author 5", None, None),
]


@pytest.fixture
def storage():
    # Fresh in-memory database for every test
    db = initialize_database(":memory:")
    yield db
    db.close()


@pytest.fixture
def seeded_storage(storage):
    for row in SAMPLE_BOOKS:
        storage.execute("INSERT INTO books (title, author, price, genre) VALUES (?, ?, ?, ?)", row)
    return storage


@pytest.fixture
def client(storage):
    return TestClient(create_app(storage=storage))


@pytest.fixture
def seeded_client(seeded_storage):
    return TestClient(create_app(storage=seeded_storage))


class FailingStorage:
    """Storage double whose every statement fails."""

    def __init__(self, message="database is locked"):
        self.message = message
        self.calls = []

    def _fail(self, sql):
        self.calls.append(sql)
        raise StorageError(self.message)

    def query_all(self, sql, params=()):
        self._fail(sql)

    def query_one(self, sql, params=()):
        self._fail(sql)

    def execute(self, sql, params=()):
        self._fail(sql)


@pytest.fixture
def failing_storage():
    return FailingStorage()


@pytest.fixture
def failing_client(failing_storage):
    return TestClient(create_app(storage=failing_storage))
