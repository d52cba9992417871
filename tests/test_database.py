import pytest

from bookstore.database import SQLiteStorage, initialize_database
from bookstore.errors import StorageError

INSERT = "INSERT INTO books (title, author, price, genre) VALUES (?, ?, ?, ?)"


def test_id_is_the_primary_key(storage):
    columns = storage.query_all("PRAGMA table_info(books)")
    assert columns[0]["name"] == "id"
    assert columns[0]["pk"] == 1
    assert [c["name"] for c in columns] == ["id", "title", "author", "price", "genre"]


def test_execute_reports_inserted_id_and_changes(storage):
    result = storage.execute(INSERT, ("A", "B", None, None))
    assert result.inserted_id == 1
    assert result.changed_row_count == 1

    result = storage.execute("DELETE FROM books WHERE id = ?", (99,))
    assert result.changed_row_count == 0


def test_ids_are_not_reused_after_delete(storage):
    first = storage.execute(INSERT, ("A", "B", None, None)).inserted_id
    storage.execute("DELETE FROM books WHERE id = ?", (first,))
    second = storage.execute(INSERT, ("C", "D", None, None)).inserted_id
    assert second > first


def test_query_one_returns_dict_or_none(storage):
    storage.execute(INSERT, ("A", "B", 1.5, "G"))
    assert storage.query_one("SELECT * FROM books WHERE id = ?", (1,)) == {
        "id": 1, "title": "A", "author": "B", "price": 1.5, "genre": "G",
    }
    assert storage.query_one("SELECT * FROM books WHERE id = ?", (2,)) is None


def test_sqlite_errors_become_storage_errors(storage):
    with pytest.raises(StorageError, match="no such table"):
        storage.query_all("SELECT * FROM missing")
    with pytest.raises(StorageError, match="NOT NULL"):
        storage.execute(INSERT, (None, "B", None, None))
    # the failed insert left nothing behind
    assert storage.query_all("SELECT * FROM books") == []


def test_unencodable_text_becomes_storage_error(storage):
    with pytest.raises(StorageError, match="surrogates not allowed"):
        storage.execute(INSERT, ("\ud800", "B", None, None))
    assert storage.query_all("SELECT * FROM books") == []


def test_closed_connection_raises_storage_error():
    db = initialize_database(":memory:")
    db.close()
    with pytest.raises(StorageError):
        db.query_all("SELECT * FROM books")


@pytest.mark.integration
def test_file_database_persists_between_connections(tmp_path):
    db_file = str(tmp_path / "bookstore.db")
    first = initialize_database(db_file)
    first.execute(INSERT, ("Sapiens", "Yuval Noah Harari", None, None))
    first.close()

    second = SQLiteStorage(db_file).initialize()
    try:
        rows = second.query_all("SELECT title FROM books")
    finally:
        second.close()
    assert rows == [{"title": "Sapiens"}]
