import logging
import sqlite3
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from bookstore.config import settings
from bookstore.errors import StorageError

logger = logging.getLogger(__name__)

BOOKS_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS books (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        author TEXT NOT NULL,
        price FLOAT,
        genre TEXT
    )
"""

Row = Dict[str, Any]


@dataclass(frozen=True)
class ExecuteResult:
    changed_row_count: int
    inserted_id: Optional[int]


class Storage(Protocol):
    """What the request handlers need from a database.

    Implementations raise StorageError for any failure of the statement.
    """

    def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Row]: ...

    def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Row]: ...

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult: ...


def get_db_connection(db_file: str) -> sqlite3.Connection:
    """Open a SQLite connection that can be shared across worker threads."""
    conn = sqlite3.connect(db_file, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(conn: sqlite3.Connection) -> None:
    """Create the books table if it does not exist yet."""
    conn.execute(BOOKS_TABLE_SQL)
    conn.commit()
    logger.info("Books table created or already exists")


class SQLiteStorage:
    """A single long-lived SQLite connection behind the Storage interface.

    All statements go through one lock; each write is committed as soon as
    it runs so every insert, update and delete is atomic on its own.
    """

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file or settings.database_file
        try:
            self._conn = get_db_connection(self.db_file)
        except sqlite3.Error as e:
            logger.error(f"Could not connect to database {self.db_file}: {e}")
            raise StorageError(str(e)) from e
        self._lock = threading.Lock()
        logger.info(f"Connected to the DB ({self.db_file})")

    def initialize(self) -> "SQLiteStorage":
        with self._lock:
            try:
                create_tables(self._conn)
            except sqlite3.Error as e:
                logger.error(f"Error creating books table: {e}")
                raise StorageError(str(e)) from e
        return self

    def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        with self._lock:
            try:
                rows = self._conn.execute(sql, tuple(params)).fetchall()
            except (sqlite3.Error, OverflowError, UnicodeEncodeError) as e:
                raise StorageError(str(e)) from e
        return [dict(row) for row in rows]

    def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
        with self._lock:
            try:
                row = self._conn.execute(sql, tuple(params)).fetchone()
            except (sqlite3.Error, OverflowError, UnicodeEncodeError) as e:
                raise StorageError(str(e)) from e
        return dict(row) if row is not None else None

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecuteResult:
        with self._lock:
            try:
                # the connection context manager commits, or rolls back on error
                with self._conn:
                    cursor = self._conn.execute(sql, tuple(params))
            except (sqlite3.Error, OverflowError, UnicodeEncodeError) as e:
                raise StorageError(str(e)) from e
        return ExecuteResult(changed_row_count=cursor.rowcount, inserted_id=cursor.lastrowid)

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def initialize_database(db_file: Optional[str] = None) -> SQLiteStorage:
    """Connect to the database and make sure the schema exists."""
    return SQLiteStorage(db_file).initialize()
