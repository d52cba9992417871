import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bookstore import handlers
from bookstore.config import configure_logging, settings
from bookstore.database import Storage, initialize_database
from bookstore.errors import StorageError
from bookstore.handlers import Result

logger = logging.getLogger(__name__)


# --- Models ---
class BookModel(BaseModel):
    id: int
    title: str
    author: str
    price: float | None = None
    genre: str | None = None


class BookPayloadModel(BaseModel):
    title: str
    author: str
    price: float | None = Field(default=None, description="Stored as null when omitted")
    genre: str | None = Field(default=None, description="Stored as null when omitted")


class ConfirmationModel(BaseModel):
    message: str
    id: int | str


class ValidationErrorModel(BaseModel):
    errors: List[str]


class MessageModel(BaseModel):
    message: str


class StorageErrorModel(BaseModel):
    error: str


class HealthModel(BaseModel):
    status: str
    timestamp: str
    db: bool
    total_books: Optional[int] = None


INVALID = {400: {"model": ValidationErrorModel, "description": "Input validation failure"}}
NOT_FOUND = {404: {"model": MessageModel, "description": "Book not found"}}
DB_FAILURE = {500: {"model": StorageErrorModel, "description": "Database failure"}}
BOOK_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": BookPayloadModel.model_json_schema()}},
    }
}


# --- Helpers ---
def get_storage(request: Request) -> Storage:
    """Dependency returning the storage created at startup."""
    return request.app.state.storage


def to_response(result: Result) -> JSONResponse:
    if result.ok:
        return JSONResponse(content=result.value, status_code=result.status_code)
    return JSONResponse(content=result.error.to_dict(), status_code=result.status_code)


async def read_payload(request: Request) -> Any:
    """Return the decoded JSON body, or None when it is malformed.

    An empty body reads as an empty object.
    """
    if not (await request.body()).strip():
        return {}
    try:
        return await request.json()
    except ValueError:
        return None


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    """Build the API.

    When no storage is given, one is opened from ``settings.database_file``
    at startup and closed again at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if app.state.storage is None:
            owned = initialize_database(settings.database_file)
            app.state.storage = owned
        logger.info(f"{settings.app_name} ready")
        try:
            yield
        finally:
            if owned is not None:
                owned.close()
                app.state.storage = None

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.storage = storage

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Health ---
    @app.get("/health", response_model=HealthModel)
    def health(storage: Storage = Depends(get_storage)):
        """Lightweight health endpoint with a quick database round trip."""
        db_ok = True
        total_books = None
        try:
            row = storage.query_one("SELECT COUNT(*) AS total FROM books")
            total_books = row["total"] if row else 0
        except StorageError as e:
            logger.warning(f"Health check could not reach the database: {e}")
            db_ok = False
        return {
            "status": "healthy" if db_ok else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "db": db_ok,
            "total_books": total_books,
        }

    # --- Books ---
    @app.get("/books", response_model=List[BookModel], responses=DB_FAILURE)
    def get_books(storage: Storage = Depends(get_storage)):
        """Get all books that exist within the books table."""
        return to_response(handlers.list_books(storage))

    @app.get("/books/{book_id}", response_model=BookModel, responses={**INVALID, **NOT_FOUND, **DB_FAILURE})
    def get_book(book_id: str, storage: Storage = Depends(get_storage)):
        """Get a single book by its ID."""
        return to_response(handlers.get_book(storage, book_id))

    @app.post("/books", status_code=201, response_model=ConfirmationModel,
              responses={**INVALID, **DB_FAILURE}, openapi_extra=BOOK_BODY)
    async def add_book(request: Request, storage: Storage = Depends(get_storage)):
        """Create a new book; the new ID is returned."""
        payload = await read_payload(request)
        return to_response(handlers.create_book(storage, payload))

    @app.put("/books/{book_id}", status_code=201, response_model=ConfirmationModel,
             responses={**INVALID, **NOT_FOUND, **DB_FAILURE}, openapi_extra=BOOK_BODY)
    async def update_book(book_id: str, request: Request, storage: Storage = Depends(get_storage)):
        """Replace every field of an existing book."""
        payload = await read_payload(request)
        return to_response(handlers.update_book(storage, book_id, payload))

    @app.delete("/books/{book_id}", response_model=ConfirmationModel,
                responses={**INVALID, **NOT_FOUND, **DB_FAILURE})
    def delete_book(book_id: str, storage: Storage = Depends(get_storage)):
        """Delete an existing book by ID."""
        return to_response(handlers.delete_book(storage, book_id))

    return app


configure_logging()
app = create_app()
