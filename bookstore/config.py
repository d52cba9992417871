import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("PORT", "3000"))

    # Database settings
    # ":memory:" keeps data for the life of the process; point this at a file for persistence
    database_file: str = os.getenv("BOOKSTORE_DB_FILE", ":memory:")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Bookstore API")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service and the CLI."""
    level_name = (level or settings.log_level).upper()
    if settings.debug:
        level_name = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
