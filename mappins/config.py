"""Configuration management for Map Pins."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Checked in order, the first non-empty one wins
POSTGRES_URL_VARS: tuple[str, ...] = (
    "DATABASE_URL",
    "POSTGRES_URL",
    "POSTGRESS_POSTGRES_URL",
    "POSTGRESS_SUPABASE_URL",
)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def resolve_postgres_url() -> str | None:
    """Return the first configured PostgreSQL connection string."""
    for name in POSTGRES_URL_VARS:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return None


class Config:
    """Application configuration."""

    # Application
    PORT: int = int(os.getenv("BIND_PORT", "3000"))
    HOST: str = os.getenv("BIND_HOST", "127.0.0.1")
    DEBUG: bool = _env_flag("DEBUG")
    LOG_LEVEL: str | None = os.getenv("LOG_LEVEL") or None
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    SHUTDOWN_TIMEOUT: float = float(os.getenv("SHUTDOWN_TIMEOUT", "10"))

    # Database
    POSTGRES_URL: str | None = resolve_postgres_url()
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", "./data"))
    SQLITE_FILENAME: str = "pins.db"
    DB_SSL: bool = _env_flag("DB_SSL")
    DB_FALLBACK_TO_SQLITE: bool = _env_flag("DB_FALLBACK_TO_SQLITE")

    # Realtime
    REALTIME_ENABLED: bool = _env_flag("REALTIME_ENABLED", "true")
    ROOM_NAME: str = "pins_room"

    # Pins
    DEFAULT_CATEGORY: str = "Default"
    DEFAULT_COLOR: str = "#FF5733"
    VISIT_HISTORY_LIMIT: int = 10
    DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
        ("Default", "#FF5733"),
        ("Important", "#FF0000"),
        ("Visited", "#00FF00"),
        ("To check", "#FFFF00"),
        ("Completed", "#0000FF"),
        ("Problematic", "#FF8C00"),
    )

    @property
    def sqlite_path(self) -> Path:
        """Location of the embedded database file."""
        return self.DATA_DIR / self.SQLITE_FILENAME

    @property
    def uses_postgres(self) -> bool:
        return bool(self.POSTGRES_URL)


config = Config()
