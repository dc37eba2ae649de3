"""Embedded SQLite backend."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.sql.base import Executable

from mappins.models import Category
from mappins.store.sql import SQLAlchemyStore


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SQLiteStore(SQLAlchemyStore):
    """Store kept in a single file, created along with its directory."""

    backend_name = "sqlite"

    def __init__(self, path: Path | str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.path = Path(path).expanduser().resolve()

    @property
    def url(self) -> str:
        return f"sqlite+aiosqlite:///{self.path}"

    def _create_engine(self) -> AsyncEngine:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(self.url, echo=self.echo)
        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
        return engine

    def _insert_ignore_categories(self, rows: list[dict[str, Any]]) -> Executable:
        return (
            sqlite_insert(Category)
            .values(rows)
            .on_conflict_do_nothing(index_elements=[Category.name])
        )
