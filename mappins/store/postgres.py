"""Networked PostgreSQL backend."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.sql.base import Executable

from mappins.exceptions import StoreConnectionError
from mappins.models import Category
from mappins.store.sql import SQLAlchemyStore

logger = logging.getLogger(__name__)

_NO_SSL_MODES = {"disable", "allow", "prefer"}


def _to_async_url(url: str) -> str:
    if url.startswith("postgresql+asyncpg:"):
        return url
    if url.startswith("postgresql:"):
        return url.replace("postgresql:", "postgresql+asyncpg:", 1)
    if url.startswith("postgres:"):
        return url.replace("postgres:", "postgresql+asyncpg:", 1)
    return url


def parse_connection_url(url: str, *, ssl: bool = False) -> tuple[URL, bool]:
    """Return an asyncpg URL and whether TLS is required.

    asyncpg rejects libpq's ``sslmode`` query argument, so it is removed from
    the URL and folded into the returned flag.
    """

    parsed = make_url(_to_async_url(url))
    sslmode = parsed.query.get("sslmode")
    if sslmode is not None:
        parsed = parsed.difference_update_query(["sslmode"])
        if isinstance(sslmode, tuple):
            sslmode = sslmode[-1]
        ssl = ssl or sslmode not in _NO_SSL_MODES
    return parsed, ssl


class PostgresStore(SQLAlchemyStore):
    """Store on a PostgreSQL server reached through asyncpg."""

    backend_name = "postgresql"

    def __init__(self, url: str | None, *, ssl: bool = False, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.raw_url = (url or "").strip()
        self.ssl = ssl

    def _create_engine(self) -> AsyncEngine:
        if not self.raw_url:
            raise StoreConnectionError("No PostgreSQL connection string configured")

        url, ssl = parse_connection_url(self.raw_url, ssl=self.ssl)
        logger.info(
            "Connecting to PostgreSQL at %s (ssl=%s)",
            url.render_as_string(hide_password=True),
            ssl,
        )
        connect_args: dict[str, Any] = {"ssl": "require"} if ssl else {}
        return create_async_engine(
            url, echo=self.echo, pool_pre_ping=True, connect_args=connect_args
        )

    def _insert_ignore_categories(self, rows: list[dict[str, Any]]) -> Executable:
        return (
            pg_insert(Category)
            .values(rows)
            .on_conflict_do_nothing(index_elements=[Category.name])
        )
