"""Persistence backends and backend selection."""

from __future__ import annotations

import asyncio
import logging

from mappins.config import Config, config
from mappins.exceptions import StoreError
from mappins.store.base import PinStore
from mappins.store.postgres import PostgresStore
from mappins.store.sql import SQLAlchemyStore
from mappins.store.sqlite import SQLiteStore

logger = logging.getLogger(__name__)

__all__ = [
    "PinStore",
    "PostgresStore",
    "SQLAlchemyStore",
    "SQLiteStore",
    "create_sqlite_store",
    "close_store",
    "create_store",
    "open_store",
]


def create_sqlite_store(settings: Config = config) -> SQLiteStore:
    """Build the embedded store inside the configured data directory."""
    return SQLiteStore(settings.sqlite_path, echo=settings.DEBUG)


def create_store(settings: Config = config) -> PinStore:
    """Pick the backend from configuration.

    Any PostgreSQL connection variable selects PostgreSQL; otherwise the
    embedded SQLite file is used.
    """
    if settings.uses_postgres:
        logger.info("Using PostgreSQL store")
        return PostgresStore(
            settings.POSTGRES_URL, ssl=settings.DB_SSL, echo=settings.DEBUG
        )

    logger.info("Using SQLite store at %s", settings.sqlite_path)
    return create_sqlite_store(settings)


async def open_store(
    settings: Config = config, store: PinStore | None = None
) -> PinStore:
    """Create (if needed) and initialize the store for this process.

    A PostgreSQL store that fails to initialize is replaced by the SQLite
    store when ``DB_FALLBACK_TO_SQLITE`` is set; otherwise the error
    propagates and startup aborts.
    """
    if store is None:
        store = create_store(settings)

    try:
        await store.initialize()
    except StoreError:
        if not (settings.DB_FALLBACK_TO_SQLITE and isinstance(store, PostgresStore)):
            raise
        logger.warning("PostgreSQL unavailable, falling back to SQLite")
        await store.close()
        store = create_sqlite_store(settings)
        await store.initialize()

    return store


async def close_store(store: PinStore | None, timeout: float) -> None:
    """Close the store, giving up after ``timeout`` seconds."""
    if store is None:
        return
    try:
        await asyncio.wait_for(store.close(), timeout)
    except TimeoutError:
        logger.error("Store did not close within %.1fs, abandoning it", timeout)
