"""Base model definitions."""

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timestamp used for every server-assigned column."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass
