"""Request and response models for the JSON API and realtime events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict


def _as_utc(value: datetime) -> datetime:
    """Stored timestamps are UTC; SQLite returns them without an offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UTCDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
    created_at: UTCDateTime | None = None


class VisitRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pin_id: int
    username: str
    comment: str | None = None
    visited_at: UTCDateTime | None = None


class PinRead(BaseModel):
    """A pin as returned to clients.

    ``category_name`` and ``category_color`` come from a join against the
    category table and are display-only; ``color`` is what the marker uses.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    latitude: float
    longitude: float
    category: str
    color: str
    created_by: str
    updated_by: str | None = None
    created_at: UTCDateTime | None = None
    updated_at: UTCDateTime | None = None
    category_name: str | None = None
    category_color: str | None = None


class PinPayload(BaseModel):
    """Body of ``POST /api/pins`` and ``PUT /api/pins/{id}``.

    Every field is optional here so that missing required fields are reported
    by the service layer with a 400 instead of a schema error.
    """

    name: str | None = None
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    category: str | None = None
    created_by: str | None = None
    updated_by: str | None = None


class VisitPayload(BaseModel):
    username: str | None = None
    comment: str | None = None


class CategoryPayload(BaseModel):
    name: str | None = None
    color: str | None = None


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete; a missing row is ``deleted=False``, not an error."""

    id: int
    deleted: bool


def dump(model: BaseModel) -> dict[str, Any]:
    """Serialize a model the same way for HTTP responses and events."""
    return model.model_dump(mode="json")
