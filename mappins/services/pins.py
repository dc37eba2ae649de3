"""Pin and visit operations."""

from __future__ import annotations

import logging

from mappins.config import config
from mappins.exceptions import NotFoundError
from mappins.schemas import DeleteResult, PinPayload, PinRead, VisitPayload, VisitRead
from mappins.services.validation import (
    CATEGORY_NAME_LENGTH,
    NAME_LENGTH,
    clean,
    require,
    require_max_length,
)
from mappins.store import PinStore

logger = logging.getLogger(__name__)


class PinService:
    """Validates pin input and forwards it to the store.

    The service never broadcasts; callers decide whether a mutation is
    published to connected clients.
    """

    def __init__(self, store: PinStore) -> None:
        self.store = store

    async def list_pins(self) -> list[PinRead]:
        return await self.store.list_pins()

    async def get_pin(self, pin_id: int) -> PinRead:
        pin = await self.store.get_pin(pin_id)
        if pin is None:
            raise NotFoundError("pin", pin_id)
        return pin

    async def create_pin(self, payload: PinPayload) -> PinRead:
        name = clean(payload.name)
        created_by = clean(payload.created_by)
        require(
            "name, latitude, longitude and created_by are required",
            name=name,
            latitude=payload.latitude,
            longitude=payload.longitude,
            created_by=created_by,
        )
        category = clean(payload.category)
        require_max_length(NAME_LENGTH, name=name, created_by=created_by)
        require_max_length(CATEGORY_NAME_LENGTH, category=category)

        pin = await self.store.create_pin(
            name=name,
            description=clean(payload.description) or "",
            latitude=float(payload.latitude),
            longitude=float(payload.longitude),
            category=category or config.DEFAULT_CATEGORY,
            created_by=created_by,
        )
        logger.info("Pin %s created by %s", pin.id, created_by)
        return pin

    async def update_pin(self, pin_id: int, payload: PinPayload) -> PinRead:
        name = clean(payload.name)
        updated_by = clean(payload.updated_by)
        require(
            "name, latitude, longitude and updated_by are required",
            name=name,
            latitude=payload.latitude,
            longitude=payload.longitude,
            updated_by=updated_by,
        )
        category = clean(payload.category)
        require_max_length(NAME_LENGTH, name=name, updated_by=updated_by)
        require_max_length(CATEGORY_NAME_LENGTH, category=category)
        await self.get_pin(pin_id)

        pin = await self.store.update_pin(
            pin_id,
            name=name,
            description=clean(payload.description) or "",
            latitude=float(payload.latitude),
            longitude=float(payload.longitude),
            category=category,
            updated_by=updated_by,
        )
        if pin is None:
            raise NotFoundError("pin", pin_id)
        logger.info("Pin %s updated by %s", pin_id, updated_by)
        return pin

    async def delete_pin(self, pin_id: int) -> DeleteResult:
        await self.get_pin(pin_id)
        result = await self.store.delete_pin(pin_id)
        if not result.deleted:
            raise NotFoundError("pin", pin_id)
        logger.info("Pin %s deleted", pin_id)
        return result

    async def record_visit(self, pin_id: int, payload: VisitPayload) -> VisitRead:
        username = clean(payload.username)
        require("username is required", username=username)
        require_max_length(NAME_LENGTH, username=username)
        await self.get_pin(pin_id)
        return await self.store.add_visit(pin_id, username, clean(payload.comment))

    async def visit_history(self, pin_id: int) -> list[VisitRead]:
        await self.get_pin(pin_id)
        return await self.store.list_visits(pin_id)
