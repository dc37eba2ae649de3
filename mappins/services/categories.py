"""Category operations."""

from __future__ import annotations

import logging

from mappins.exceptions import NotFoundError
from mappins.schemas import CategoryPayload, CategoryRead, DeleteResult
from mappins.services.validation import (
    CATEGORY_NAME_LENGTH,
    clean,
    require,
    require_color,
    require_max_length,
)
from mappins.store import PinStore

logger = logging.getLogger(__name__)

_REQUIRED = "Category name and color are required"


def _validated(payload: CategoryPayload) -> tuple[str, str]:
    name = clean(payload.name)
    color = clean(payload.color)
    require(_REQUIRED, name=name, color=color)
    require_max_length(CATEGORY_NAME_LENGTH, name=name)
    require_color(color)
    return name, color


class CategoryService:
    """Category CRUD.

    Changing a category's color leaves pins that already use it untouched.
    """

    def __init__(self, store: PinStore) -> None:
        self.store = store

    async def list_categories(self) -> list[CategoryRead]:
        return await self.store.list_categories()

    async def get_category(self, category_id: int) -> CategoryRead:
        category = await self.store.get_category(category_id)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    async def create_category(self, payload: CategoryPayload) -> CategoryRead:
        name, color = _validated(payload)

        category = await self.store.create_category(name, color)
        logger.info("Category %r created", category.name)
        return category

    async def update_category(
        self, category_id: int, payload: CategoryPayload
    ) -> CategoryRead:
        name, color = _validated(payload)
        await self.get_category(category_id)

        category = await self.store.update_category(category_id, name, color)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    async def delete_category(self, category_id: int) -> DeleteResult:
        await self.get_category(category_id)
        result = await self.store.delete_category(category_id)
        if not result.deleted:
            raise NotFoundError("category", category_id)
        logger.info("Category %s deleted", category_id)
        return result
