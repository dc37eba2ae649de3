"""Category routes.

Mounted under ``/api/pins/categories`` and registered before the pin routes
so that ``/api/pins/categories/...`` never reaches ``/api/pins/{pin_id}``.
"""

from typing import Any

from fastapi import APIRouter, status

from mappins.dependencies import BroadcasterDep, CategoryServiceDep, RecordId
from mappins.realtime import (
    CATEGORY_CREATED,
    CATEGORY_DELETED,
    CATEGORY_UPDATED,
    publish,
)
from mappins.schemas import CategoryPayload, dump

router = APIRouter(prefix="/api/pins/categories", tags=["categories"])


@router.get("/all")
async def list_categories(service: CategoryServiceDep) -> list[dict[str, Any]]:
    return [dump(category) for category in await service.list_categories()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryPayload,
    service: CategoryServiceDep,
    broadcaster: BroadcasterDep,
) -> dict[str, Any]:
    data = dump(await service.create_category(payload))
    await publish(broadcaster, CATEGORY_CREATED, data)
    return data


@router.put("/{category_id}")
async def update_category(
    category_id: RecordId,
    payload: CategoryPayload,
    service: CategoryServiceDep,
    broadcaster: BroadcasterDep,
) -> dict[str, Any]:
    """Rename or recolor a category. Existing pins keep their color."""
    data = dump(await service.update_category(category_id, payload))
    await publish(broadcaster, CATEGORY_UPDATED, data)
    return data


@router.delete("/{category_id}")
async def delete_category(
    category_id: RecordId,
    service: CategoryServiceDep,
    broadcaster: BroadcasterDep,
) -> dict[str, Any]:
    result = await service.delete_category(category_id)
    await publish(broadcaster, CATEGORY_DELETED, {"id": result.id})
    return {"message": "Category deleted successfully", "id": result.id}
