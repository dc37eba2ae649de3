"""Pin routes."""

from typing import Any

from fastapi import APIRouter, status

from mappins.dependencies import BroadcasterDep, PinServiceDep, RecordId
from mappins.realtime import PIN_CREATED, PIN_DELETED, PIN_UPDATED, PIN_VISITED, publish
from mappins.schemas import PinPayload, VisitPayload, dump

router = APIRouter(prefix="/api/pins", tags=["pins"])


@router.get("")
async def list_pins(service: PinServiceDep) -> list[dict[str, Any]]:
    """Return every pin, newest first."""
    return [dump(pin) for pin in await service.list_pins()]


@router.get("/{pin_id}")
async def get_pin(pin_id: RecordId, service: PinServiceDep) -> dict[str, Any]:
    """Return a pin with its recent visits."""
    pin = await service.get_pin(pin_id)
    history = await service.visit_history(pin_id)
    return {**dump(pin), "visitHistory": [dump(visit) for visit in history]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_pin(
    payload: PinPayload,
    service: PinServiceDep,
    broadcaster: BroadcasterDep,
) -> dict[str, Any]:
    """Create a pin and announce it to connected clients."""
    data = dump(await service.create_pin(payload))
    await publish(broadcaster, PIN_CREATED, data)
    return data


@router.put("/{pin_id}")
async def update_pin(
    pin_id: RecordId,
    payload: PinPayload,
    service: PinServiceDep,
    broadcaster: BroadcasterDep,
) -> dict[str, Any]:
    data = dump(await service.update_pin(pin_id, payload))
    await publish(broadcaster, PIN_UPDATED, data)
    return data


@router.delete("/{pin_id}")
async def delete_pin(
    pin_id: RecordId,
    service: PinServiceDep,
    broadcaster: BroadcasterDep,
) -> dict[str, Any]:
    result = await service.delete_pin(pin_id)
    await publish(broadcaster, PIN_DELETED, {"id": result.id})
    return {"message": "Pin deleted successfully", "id": result.id}


@router.post("/{pin_id}/visit")
async def record_visit(
    pin_id: RecordId,
    payload: VisitPayload,
    service: PinServiceDep,
    broadcaster: BroadcasterDep,
) -> dict[str, Any]:
    """Log that someone visited a pin."""
    visit = dump(await service.record_visit(pin_id, payload))
    await publish(broadcaster, PIN_VISITED, {"pinId": pin_id, "visit": visit})
    return {"message": "Visit recorded", "visit": visit}


@router.get("/{pin_id}/history")
async def visit_history(
    pin_id: RecordId, service: PinServiceDep
) -> list[dict[str, Any]]:
    return [dump(visit) for visit in await service.visit_history(pin_id)]
