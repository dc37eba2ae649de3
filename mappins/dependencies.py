"""FastAPI dependencies wiring the store and services into routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Path, Request

from mappins.exceptions import StoreConnectionError
from mappins.realtime import Broadcaster
from mappins.services import CategoryService, PinService
from mappins.store import PinStore


# Primary keys are INTEGER columns; larger ids are rejected before any query
MAX_ID = 2**31 - 1

RecordId = Annotated[int, Path(ge=1, le=MAX_ID)]


def get_store(request: Request) -> PinStore:
    store: PinStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreConnectionError("Store is not initialized")
    return store


def get_broadcaster(request: Request) -> Broadcaster | None:
    return getattr(request.app.state, "broadcaster", None)


def get_pin_service(store: Annotated[PinStore, Depends(get_store)]) -> PinService:
    return PinService(store)


def get_category_service(
    store: Annotated[PinStore, Depends(get_store)],
) -> CategoryService:
    return CategoryService(store)


BroadcasterDep = Annotated[Broadcaster | None, Depends(get_broadcaster)]
PinServiceDep = Annotated[PinService, Depends(get_pin_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
