"""Room-based fan-out of change events to WebSocket clients.

Delivery is best effort: nothing is queued or replayed, and a client whose
send fails is dropped. Clients are expected to reload the full pin list when
they (re)connect and apply events on top of it.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping
from typing import Any, Protocol

from mappins.config import config

logger = logging.getLogger(__name__)

PIN_CREATED = "pin_created"
PIN_UPDATED = "pin_updated"
PIN_DELETED = "pin_deleted"
PIN_VISITED = "pin_visited"
CATEGORY_CREATED = "category_created"
CATEGORY_UPDATED = "category_updated"
CATEGORY_DELETED = "category_deleted"

EVENTS = frozenset(
    {
        PIN_CREATED,
        PIN_UPDATED,
        PIN_DELETED,
        PIN_VISITED,
        CATEGORY_CREATED,
        CATEGORY_UPDATED,
        CATEGORY_DELETED,
    }
)


class Subscriber(Protocol):
    async def send_json(self, data: Any, mode: str = "text") -> None: ...


def build_message(event: str, data: Mapping[str, Any]) -> dict[str, Any]:
    return {"event": event, "data": dict(data)}


class Broadcaster:
    """Tracks connected clients and the rooms they joined."""

    def __init__(self, default_room: str = config.ROOM_NAME) -> None:
        self.default_room = default_room
        self._clients: set[Subscriber] = set()
        self._rooms: dict[str, set[Subscriber]] = defaultdict(set)

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def members(self, room: str | None = None) -> frozenset[Subscriber]:
        return frozenset(self._rooms.get(room or self.default_room, ()))

    def connect(self, client: Subscriber) -> None:
        self._clients.add(client)
        logger.info("Realtime client connected (total=%d)", len(self._clients))

    def join(self, client: Subscriber, room: str | None = None) -> str:
        room = room or self.default_room
        self._clients.add(client)
        self._rooms[room].add(client)
        logger.debug("Client joined %s (members=%d)", room, len(self._rooms[room]))
        return room

    def leave(self, client: Subscriber, room: str | None = None) -> None:
        room = room or self.default_room
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(client)
        if not members:
            del self._rooms[room]

    def disconnect(self, client: Subscriber) -> None:
        self._clients.discard(client)
        for room in list(self._rooms):
            self.leave(client, room)
        logger.info("Realtime client disconnected (total=%d)", len(self._clients))

    async def emit(
        self, event: str, data: Mapping[str, Any], room: str | None = None
    ) -> int:
        """Send ``event`` to every member of ``room``.

        Returns the number of clients the message was handed to.
        """
        if event not in EVENTS:
            raise ValueError(f"Unknown realtime event: {event}")

        room = room or self.default_room
        message = build_message(event, data)
        delivered = 0
        for client in list(self._rooms.get(room, ())):
            try:
                await client.send_json(message)
            except Exception as exc:
                logger.warning("Dropping realtime client after failed send: %s", exc)
                self.disconnect(client)
                continue
            delivered += 1

        logger.debug("Emitted %s to %d client(s) in %s", event, delivered, room)
        return delivered


async def publish(
    broadcaster: Broadcaster | None, event: str, data: Mapping[str, Any]
) -> None:
    """Emit ``event`` if realtime updates are enabled."""
    if broadcaster is None:
        return
    await broadcaster.emit(event, data)
