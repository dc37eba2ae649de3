from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from mappins.config import Config
from mappins.main import create_app
from mappins.realtime import Broadcaster
from mappins.store import SQLiteStore


class RecordingSubscriber:
    """Stand-in for a WebSocket that keeps every message it is sent."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def send_json(self, data: Any, mode: str = "text") -> None:
        self.messages.append(data)

    def events(self) -> list[str]:
        return [message["event"] for message in self.messages]


@pytest.fixture
def settings(tmp_path: Path) -> Config:
    settings = Config()
    settings.DATA_DIR = tmp_path / "data"
    settings.POSTGRES_URL = None
    settings.DB_FALLBACK_TO_SQLITE = False
    return settings


@pytest.fixture
async def store(tmp_path: Path) -> AsyncGenerator[SQLiteStore]:
    store = SQLiteStore(tmp_path / "data" / "pins.db")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def broadcaster() -> Broadcaster:
    return Broadcaster()


@pytest.fixture
def make_subscriber() -> type[RecordingSubscriber]:
    return RecordingSubscriber


@pytest.fixture
def subscriber(broadcaster: Broadcaster) -> RecordingSubscriber:
    subscriber = RecordingSubscriber()
    broadcaster.join(subscriber)
    return subscriber


@pytest.fixture
async def test_client(
    store: SQLiteStore, broadcaster: Broadcaster
) -> AsyncGenerator[AsyncClient]:
    app = create_app(store, broadcaster)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def cafe() -> dict[str, Any]:
    return {"name": "Cafe", "latitude": 52.2, "longitude": 21.0, "created_by": "alice"}
