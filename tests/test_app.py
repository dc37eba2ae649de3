from fastapi.testclient import TestClient

from mappins.config import Config
from mappins.main import create_app
from mappins.store import PostgresStore, SQLiteStore


def test_startup_creates_sqlite_database(settings: Config) -> None:
    app = create_app(settings=settings, realtime=False)

    with TestClient(app) as client:
        assert isinstance(app.state.store, SQLiteStore)
        assert settings.sqlite_path.exists()
        response = client.get("/api/pins/categories/all")
        assert response.status_code == 200
        assert len(response.json()) == 6


def test_startup_falls_back_to_sqlite(settings: Config) -> None:
    settings.DB_FALLBACK_TO_SQLITE = True
    app = create_app(PostgresStore(""), settings=settings, realtime=False)

    with TestClient(app) as client:
        assert isinstance(app.state.store, SQLiteStore)
        assert client.get("/api/pins").json() == []


def test_data_survives_restart(settings: Config) -> None:
    payload = {"name": "Cafe", "latitude": 1.0, "longitude": 2.0, "created_by": "al"}

    with TestClient(create_app(settings=settings, realtime=False)) as client:
        pin_id = client.post("/api/pins", json=payload).json()["id"]

    with TestClient(create_app(settings=settings, realtime=False)) as client:
        assert [pin["id"] for pin in client.get("/api/pins").json()] == [pin_id]
