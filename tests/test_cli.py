import json

import httpx
import pytest
from httpx import ASGITransport

from mappins.config import Config
from mappins.main import create_app
from mappins.scripts import cli
from mappins.store import SQLiteStore


@pytest.fixture
def cli_store(store: SQLiteStore, monkeypatch: pytest.MonkeyPatch) -> SQLiteStore:
    async def fake_open_store(settings: Config) -> SQLiteStore:
        return store

    monkeypatch.setattr(cli, "open_store", fake_open_store)
    return store


@pytest.mark.asyncio
async def test_cli_lists_pins(
    cli_store: SQLiteStore, capsys: pytest.CaptureFixture[str]
) -> None:
    pin = await cli_store.create_pin(
        name="Cafe", latitude=52.2, longitude=21.0, created_by="alice"
    )

    await cli.list_pins()
    output = capsys.readouterr().out

    assert f"ID: {pin.id}, Name: Cafe, Category: Default" in output
    assert "Location: 52.200000,21.000000" in output


@pytest.mark.asyncio
async def test_cli_lists_categories(
    cli_store: SQLiteStore, capsys: pytest.CaptureFixture[str]
) -> None:
    await cli.list_categories()
    lines = capsys.readouterr().out.splitlines()

    assert len(lines) == 6
    assert any("Name: Default, Color: #FF5733" in line for line in lines)


@pytest.mark.asyncio
async def test_cli_init_db(
    cli_store: SQLiteStore, capsys: pytest.CaptureFixture[str]
) -> None:
    await cli.init_db()
    assert "Initialized sqlite store" in capsys.readouterr().out


def test_cli_requires_a_command(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["mappins-cli"])
    with pytest.raises(SystemExit):
        cli.main()


@pytest.mark.asyncio
async def test_cli_api_prints_json(
    store: SQLiteStore, capsys: pytest.CaptureFixture[str]
) -> None:
    transport = ASGITransport(app=create_app(store, realtime=False))

    await cli.api_request(
        "http://test", cli.API_ENDPOINTS["categories"], transport=transport
    )

    categories = json.loads(capsys.readouterr().out)
    assert [c["name"] for c in categories][:2] == ["Completed", "Default"]
    assert len(categories) == 6


@pytest.mark.asyncio
async def test_cli_api_exits_on_error_status(
    capsys: pytest.CaptureFixture[str],
) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503))

    with pytest.raises(SystemExit) as exc_info:
        await cli.api_request("http://test", "/health", transport=transport)

    assert exc_info.value.code == 1
    assert "Request failed with 503" in capsys.readouterr().err
