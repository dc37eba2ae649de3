"""CLI tool for Map Pins."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import httpx

from mappins.config import config
from mappins.store import open_store


async def init_db() -> None:
    """Create tables and seed the default categories."""
    store = await open_store(config)
    try:
        print(f"Initialized {store.backend_name} store")
    finally:
        await store.close()


async def list_pins() -> None:
    """List all pins."""
    store = await open_store(config)
    try:
        for pin in await store.list_pins():
            print(
                f"ID: {pin.id}, Name: {pin.name}, Category: {pin.category}, "
                f"Location: {pin.latitude:.6f},{pin.longitude:.6f}"
            )
    finally:
        await store.close()


async def list_categories() -> None:
    """List all categories."""
    store = await open_store(config)
    try:
        for category in await store.list_categories():
            print(f"ID: {category.id}, Name: {category.name}, Color: {category.color}")
    finally:
        await store.close()


async def api_request(
    url: str, endpoint: str, transport: httpx.AsyncBaseTransport | None = None
) -> None:
    """Fetch an endpoint from a running server and print the JSON."""
    async with httpx.AsyncClient(base_url=url, transport=transport) as client:
        response = await client.get(endpoint)

    if response.status_code != 200:
        print(f"Request failed with {response.status_code}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(response.json(), indent=2, ensure_ascii=False))


API_ENDPOINTS = {
    "pins": "/api/pins",
    "categories": "/api/pins/categories/all",
    "health": "/health",
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Map Pins CLI tool.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create tables and default categories")
    subparsers.add_parser("pins", help="List pins in the configured store")
    subparsers.add_parser("categories", help="List categories")

    api_parser = subparsers.add_parser("api", help="Query a running server")
    api_parser.add_argument(
        "--url",
        default=f"http://{config.HOST}:{config.PORT}",
        help="Base URL of the server",
    )
    api_parser.add_argument("endpoint", choices=sorted(API_ENDPOINTS))

    args = parser.parse_args()

    if args.command == "init-db":
        asyncio.run(init_db())
    elif args.command == "pins":
        asyncio.run(list_pins())
    elif args.command == "categories":
        asyncio.run(list_categories())
    elif args.command == "api":
        asyncio.run(api_request(args.url, API_ENDPOINTS[args.endpoint]))


if __name__ == "__main__":
    main()
