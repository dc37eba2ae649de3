"""Main entry point for the Map Pins server."""


def main() -> None:
    """Run the Map Pins application with uvicorn."""
    import uvicorn

    from mappins.config import config

    # uvicorn handles SIGINT/SIGTERM; the lifespan closes the store and
    # connections still open after the timeout are dropped.
    uvicorn.run(
        "mappins.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=False,
        timeout_graceful_shutdown=int(config.SHUTDOWN_TIMEOUT),
    )


if __name__ == "__main__":
    main()
