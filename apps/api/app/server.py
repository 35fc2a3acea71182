"""Console entrypoint: configure logging and serve the app with uvicorn."""
from __future__ import annotations

import asyncio
import logging

import uvicorn

from .core.config import get_settings
from .core.supervisor import install_fatal_handler
from .main import app

GRACEFUL_SHUTDOWN_SECONDS = 30


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def serve() -> None:
    settings = get_settings()
    install_fatal_handler()
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        timeout_graceful_shutdown=GRACEFUL_SHUTDOWN_SECONDS,
    )
    # uvicorn traps SIGINT/SIGTERM and drains in-flight connections before returning.
    await uvicorn.Server(config).serve()


def main() -> None:
    configure_logging(get_settings().log_level)
    asyncio.run(serve())


if __name__ == "__main__":
    main()
