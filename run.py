"""Entry point for serving the Meditation API.

Starts the FastAPI application under uvicorn.  Host and port come from
the ``APP_HOST`` and ``APP_PORT`` environment variables (defaults
``0.0.0.0`` and ``8000``); the storage backend and everything else is
configured through the variables documented in
``meditation_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from meditation_api.app.core.config import settings
from meditation_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Serving %s on %s:%s", settings.project_name, settings.app_host, settings.app_port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
