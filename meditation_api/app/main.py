"""
Main entrypoint for the Meditation API.

This module assembles the FastAPI application, sets up logging,
chooses the storage backend and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn meditation_api.app.main:app --reload

The backend is picked once, from ``settings.store_backend``, unless a
store is passed to ``create_app`` explicitly (as the tests do).
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.dynamodb import get_client, init_table
from .core.logging_config import setup_logging
from .storage.base import MeditationStore
from .storage.dynamodb import DynamoDBMeditationStore
from .storage.memory import InMemoryMeditationStore

logger = logging.getLogger(__name__)


def build_store(config: Settings = settings) -> MeditationStore:
    """Create the store selected by ``config.store_backend``.

    Raises ``ValueError`` for an unknown backend name.
    """
    backend = config.store_backend.lower()
    if backend == "memory":
        return InMemoryMeditationStore()
    if backend == "dynamodb":
        client = get_client(config.aws_region, config.dynamodb_endpoint_url)
        return DynamoDBMeditationStore(
            client,
            config.dynamodb_table,
            use_transactions=config.dynamodb_transactions,
        )
    raise ValueError(f"Unknown store backend {config.store_backend!r}")


def create_app(store: Optional[MeditationStore] = None, config: Settings = settings) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[MeditationStore]
        Backend to use.  Built from ``config`` when omitted.
    config : Settings
        Settings to read; defaults to the process-wide ``settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(config.log_level, config.log_file or None, verbose_sdk=config.debug)

    app = FastAPI(title=config.project_name, version=config.api_version, debug=config.debug)
    provision_table = store is None and config.store_backend.lower() == "dynamodb" and config.dynamodb_create_table
    app.state.store = store if store is not None else build_store(config)
    logger.info("Using %s", type(app.state.store).__name__)

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Only for a DynamoDB store built from settings, and only when
        # explicitly enabled.  The waiter blocks, so keep it off the loop.
        if provision_table:
            await run_in_threadpool(init_table, app.state.store.client, config.dynamodb_table)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        # Last chance to clear entries left by failed relocations; the
        # store only remembers them in memory.
        await run_in_threadpool(app.state.store.repair_stale_entries)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
