"""FastAPI application factory"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from twitchcmd import __version__
from twitchcmd.api.routers import commands_router
from twitchcmd.core.bot import CommandClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    app.state.start_time = time.time()
    logger.info("Starting command API server")
    yield
    logger.info("Shutting down command API server")


def create_app(client: CommandClient) -> FastAPI:
    """Create the REST app serving ``client``'s commands"""
    app = FastAPI(
        title="twitchcmd API",
        description="Read and edit chat commands of a running bot",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.client = client
    app.state.start_time = time.time()

    app.include_router(commands_router.router)

    # Liveness probe, plus outbound send statistics
    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "uptime_seconds": int(time.time() - app.state.start_time),
            "connected": client.connected,
            "store": client.store.check_health() if client.store is not None else None,
            "rate_limiter": client.limiter.stats(),
        }

    return app
