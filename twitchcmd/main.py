"""Run the command client against Twitch chat, with the REST API on the same loop."""

from __future__ import annotations

import asyncio
import logging
import sys

import uvicorn

from twitchcmd.api.app import create_app
from twitchcmd.core.bot import CommandClient
from twitchcmd.core.config import ClientSettings, validate_settings
from twitchcmd.core.errors import StartupConfigError
from twitchcmd.core.logging import setup_logging
from twitchcmd.shared.database import DocumentStore
from twitchcmd.transport.twitch import TwitchTransport

LOGGER: logging.Logger = logging.getLogger("Bot")


def build_client(settings: ClientSettings, store: DocumentStore) -> CommandClient:
    transport = TwitchTransport(
        username=settings.username,
        oauth=settings.oauth,
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        bot_id=settings.bot_id,
        refresh_token=settings.refresh_token,
    )
    client = CommandClient(settings, transport, store=store)
    client.register_default_commands()
    client.load_stored_commands()
    return client


async def run(settings: ClientSettings) -> None:
    store = DocumentStore(settings.data_dir)
    store.connect()
    client = build_client(settings, store)

    server: uvicorn.Server | None = None
    api_task: asyncio.Task[None] | None = None
    if settings.api_enabled:
        config = uvicorn.Config(
            create_app(client),
            host=settings.api_host,
            port=settings.api_port,
            log_config=None,
        )
        server = uvicorn.Server(config)
        api_task = asyncio.create_task(server.serve())
        LOGGER.info(f"API listening on http://{settings.api_host}:{settings.api_port}")

    try:
        await client.connect()
        # twitchio keeps its websockets in background tasks
        await asyncio.Event().wait()
    finally:
        if server is not None and api_task is not None:
            server.should_exit = True
            await asyncio.gather(api_task, return_exceptions=True)
        await client.close()
        store.disconnect()


def main() -> None:
    try:
        settings = validate_settings()
    except StartupConfigError as e:
        setup_logging()
        LOGGER.error(str(e))
        sys.exit(1)

    setup_logging(settings.log_level, verbose=settings.verbose_logging)

    try:
        asyncio.run(run(settings))
    except StartupConfigError as e:
        LOGGER.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
