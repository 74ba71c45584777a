"""Shared fixtures: a fake chat transport and a client wired to a temp store."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest

from chat_helpers import BOT, FakeTransport
from twitchcmd.core.bot import CommandClient
from twitchcmd.core.config import ClientSettings
from twitchcmd.shared.database import DocumentStore


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., ClientSettings]:
    def factory(**overrides: Any) -> ClientSettings:
        values: dict[str, Any] = {
            "username": BOT,
            "oauth": "secret-token",
            "bot_owners": ["owner"],
            "data_dir": tmp_path / "data",
            "api_enabled": False,
        }
        values.update(overrides)
        return ClientSettings(_env_file=None, **values)

    return factory


@pytest.fixture
def settings(make_settings) -> ClientSettings:
    return make_settings()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store(settings) -> DocumentStore:
    store = DocumentStore(settings.data_dir)
    store.connect()
    return store


@pytest.fixture
async def client(settings, transport, store) -> AsyncIterator[CommandClient]:
    client = CommandClient(settings, transport, store=store)
    client.register_default_commands()
    client.load_stored_commands()
    yield client
    await client.close()
