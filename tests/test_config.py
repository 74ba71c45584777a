import logging

import pytest
from pydantic import ValidationError
from rich.logging import RichHandler

from chat_helpers import FakeTransport
from twitchcmd.core.bot import CommandClient
from twitchcmd.core.config import ClientSettings, get_settings, validate_settings
from twitchcmd.core.constants import BOT_TYPE_VERIFIED
from twitchcmd.core.errors import StartupConfigError
from twitchcmd.core.logging import LIBRARY_LEVELS, setup_logging


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ("BOT_USERNAME", "BOT_OAUTH", "BOT_BOT_TYPE", "BOT_CHANNELS", "BOT_BOT_OWNERS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setitem(ClientSettings.model_config, "env_file", None)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_defaults(make_settings):
    settings = make_settings()
    assert settings.prefix == "!"
    assert settings.bot_type == "bot_type_normal"
    assert settings.enable_rate_limiting_control is True
    assert settings.channels == []


@pytest.mark.parametrize("prefix", ["/", ".", ""])
def test_reserved_prefix_rejected(make_settings, prefix):
    with pytest.raises(ValidationError):
        make_settings(prefix=prefix)


def test_unknown_bot_type_rejected(make_settings):
    with pytest.raises(ValidationError):
        make_settings(bot_type="bot_type_huge")


def test_blank_credentials_rejected(make_settings):
    with pytest.raises(ValidationError):
        make_settings(oauth="   ")


def test_log_level_falls_back(make_settings):
    assert make_settings(log_level="debug").log_level == "DEBUG"
    assert make_settings(log_level="chatty").log_level == "INFO"


def test_environment_lists(clean_env):
    clean_env.setenv("BOT_USERNAME", "TestBot")
    clean_env.setenv("BOT_OAUTH", "token")
    clean_env.setenv("BOT_CHANNELS", "#one, two ,")
    clean_env.setenv("BOT_BOT_OWNERS", "Alice,bob")
    clean_env.setenv("BOT_BOT_TYPE", BOT_TYPE_VERIFIED)
    settings = validate_settings()
    assert settings.username == "TestBot"
    assert settings.channels == ["#one", "two"]
    assert settings.bot_owners == ["Alice", "bob"]
    assert settings.bot_type == BOT_TYPE_VERIFIED


def test_validate_settings_reports_problems(clean_env):
    clean_env.setenv("BOT_USERNAME", "testbot")
    clean_env.setenv("BOT_OAUTH", "token")
    clean_env.setenv("BOT_BOT_TYPE", "nope")
    with pytest.raises(StartupConfigError) as exc:
        validate_settings()
    assert "bot_type" in str(exc.value)


def test_validate_settings_missing_credentials(clean_env):
    with pytest.raises(StartupConfigError) as exc:
        validate_settings()
    assert "username" in str(exc.value)
    assert "oauth" in str(exc.value)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"username": ""}, "Username not specified"),
        ({"oauth": ""}, "Oauth password not specified"),
        ({"prefix": "/"}, "Invalid prefix. Cannot be '/'"),
        ({"bot_type": "nope"}, "Unknown bot_type 'nope'"),
    ],
)
def test_check_options(settings, overrides, message):
    # model_construct skips validation, as a hand-built settings object would
    broken = ClientSettings.model_construct(**{**settings.model_dump(), **overrides})
    client = CommandClient(settings, FakeTransport())
    client.settings = broken
    with pytest.raises(StartupConfigError, match=message):
        client.check_options()


@pytest.mark.parametrize(
    "level_name, verbose, root_level, http_level",
    [
        ("INFO", False, logging.INFO, logging.WARNING),
        ("WARNING", True, logging.DEBUG, logging.DEBUG),
    ],
)
def test_setup_logging(monkeypatch, level_name, verbose, root_level, http_level):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    for name in LIBRARY_LEVELS:
        monkeypatch.setattr(logging.getLogger(name), "level", logging.NOTSET)

    setup_logging(level_name, verbose=verbose)

    assert calls[0]["level"] == root_level
    assert isinstance(calls[0]["handlers"][0], RichHandler)
    assert logging.getLogger("twitchio.http").level == http_level
    assert logging.getLogger("asyncio").level == logging.ERROR
