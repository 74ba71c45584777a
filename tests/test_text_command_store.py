import json

import pytest

from chat_helpers import FakeTransport, chat, make_user
from twitchcmd.commands.text_command import TextCommand
from twitchcmd.core.bot import CommandClient
from twitchcmd.core.constants import MESSAGE_TYPES, USER_LEVELS
from twitchcmd.core.errors import CommandExists, CommandNotFound, InvalidOption, MissingText
from twitchcmd.core.guards import MODERATOR_MESSAGE
from twitchcmd.shared.database import DocumentStore

OWNER = make_user("owner")


async def test_set_get_unset(client):
    store = client.text_commands
    record = store.set("discord", "join us")
    assert (record.name, record.text, record.userlevel, record.message_type) == (
        "discord",
        "join us",
        "everyone",
        "reply",
    )
    assert isinstance(client.registry.get("discord"), TextCommand)

    store.set("discord", "join us today")
    assert store.get("discord").text == "join us today"
    assert client.registry.get("discord").options.text == "join us today"
    assert len([c for c in client.registry if c.name == "discord"]) == 1

    assert store.unset("discord") is True
    assert store.get("discord") is None
    assert client.registry.get("discord") is None
    assert store.unset("discord") is False


async def test_records_are_written_to_disk(client, settings):
    client.text_commands.set("rules", "be nice")
    client.text_commands.update_message_type("rules", "say")
    data = json.loads((settings.data_dir / "text-commands.json").read_text(encoding="utf-8"))
    assert data == {
        "commands": [
            {"name": "rules", "text": "be nice", "userlevel": "everyone", "messageType": "say"}
        ]
    }


async def test_set_requires_text(client):
    with pytest.raises(MissingText):
        client.text_commands.set("empty", "")
    assert client.registry.get("empty") is None


async def test_builtin_names_are_protected(client):
    with pytest.raises(CommandExists):
        client.text_commands.set("txt", "overwrite")
    assert not isinstance(client.registry.get("txt"), TextCommand)
    assert client.text_commands.get("txt") is None


async def test_builtin_aliases_are_protected(client, transport):
    with pytest.raises(CommandExists):
        client.text_commands.set("help", "spam")
    assert client.text_commands.get("help") is None

    await chat(client, "!txt set help spam", user=OWNER)
    await chat(client, "!help")
    assert transport.texts()[0] == "@owner, Command 'help' already exists and is not a text command"
    assert transport.texts()[1].startswith("@viewer, Command list → ")


async def test_update_validates_choices(client):
    store = client.text_commands
    store.set("foo", "bar")
    with pytest.raises(InvalidOption) as exc:
        store.update_user_level("foo", "admin")
    assert exc.value.choices == USER_LEVELS
    with pytest.raises(InvalidOption) as exc:
        store.update_message_type("foo", "shout")
    assert exc.value.option == "messageType"
    assert exc.value.choices == MESSAGE_TYPES
    assert store.get("foo").userlevel == "everyone"


async def test_update_missing_command(client):
    with pytest.raises(CommandNotFound):
        client.text_commands.update_user_level("ghost", "vip")
    assert client.text_commands.get("ghost") is None


async def test_update_rejects_unknown_fields(client):
    client.text_commands.set("foo", "bar")
    with pytest.raises(AttributeError):
        client.text_commands.update("foo", aliases=["f"])


async def test_records_survive_restart(client, make_settings):
    client.text_commands.set("foo", "bar")
    client.text_commands.update_user_level("foo", "moderator")

    reopened = DocumentStore(make_settings().data_dir)
    reopened.connect()
    fresh = CommandClient(make_settings(), FakeTransport(), store=reopened)
    fresh.register_default_commands()
    fresh.load_stored_commands()
    try:
        live = fresh.registry.get("foo")
        assert isinstance(live, TextCommand)
        assert live.options.userlevel == "moderator"
        assert live.options.text == "bar"
    finally:
        await fresh.close()


async def test_shadowed_records_are_skipped(make_settings, store):
    with store.document("text-commands", lambda: {"commands": []}).transaction() as data:
        data["commands"].append({"name": "commands", "text": "shadowed"})

    client = CommandClient(make_settings(), FakeTransport(), store=store)
    client.register_default_commands()
    client.load_stored_commands()
    try:
        assert not isinstance(client.registry.get("commands"), TextCommand)
        assert len([c for c in client.registry if c.name == "commands"]) == 1
    finally:
        await client.close()


async def test_records_named_after_aliases_are_skipped(make_settings, store):
    with store.document("text-commands", lambda: {"commands": []}).transaction() as data:
        data["commands"].append({"name": "help", "text": "spam"})

    client = CommandClient(make_settings(), FakeTransport(), store=store)
    client.register_default_commands()
    client.load_stored_commands()
    try:
        assert client.registry.get("help") is None
        assert client.registry.find_by_name_or_alias("help") is client.registry.get("commands")
    finally:
        await client.close()


async def test_manager_set_and_run(client, transport):
    await chat(client, "!txt set foo bar baz", user=OWNER)
    assert transport.texts() == ["@owner, Command created → !foo — bar baz"]
    await chat(client, "!foo")
    assert transport.texts()[-1] == "@viewer, bar baz"


async def test_manager_get(client, transport):
    client.text_commands.set("foo", "bar")
    await chat(client, "!txt get foo", user=OWNER)
    await chat(client, "!txt get nope", user=OWNER)
    assert transport.texts() == [
        "@owner, Options → text: bar, userlevel: everyone, messageType: reply",
        "@owner, Command 'nope' is not found",
    ]


async def test_manager_unset(client, transport):
    client.text_commands.set("foo", "bar")
    await chat(client, "!txt unset foo", user=OWNER)
    await chat(client, "!foo")
    assert transport.texts() == ["@owner, Command 'foo' deleted"]


async def test_manager_access(client, transport):
    client.text_commands.set("foo", "bar")
    await chat(client, "!txt access foo admin", user=OWNER)
    await chat(client, "!txt access foo moderator", user=OWNER)
    await chat(client, "!foo")
    assert transport.texts() == [
        f"@owner, Available userlevels: {', '.join(USER_LEVELS)}",
        "@owner, Command 'foo' updated!",
        f"@viewer, {MODERATOR_MESSAGE}",
    ]


@pytest.mark.parametrize(
    "message_type, expected",
    [
        ("reply", ("say", "#somechannel", "@viewer, bar")),
        ("actionReply", ("action", "#somechannel", "@viewer, bar")),
        ("say", ("say", "#somechannel", "bar")),
        ("actionSay", ("action", "#somechannel", "bar")),
    ],
)
async def test_manager_type(client, transport, message_type, expected):
    client.text_commands.set("foo", "bar")
    await chat(client, f"!txt type foo {message_type}", user=OWNER)
    assert transport.texts() == ["@owner, Command 'foo' updated!"]
    await chat(client, "!foo")
    assert transport.sent[-1] == expected


async def test_manager_type_invalid(client, transport):
    client.text_commands.set("foo", "bar")
    await chat(client, "!txt type foo shout", user=OWNER)
    assert transport.texts() == [f"@owner, Available message types: {', '.join(MESSAGE_TYPES)}"]


@pytest.mark.parametrize(
    "text, reply",
    [
        ("!txt", "Manage command is not enough arguments"),
        ("!txt set", "Manage command is not enough arguments"),
        ("!txt rename foo", "Action 'rename' is not found!"),
        ("!txt set foo", "Text argument required"),
        ("!txt access ghost vip", "Command 'ghost' is not found"),
        ("!txt set txt hijack", "Command 'txt' already exists and is not a text command"),
    ],
)
async def test_manager_errors(client, transport, text, reply):
    await chat(client, text, user=OWNER)
    assert transport.texts() == [f"@owner, {reply}"]


async def test_manager_without_store(settings, transport):
    client = CommandClient(settings, transport)
    client.register_default_commands()
    try:
        await chat(client, "!txt set foo bar", user=OWNER)
        assert transport.texts() == ["@owner, Text command provider text-commands is not registered!"]
    finally:
        await client.close()
