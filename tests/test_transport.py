from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from twitchcmd.transport.twitch import TwitchTransport, chat_user_from_payload


def make_payload(text, *, channel="somechannel", chatter_id="42", name="Viewer", **flags):
    chatter = SimpleNamespace(
        name=name.lower(),
        display_name=name,
        id=chatter_id,
        broadcaster=flags.get("broadcaster", False),
        moderator=flags.get("moderator", False),
        vip=flags.get("vip", False),
        subscriber=flags.get("subscriber", False),
    )
    return SimpleNamespace(
        id="msg-1",
        text=text,
        chatter=chatter,
        broadcaster=SimpleNamespace(name=channel),
        badges=[SimpleNamespace(set_id="subscriber", id="12")],
    )


@pytest.fixture
def transport():
    transport = TwitchTransport(
        username="TestBot",
        oauth="oauth:secret",
        client_id="cid",
        client_secret="csecret",
        bot_id="1",
    )
    transport._listener = AsyncMock()
    transport._channels["somechannel"] = "100"
    return transport


def test_user_from_payload():
    user = chat_user_from_payload(make_payload("hi", moderator=True, subscriber=True))
    assert user.username == "viewer"
    assert user.display_name == "Viewer"
    assert user.is_moderator and user.is_subscriber
    assert not user.is_vip
    assert user.badges == {"subscriber": "12"}


def test_identity(transport):
    assert transport.get_username() == "testbot"
    assert transport.get_channels() == ["#somechannel"]


async def test_message_is_forwarded(transport):
    await transport.handle_message(make_payload("!commands"))
    transport.listener.on_message.assert_awaited_once()
    args, kwargs = transport.listener.on_message.call_args
    assert args[0] == "#somechannel"
    assert args[1].username == "viewer"
    assert args[2:] == ("!commands", False)
    assert kwargs == {"message_id": "msg-1"}


async def test_own_echo_is_flagged(transport):
    await transport.handle_message(make_payload("hello", chatter_id="1", name="TestBot"))
    args, _ = transport.listener.on_message.call_args
    assert args[3] is True


async def test_unjoined_channel_is_dropped(transport):
    await transport.handle_message(make_payload("!commands", channel="elsewhere"))
    transport.listener.on_message.assert_not_awaited()


async def test_parted_channel_is_dropped(transport):
    await transport.part("#SomeChannel")
    assert transport.get_channels() == []
    await transport.handle_message(make_payload("!commands"))
    transport.listener.on_message.assert_not_awaited()


async def test_whisper_is_forwarded(transport):
    sender = SimpleNamespace(name="viewer", display_name="Viewer", id="42")
    await transport.handle_whisper(SimpleNamespace(id="w-1", text="!help", sender=sender))
    args, kwargs = transport.listener.on_message.call_args
    assert args[0] == "#testbot"
    assert args[2:] == ("!help", False)
    assert kwargs == {"message_type": "whisper", "message_id": "w-1"}


async def test_send_requires_connection(transport):
    with pytest.raises(RuntimeError):
        await transport.say("#somechannel", "hi")
