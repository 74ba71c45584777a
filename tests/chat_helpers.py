"""Test doubles shared by the test modules."""

from __future__ import annotations

from typing import Any

from twitchcmd.core.bot import CommandClient
from twitchcmd.messages import ChatUser

BOT = "testbot"


class FakeTransport:
    """Records every outbound call instead of talking to Twitch."""

    def __init__(self, username: str = BOT) -> None:
        self.username = username
        self.sent: list[tuple[str, str, str]] = []
        self.channels: list[str] = []
        self.listener: Any = None
        self.fail_sends = False

    async def connect(self, listener, channels) -> None:
        self.listener = listener
        await listener.on_connected()
        for channel in channels:
            await self.join(channel)

    async def close(self) -> None:
        if self.listener is not None:
            await self.listener.on_disconnected("closed")
            self.listener = None

    async def _record(self, kind: str, target: str, text: str) -> str:
        if self.fail_sends:
            raise ConnectionError("socket closed")
        self.sent.append((kind, target, text))
        return f"msg-{len(self.sent)}"

    async def say(self, channel: str, text: str) -> str:
        return await self._record("say", channel, text)

    async def action(self, channel: str, text: str) -> str:
        return await self._record("action", channel, text)

    async def whisper(self, user: str, text: str) -> str:
        return await self._record("whisper", user, text)

    async def join(self, channel: str) -> None:
        name = "#" + channel.lstrip("#").lower()
        if name not in self.channels:
            self.channels.append(name)
        if self.listener is not None:
            await self.listener.on_join(name, self.username)

    async def part(self, channel: str) -> None:
        name = "#" + channel.lstrip("#").lower()
        if name in self.channels:
            self.channels.remove(name)

    def get_username(self) -> str:
        return self.username

    def get_channels(self) -> list[str]:
        return list(self.channels)

    def texts(self) -> list[str]:
        return [text for _, _, text in self.sent]


def make_user(username: str = "viewer", **flags: Any) -> ChatUser:
    return ChatUser(username=username, **flags)


async def chat(
    client: CommandClient,
    text: str,
    user: ChatUser | None = None,
    channel: str = "#somechannel",
    **kwargs: Any,
) -> None:
    """Deliver one inbound message and wait for its handler to finish."""
    await client.on_message(channel, user or make_user(), text, False, **kwargs)
    await client.wait_until_idle()
