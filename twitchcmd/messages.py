"""Chat-side views of an inbound message: author, channel and reply helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient


@dataclass
class ChatUser:
    """The author of a chat message as seen by the access checks."""

    username: str
    display_name: str = ""
    id: str = ""
    badges: dict[str, str] = field(default_factory=dict)
    is_broadcaster: bool = False
    is_moderator: bool = False
    is_vip: bool = False
    is_subscriber: bool = False

    def __post_init__(self) -> None:
        self.username = self.username.lower()
        if not self.display_name:
            self.display_name = self.username

    @property
    def channel(self) -> str:
        return "#" + self.username


@dataclass
class ChatChannel:
    name: str
    id: str = ""


class ChatMessage:
    """One inbound message, bound to the client that received it."""

    def __init__(
        self,
        client: CommandClient,
        channel: ChatChannel | str,
        author: ChatUser,
        text: str,
        *,
        message_type: str = "chat",
        message_id: str = "",
    ) -> None:
        self.client = client
        self.channel = channel if isinstance(channel, ChatChannel) else ChatChannel(channel)
        self.author = author
        self.text = text
        self.message_type = message_type
        self.id = message_id
        self.timestamp = datetime.now()

    def __repr__(self) -> str:
        return (
            f"<ChatMessage channel={self.channel.name!r} author={self.author.username!r} "
            f"type={self.message_type!r} text={self.text!r}>"
        )

    @property
    def is_whisper(self) -> bool:
        return self.message_type == "whisper"

    async def reply(self, text: str) -> str | None:
        """Reply to the author: whisper back, or ``@display, text`` in the channel."""
        if self.is_whisper:
            return await self.client.whisper(self.author.username, text)
        return await self.client.say(self.channel.name, f"@{self.author.display_name}, {text}")

    async def send(self, text: str) -> str | None:
        return await self.client.say(self.channel.name, text)

    async def action_reply(self, text: str) -> str | None:
        return await self.client.action(self.channel.name, f"@{self.author.display_name}, {text}")

    async def action_send(self, text: str) -> str | None:
        return await self.client.action(self.channel.name, text)

    async def respond(self, text: str, message_type: str) -> str | None:
        """Deliver ``text`` using one of the text command reply modes."""
        if message_type == "actionReply":
            return await self.action_reply(text)
        if message_type == "say":
            return await self.send(text)
        if message_type == "actionSay":
            return await self.action_send(text)
        return await self.reply(text)
