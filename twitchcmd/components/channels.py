"""Bot-channel commands that move the bot in and out of the caller's channel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from twitchcmd.commands.descriptor import ChatCommand

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient
    from twitchcmd.messages import ChatMessage

LOGGER = logging.getLogger("ChannelCommands")


class JoinCommand(ChatCommand):
    def default_options(self, client: CommandClient) -> dict[str, Any]:
        return {
            "name": "join",
            "group": "system",
            "description": "Invites the bot into your channel.",
            "examples": [f"{client.prefix}join"],
            "bot_channel_only": True,
        }

    async def run(self, msg: ChatMessage, parameters: dict[str, Any]) -> str | None:
        channel = msg.author.channel
        if channel in self.client.get_channels():
            return await msg.reply(f"Already in {channel}")
        try:
            await self.client.join(channel)
        except Exception as e:
            LOGGER.warning(f"Failed to join {channel}: {e}")
            return await msg.reply(f"Failed to join {channel}")
        LOGGER.info(f"Joined {channel} on request of {msg.author.username}")
        return await msg.reply(f"Joined {channel}")


class PartCommand(ChatCommand):
    def default_options(self, client: CommandClient) -> dict[str, Any]:
        return {
            "name": "part",
            "group": "system",
            "description": "Removes the bot from your channel.",
            "examples": [f"{client.prefix}part"],
            "bot_channel_only": True,
        }

    async def run(self, msg: ChatMessage, parameters: dict[str, Any]) -> str | None:
        channel = msg.author.channel
        if channel not in self.client.get_channels():
            return await msg.reply(f"Not in {channel}")
        await self.client.part(channel)
        LOGGER.info(f"Left {channel} on request of {msg.author.username}")
        return await msg.reply(f"Left {channel}")
