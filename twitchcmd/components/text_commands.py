"""Chat-based text command management: !txt set/get/unset/access/type.

Syntax:
    !txt set <name> <text...>         Create a text command or replace its text
    !txt get <name>                   Show a text command's options
    !txt unset <name>                 Delete a text command
    !txt access <name> <userlevel>    Change who may run it
    !txt type <name> <messageType>    Change how it replies

Examples:
    !txt set discord Join us at https://discord.gg/example
    !txt access discord subscriber
    !txt type discord actionSay
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from twitchcmd.commands.descriptor import ChatCommand
from twitchcmd.core.constants import MESSAGE_TYPES, USER_LEVELS
from twitchcmd.core.errors import (
    CommandExists,
    CommandNotFound,
    InvalidOption,
    MissingText,
    TextCommandStoreMissing,
)

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient
    from twitchcmd.messages import ChatMessage
    from twitchcmd.services.text_command_store import TextCommandStore

LOGGER = logging.getLogger("TextCommandsManager")


class TextCommandsManager(ChatCommand):
    def default_options(self, client: CommandClient) -> dict[str, Any]:
        return {
            "name": "txt",
            "group": "system",
            "userlevel": "regular",
            "description": "Manages text commands.",
            "examples": [
                f"{client.prefix}txt set <name> <text>",
                f"{client.prefix}txt get <name>",
                f"{client.prefix}txt unset <name>",
                f"{client.prefix}txt access <name> <userlevel>",
                f"{client.prefix}txt type <name> <messageType>",
            ],
        }

    @property
    def store(self) -> TextCommandStore:
        store = self.client.text_commands
        if store is None:
            raise TextCommandStoreMissing()
        return store

    async def prepare_run(self, msg: ChatMessage, args: list[str]) -> str | None:
        """Dispatch on the raw arguments; the manager declares no argument schema."""
        if self.client.text_commands is None:
            return await msg.reply(str(TextCommandStoreMissing()))

        if len(args) < 2:
            return await msg.reply("Manage command is not enough arguments")

        action, name, *rest = args
        opts = " ".join(rest)

        if action == "set":
            return await self.set(msg, name, opts)
        if action == "get":
            return await self.get(msg, name)
        if action == "unset":
            return await self.unset(msg, name)
        if action == "access":
            return await self.update_user_level(msg, name, opts)
        if action == "type":
            return await self.update_message_type(msg, name, opts)
        return await msg.reply(f"Action '{action}' is not found!")

    async def set(self, msg: ChatMessage, name: str, text: str) -> str | None:
        try:
            self.store.set(name, text)
        except (MissingText, CommandExists) as e:
            return await msg.reply(str(e))
        LOGGER.info(f"{msg.author.username} set text command {name}")
        return await msg.reply(f"Command created → {self.client.prefix}{name} — {text}")

    async def get(self, msg: ChatMessage, name: str) -> str | None:
        record = self.store.get(name)
        if record is None:
            return await msg.reply(str(CommandNotFound(name)))
        return await msg.reply(
            f"Options → text: {record.text}, userlevel: {record.userlevel}, "
            f"messageType: {record.message_type}"
        )

    async def unset(self, msg: ChatMessage, name: str) -> str | None:
        if not self.store.unset(name):
            return await msg.reply(str(CommandNotFound(name)))
        LOGGER.info(f"{msg.author.username} deleted text command {name}")
        return await msg.reply(f"Command '{name}' deleted")

    async def update_user_level(self, msg: ChatMessage, name: str, level: str) -> str | None:
        try:
            self.store.update_user_level(name, level)
        except InvalidOption:
            return await msg.reply(f"Available userlevels: {', '.join(USER_LEVELS)}")
        except (CommandNotFound, CommandExists) as e:
            return await msg.reply(str(e))
        return await msg.reply(f"Command '{name}' updated!")

    async def update_message_type(self, msg: ChatMessage, name: str, message_type: str) -> str | None:
        try:
            self.store.update_message_type(name, message_type)
        except InvalidOption:
            return await msg.reply(f"Available message types: {', '.join(MESSAGE_TYPES)}")
        except (CommandNotFound, CommandExists) as e:
            return await msg.reply(str(e))
        return await msg.reply(f"Command '{name}' updated!")
