from __future__ import annotations

from typing import TYPE_CHECKING, Any

from twitchcmd.commands.descriptor import ChatCommand

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient
    from twitchcmd.messages import ChatMessage


class CommandsCommand(ChatCommand):
    """List visible commands, or show help for one.

    Usage: !commands, !help <command>
    """

    def default_options(self, client: CommandClient) -> dict[str, Any]:
        prefix = client.prefix
        return {
            "name": "commands",
            "group": "system",
            "userlevel": "everyone",
            "description": (
                "Shows the list of all commands. "
                f"Send {prefix}help <command> for details about a command."
            ),
            "aliases": ["help"],
            "examples": [f"{prefix}commands", f"{prefix}help <command>"],
            "args": [{"name": "command"}],
        }

    async def run(self, msg: ChatMessage, parameters: dict[str, Any]) -> str | None:
        command = parameters.get("command")
        if command:
            return await self.command_help(msg, command)
        return await self.command_list(msg)

    async def command_list(self, msg: ChatMessage) -> str | None:
        prefix = self.client.prefix
        names = [prefix + c.name for c in self.client.registry if not c.options.hide_from_help]
        return await msg.reply(f"Command list → {', '.join(names)}")

    async def command_help(self, msg: ChatMessage, name: str) -> str | None:
        selected = next(
            (c for c in self.client.registry if c.name == name and not c.options.hide_from_help),
            None,
        )
        if selected is None:
            return await msg.reply(f"command '{name}' not found")

        text = selected.options.description
        if selected.options.examples:
            text += ", Usage: " + ", ".join(selected.options.examples)
        return await msg.reply(text)
