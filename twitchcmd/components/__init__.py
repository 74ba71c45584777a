"""Built-in chat commands and the default manifest."""

from __future__ import annotations

from collections.abc import Callable

from twitchcmd.commands.descriptor import ChatCommand

from .channels import JoinCommand, PartCommand
from .help import CommandsCommand
from .text_commands import TextCommandsManager

DEFAULT_COMMANDS: dict[str, Callable[..., ChatCommand]] = {
    "commands": CommandsCommand,
    "txt": TextCommandsManager,
    "join": JoinCommand,
    "part": PartCommand,
}

# Registered only when the join command is enabled
CHANNEL_COMMANDS = frozenset({"join", "part"})

__all__ = [
    "CHANNEL_COMMANDS",
    "DEFAULT_COMMANDS",
    "CommandsCommand",
    "JoinCommand",
    "PartCommand",
    "TextCommandsManager",
]
