"""Command descriptors and the base class every chat command derives from."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from twitchcmd.commands.arguments import bind

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient
    from twitchcmd.core.guards import Verdict
    from twitchcmd.messages import ChatMessage

LOGGER = logging.getLogger("Commands")

# Wire names (REST bodies, JSON documents) -> attribute names
FIELD_ALIASES: dict[str, str] = {
    "botChannelOnly": "bot_channel_only",
    "privmsgOnly": "privmsg_only",
    "hideFromHelp": "hide_from_help",
    "messageType": "message_type",
    "defaultValue": "default",
}
_WIRE_NAMES = {v: k for k, v in FIELD_ALIASES.items()}


def normalize_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase wire keys to attribute names, leaving others untouched."""
    return {FIELD_ALIASES.get(key, key): value for key, value in data.items()}


@dataclass
class CommandArgument:
    """One named positional argument. ``type`` is string, number or boolean."""

    name: str
    type: str = "string"
    default: str | int | float | bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | CommandArgument) -> CommandArgument:
        if isinstance(data, CommandArgument):
            return data
        return cls(**normalize_fields(data))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type, "defaultValue": self.default}


@dataclass
class CommandDescriptor:
    """Static definition of a command: identity, access rule, arguments, flags."""

    name: str
    group: str = ""
    description: str = ""
    userlevel: str = "everyone"
    aliases: list[str] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)
    args: list[CommandArgument] = field(default_factory=list)
    bot_channel_only: bool = False
    privmsg_only: bool = False
    hide_from_help: bool = False
    message_type: str = "reply"
    text: str | None = None

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CommandDescriptor:
        values = normalize_fields(data)
        unknown = set(values) - cls.field_names()
        if unknown:
            LOGGER.warning(f"Ignoring unknown command options: {', '.join(sorted(unknown))}")
        values = {k: v for k, v in values.items() if k not in unknown}
        values["args"] = [CommandArgument.from_dict(a) for a in values.get("args") or []]
        values["aliases"] = list(values.get("aliases") or [])
        values["examples"] = list(values.get("examples") or [])
        return cls(**values)

    def update(self, **changes: Any) -> None:
        """Merge option changes in place. The name is the identity and never changes."""
        changes.pop("name", None)
        for key, value in changes.items():
            if key not in self.field_names():
                raise AttributeError(f"Unknown command option '{key}'")
            if key == "args":
                value = [CommandArgument.from_dict(a) for a in value or []]
            setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "args":
                value = [a.to_dict() for a in value]
            elif isinstance(value, list):
                value = list(value)
            data[_WIRE_NAMES.get(f.name, f.name)] = value
        return data


class ChatCommand:
    """Base chat command. Subclasses override ``run`` (or ``prepare_run`` for raw args)."""

    def __init__(
        self,
        client: CommandClient,
        options: CommandDescriptor | Mapping[str, Any] | None = None,
    ) -> None:
        self.client = client
        if isinstance(options, CommandDescriptor):
            self.options = options
        else:
            merged = {**self.default_options(client), **normalize_fields(options or {})}
            self.options = CommandDescriptor.from_dict(merged)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.options.name!r}>"

    def default_options(self, client: CommandClient) -> dict[str, Any]:
        """Options merged under caller-supplied ones at construction time."""
        return {}

    @property
    def name(self) -> str:
        return self.options.name

    def pre_validate(self, msg: ChatMessage) -> Verdict:
        return self.client.validator.validate(self.options, msg)

    async def prepare_run(self, msg: ChatMessage, args: list[str]) -> Any:
        """Bind positional args to the declared schema, then run."""
        parameters = bind(self.options.args, args)
        return await self.run(msg, parameters)

    async def run(self, msg: ChatMessage, parameters: dict[str, Any]) -> Any:
        return None

    async def execute(self, msg: ChatMessage) -> Any:
        """Hook for ``CommandClient.execute_command_method``."""
        return None
