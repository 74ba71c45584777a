"""Persisted overrides for built-in commands."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from twitchcmd.commands.descriptor import CommandArgument, normalize_fields

if TYPE_CHECKING:
    from twitchcmd.commands.descriptor import CommandDescriptor

# Descriptor fields a built-in command carries; text and messageType belong to text commands
CONFIG_FIELDS = (
    "group",
    "description",
    "userlevel",
    "aliases",
    "examples",
    "args",
    "bot_channel_only",
    "privmsg_only",
    "hide_from_help",
)


@dataclass
class CommandConfig:
    """Stored options of a built-in command, seeded from its defaults.

    ``description`` and ``examples`` stay None until edited, so the
    command's own prefix-aware defaults keep applying.
    """

    name: str
    group: str = ""
    description: str | None = None
    userlevel: str = "everyone"
    aliases: list[str] = field(default_factory=list)
    examples: list[str] | None = None
    args: list[dict[str, Any]] = field(default_factory=list)
    bot_channel_only: bool = False
    privmsg_only: bool = False
    hide_from_help: bool = False

    @classmethod
    def from_descriptor(cls, descriptor: CommandDescriptor) -> CommandConfig:
        return cls(
            name=descriptor.name,
            group=descriptor.group,
            userlevel=descriptor.userlevel,
            aliases=list(descriptor.aliases),
            args=[a.to_dict() for a in descriptor.args],
            bot_channel_only=descriptor.bot_channel_only,
            privmsg_only=descriptor.privmsg_only,
            hide_from_help=descriptor.hide_from_help,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CommandConfig:
        values = normalize_fields(data)
        return cls(name=values["name"], **{k: values[k] for k in CONFIG_FIELDS if k in values})

    def merge(self, fields: Mapping[str, Any]) -> None:
        """Apply attribute-named edits, keeping ``args`` in wire form."""
        for key, value in fields.items():
            if key == "args":
                value = [CommandArgument.from_dict(a).to_dict() for a in value or []]
            elif isinstance(value, list):
                value = list(value)
            setattr(self, key, value)

    def options(self) -> dict[str, Any]:
        """Attribute-named options, ready for ``CommandDescriptor.update``."""
        values = {key: getattr(self, key) for key in CONFIG_FIELDS}
        return {key: value for key, value in values.items() if value is not None}

    def to_dict(self) -> dict[str, Any]:
        data = {
            "name": self.name,
            "group": self.group,
            "description": self.description,
            "userlevel": self.userlevel,
            "aliases": list(self.aliases),
            "examples": None if self.examples is None else list(self.examples),
            "args": list(self.args),
            "botChannelOnly": self.bot_channel_only,
            "privmsgOnly": self.privmsg_only,
            "hideFromHelp": self.hide_from_help,
        }
        return {key: value for key, value in data.items() if value is not None}
