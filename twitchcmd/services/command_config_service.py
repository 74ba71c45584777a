"""Command config service: the single write path for REST edits of live commands."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from twitchcmd.commands.descriptor import ChatCommand, normalize_fields
from twitchcmd.commands.text_command import TextCommand
from twitchcmd.core.constants import MESSAGE_TYPES, USER_LEVELS
from twitchcmd.core.errors import (
    AliasConflict,
    CommandNotFound,
    InvalidOption,
    TextCommandStoreMissing,
    UnsupportedFields,
)
from twitchcmd.services.text_command_store import TEXT_COMMAND_FIELDS
from twitchcmd.shared.models.command_config import CONFIG_FIELDS, CommandConfig
from twitchcmd.shared.repositories.command_config import CommandConfigRepository

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient

logger = logging.getLogger(__name__)


class CommandConfigService:
    """Reads and partial updates of commands, persisted and live together."""

    def __init__(self, client: CommandClient, repository: CommandConfigRepository) -> None:
        self.client = client
        self.repository = repository
        self._lock = threading.RLock()

    def bootstrap(self) -> int:
        """Seed stored configs for built-in commands and apply stored overrides.

        Returns the number of built-in commands synchronised.
        """
        builtins = [c for c in self.client.registry if not isinstance(c, TextCommand)]
        with self._lock:
            stored = self.repository.ensure_defaults(
                CommandConfig.from_descriptor(c.options) for c in builtins
            )
            for command, config in zip(builtins, stored):
                command.options.update(**config.options())
        logger.info(f"Synchronised {len(builtins)} built-in command configs")
        return len(builtins)

    def list_commands(self) -> list[dict[str, Any]]:
        return [c.options.to_dict() for c in self.client.registry]

    def get_command(self, name: str) -> dict[str, Any]:
        command = self.client.registry.get(name)
        if command is None:
            raise CommandNotFound(name)
        return command.options.to_dict()

    def update_command(self, name: str, body: Mapping[str, Any]) -> dict[str, Any]:
        """Merge ``body`` (wire or attribute keys) into the command named ``name``."""
        fields = normalize_fields(body)
        new_name = fields.pop("name", name)
        if new_name != name:
            raise InvalidOption("name", new_name, (name,))

        command = self.client.registry.get(name)
        if command is None:
            raise CommandNotFound(name)

        if "userlevel" in fields and fields["userlevel"] not in USER_LEVELS:
            raise InvalidOption("userlevel", fields["userlevel"], USER_LEVELS)
        if "message_type" in fields and fields["message_type"] not in MESSAGE_TYPES:
            raise InvalidOption("messageType", fields["message_type"], MESSAGE_TYPES)

        if isinstance(command, TextCommand):
            return self._update_text_command(name, fields)
        return self._update_builtin(command, fields)

    def _update_text_command(self, name: str, fields: dict[str, Any]) -> dict[str, Any]:
        unsupported = sorted(set(fields) - set(TEXT_COMMAND_FIELDS))
        if unsupported:
            raise UnsupportedFields(name, unsupported)
        store = self.client.text_commands
        if store is None:
            raise TextCommandStoreMissing()
        store.update(name, **fields)
        logger.info(f"Text command '{name}' updated via API")
        return self.get_command(name)

    def _update_builtin(self, command: ChatCommand, fields: dict[str, Any]) -> dict[str, Any]:
        options = command.options
        unsupported = sorted(set(fields) - set(CONFIG_FIELDS))
        if unsupported:
            raise UnsupportedFields(options.name, unsupported)
        with self._lock:
            for alias in fields.get("aliases") or []:
                owner = self.client.registry.find_by_name_or_alias(alias)
                if owner is not None and owner is not command:
                    raise AliasConflict(alias, owner.name)
            options.update(**fields)
            # description and examples are stored only once edited
            config = self.repository.get_config(options.name) or CommandConfig.from_descriptor(options)
            config.merge(fields)
            self.repository.upsert_config(config)
        logger.info(f"Command '{options.name}' updated via API")
        return options.to_dict()
