"""Ordered, lock-protected collection of chat commands."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import Any

from twitchcmd.commands.descriptor import ChatCommand

LOGGER = logging.getLogger("CommandRegistry")


class CommandRegistry:
    """Commands in registration order.

    Duplicate names are accepted; lookups return the first registered match.
    """

    def __init__(self) -> None:
        self._commands: list[ChatCommand] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._commands)

    def __iter__(self) -> Iterator[ChatCommand]:
        return iter(self.snapshot())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def snapshot(self) -> list[ChatCommand]:
        with self._lock:
            return list(self._commands)

    def register(self, command: ChatCommand) -> ChatCommand:
        with self._lock:
            clash = self.get(command.name)
            if clash is not None:
                LOGGER.warning(
                    f"Command name '{command.name}' already registered as {clash!r}; "
                    "the earlier registration wins"
                )
            else:
                shadowed = self._alias_owner(command.name)
                if shadowed is not None:
                    # Name matches are tried before aliases
                    LOGGER.warning(
                        f"Command name '{command.name}' takes over an alias of {shadowed!r}"
                    )
            for alias in command.options.aliases:
                owner = self._find_unlocked(alias)
                if owner is not None:
                    LOGGER.warning(f"Alias '{alias}' of '{command.name}' shadowed by {owner!r}")
            self._commands.append(command)
        LOGGER.info(f"Register command {command.name}")
        return command

    def get(self, name: str) -> ChatCommand | None:
        """Exact name match only."""
        with self._lock:
            for command in self._commands:
                if command.name == name:
                    return command
            return None

    def find_by_name_or_alias(self, token: str) -> ChatCommand | None:
        with self._lock:
            return self._find_unlocked(token)

    def _alias_owner(self, token: str) -> ChatCommand | None:
        for command in self._commands:
            if token in command.options.aliases:
                return command
        return None

    def _find_unlocked(self, token: str) -> ChatCommand | None:
        for command in self._commands:
            if command.name == token:
                return command
        return self._alias_owner(token)

    def remove(self, name: str) -> bool:
        """Drop every command registered under ``name``. Returns True if any was removed."""
        with self._lock:
            before = len(self._commands)
            self._commands = [c for c in self._commands if c.name != name]
            removed = len(self._commands) != before
        if removed:
            LOGGER.info(f"Removed command {name}")
        return removed

    def update_partial(self, name: str, /, **fields: Any) -> ChatCommand | None:
        """Merge ``fields`` into the options of the command named ``name``."""
        with self._lock:
            command = self.get(name)
            if command is None:
                return None
            command.options.update(**fields)
            return command
