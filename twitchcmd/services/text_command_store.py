"""Text command CRUD that keeps the persisted record and the live command equal."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from twitchcmd.commands.descriptor import ChatCommand
from twitchcmd.commands.text_command import TextCommand
from twitchcmd.core.constants import MESSAGE_TYPES, USER_LEVELS
from twitchcmd.core.errors import CommandExists, CommandNotFound, InvalidOption, MissingText
from twitchcmd.shared.models.text_command import TextCommandRecord
from twitchcmd.shared.repositories.text_command import TextCommandRepository

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient

LOGGER = logging.getLogger("TextCommandStore")

# Fields a text command record carries, by attribute name
TEXT_COMMAND_FIELDS = ("text", "userlevel", "message_type")


def _check_choice(option: str, value: Any, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise InvalidOption(option, value, choices)


class TextCommandStore:
    """Persisted text commands mirrored into the client's registry.

    Every mutation runs through ``_write`` under one lock, whether it comes
    from the chat manager or the REST surface.
    """

    def __init__(self, client: CommandClient, repository: TextCommandRepository) -> None:
        self.client = client
        self.repository = repository
        self._lock = threading.RLock()

    def load(self) -> int:
        """Register a live command for every stored record. Returns the count registered."""
        loaded = 0
        with self._lock:
            for record in self.repository.list_commands():
                if self._builtin_for(record.name) is not None:
                    LOGGER.warning(
                        f"Text command '{record.name}' shadowed by built-in command, not loaded"
                    )
                    continue
                self._sync_live(record)
                loaded += 1
        LOGGER.info(f"Loaded {loaded} text commands")
        return loaded

    def get(self, name: str) -> TextCommandRecord | None:
        return self.repository.get(name)

    def set(self, name: str, text: str) -> TextCommandRecord:
        if not text:
            raise MissingText()

        def mutate(record: TextCommandRecord | None) -> TextCommandRecord:
            if record is None:
                return TextCommandRecord(name=name, text=text)
            record.text = text
            return record

        return self._write(name, mutate, create=True)

    def unset(self, name: str) -> bool:
        with self._lock:
            if self.repository.get(name) is None:
                return False
            self.repository.delete(name)
            live = self.client.registry.get(name)
            if isinstance(live, TextCommand):
                self.client.registry.remove(name)
        LOGGER.info(f"Text command '{name}' deleted")
        return True

    def update_user_level(self, name: str, level: str) -> TextCommandRecord:
        return self.update(name, userlevel=level)

    def update_message_type(self, name: str, message_type: str) -> TextCommandRecord:
        return self.update(name, message_type=message_type)

    def update(self, name: str, **fields: Any) -> TextCommandRecord:
        """Partial update of ``text``, ``userlevel`` and ``message_type``."""
        unknown = set(fields) - set(TEXT_COMMAND_FIELDS)
        if unknown:
            raise AttributeError(f"Text commands do not carry: {', '.join(sorted(unknown))}")
        if "userlevel" in fields:
            _check_choice("userlevel", fields["userlevel"], USER_LEVELS)
        if "message_type" in fields:
            _check_choice("messageType", fields["message_type"], MESSAGE_TYPES)
        if "text" in fields and not fields["text"]:
            raise MissingText()

        def mutate(record: TextCommandRecord | None) -> TextCommandRecord:
            if record is None:
                raise CommandNotFound(name)
            for key, value in fields.items():
                setattr(record, key, value)
            return record

        return self._write(name, mutate)

    def _write(
        self,
        name: str,
        mutate: Callable[[TextCommandRecord | None], TextCommandRecord],
        *,
        create: bool = False,
    ) -> TextCommandRecord:
        with self._lock:
            if self._builtin_for(name) is not None:
                raise CommandExists(name)
            current = self.repository.get(name)
            if current is None and not create:
                raise CommandNotFound(name)
            record = mutate(current)
            self.repository.upsert(record)
            self._sync_live(record)
        LOGGER.info(f"Text command '{name}' saved")
        return record

    def _builtin_for(self, name: str) -> ChatCommand | None:
        """The non-text command ``name`` resolves to, by name or alias."""
        command = self.client.registry.find_by_name_or_alias(name)
        if command is None or isinstance(command, TextCommand):
            return None
        return command

    def _sync_live(self, record: TextCommandRecord) -> None:
        live = self.client.registry.get(record.name)
        if isinstance(live, TextCommand):
            self.client.registry.update_partial(
                record.name,
                text=record.text,
                userlevel=record.userlevel,
                message_type=record.message_type,
            )
        else:
            self.client.registry.register(TextCommand.from_record(self.client, record))
