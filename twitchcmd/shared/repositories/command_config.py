"""Repository for the commands document (built-in command overrides)."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from twitchcmd.shared.database import Document, DocumentStore
from twitchcmd.shared.models.command_config import CommandConfig

logger = logging.getLogger(__name__)

DOCUMENT_NAME = "commands"


def _default_document() -> dict[str, Any]:
    return {"commands": []}


class CommandConfigRepository:
    """Record-level access to ``commands.json``."""

    def __init__(self, store: DocumentStore) -> None:
        self.document: Document = store.document(DOCUMENT_NAME, _default_document)

    def get_config(self, name: str) -> CommandConfig | None:
        for item in self.document.read()["commands"]:
            if item.get("name") == name:
                return CommandConfig.from_dict(item)
        return None

    def upsert_config(self, config: CommandConfig) -> CommandConfig:
        with self.document.transaction() as data:
            commands: list[dict[str, Any]] = data["commands"]
            for i, item in enumerate(commands):
                if item.get("name") == config.name:
                    commands[i] = config.to_dict()
                    break
            else:
                commands.append(config.to_dict())
        return config

    def ensure_defaults(self, defaults: Iterable[CommandConfig]) -> list[CommandConfig]:
        """Insert defaults for commands not yet stored. Returns the stored configs, in order."""
        result: list[CommandConfig] = []
        seeded: list[str] = []
        with self.document.transaction() as data:
            stored = {item.get("name"): item for item in data["commands"]}
            for config in defaults:
                existing = stored.get(config.name)
                if existing is None:
                    data["commands"].append(config.to_dict())
                    seeded.append(config.name)
                    result.append(config)
                else:
                    result.append(CommandConfig.from_dict(existing))
        if seeded:
            logger.info(f"Seeded {len(seeded)} command configs: {', '.join(seeded)}")
        return result
