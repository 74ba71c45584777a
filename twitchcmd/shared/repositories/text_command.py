"""Repository for the text-commands document."""

from __future__ import annotations

import logging
from typing import Any

from twitchcmd.shared.database import Document, DocumentStore
from twitchcmd.shared.models.text_command import TextCommandRecord

logger = logging.getLogger(__name__)

DOCUMENT_NAME = "text-commands"


def _default_document() -> dict[str, Any]:
    return {"commands": []}


class TextCommandRepository:
    """Record-level access to ``text-commands.json``."""

    def __init__(self, store: DocumentStore) -> None:
        self.document: Document = store.document(DOCUMENT_NAME, _default_document)

    def list_commands(self) -> list[TextCommandRecord]:
        return [TextCommandRecord.from_dict(c) for c in self.document.read()["commands"]]

    def get(self, name: str) -> TextCommandRecord | None:
        for item in self.document.read()["commands"]:
            if item.get("name") == name:
                return TextCommandRecord.from_dict(item)
        return None

    def upsert(self, record: TextCommandRecord) -> TextCommandRecord:
        with self.document.transaction() as data:
            commands: list[dict[str, Any]] = data["commands"]
            for i, item in enumerate(commands):
                if item.get("name") == record.name:
                    commands[i] = record.to_dict()
                    break
            else:
                commands.append(record.to_dict())
        return record

    def delete(self, name: str) -> bool:
        with self.document.transaction() as data:
            before = len(data["commands"])
            data["commands"] = [c for c in data["commands"] if c.get("name") != name]
            deleted = len(data["commands"]) != before
        if deleted:
            logger.debug(f"Deleted text command record {name}")
        return deleted
