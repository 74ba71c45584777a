"""Persisted text command record."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass
class TextCommandRecord:
    name: str
    text: str
    userlevel: str = "everyone"
    message_type: str = "reply"  # 'reply' | 'actionReply' | 'say' | 'actionSay'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TextCommandRecord:
        return cls(
            name=data["name"],
            text=data.get("text") or "",
            userlevel=data.get("userlevel") or "everyone",
            message_type=data.get("messageType") or data.get("message_type") or "reply",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "text": self.text,
            "userlevel": self.userlevel,
            "messageType": self.message_type,
        }
