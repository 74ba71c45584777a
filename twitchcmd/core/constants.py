"""Shared constants: bot tiers, access levels, reply modes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class MessageLimit:
    """Outbound send budget for one bot tier."""

    messages: int
    timespan: float


BOT_TYPE_NORMAL = "bot_type_normal"
BOT_TYPE_NORMAL_MODDED = "bot_type_normal_modded"
BOT_TYPE_KNOWN = "bot_type_known"
BOT_TYPE_VERIFIED = "bot_type_verified"

MESSAGE_LIMITS: dict[str, MessageLimit] = {
    BOT_TYPE_NORMAL: MessageLimit(messages=20, timespan=30),
    BOT_TYPE_NORMAL_MODDED: MessageLimit(messages=100, timespan=30),
    BOT_TYPE_KNOWN: MessageLimit(messages=50, timespan=30),
    BOT_TYPE_VERIFIED: MessageLimit(messages=7500, timespan=30),
}

UserLevel = Literal["everyone", "regular", "subscriber", "vip", "moderator", "broadcaster"]
MessageType = Literal["reply", "actionReply", "say", "actionSay"]

USER_LEVELS: tuple[str, ...] = (
    "everyone",
    "regular",
    "subscriber",
    "vip",
    "moderator",
    "broadcaster",
)
MESSAGE_TYPES: tuple[str, ...] = ("reply", "actionReply", "say", "actionSay")

# Twitch chat swallows messages starting with these
RESERVED_PREFIXES = frozenset({"/", "."})

# Delay applied to the bot's own unprivileged messages before dispatch
SELF_MESSAGE_DELAY = 1.0
