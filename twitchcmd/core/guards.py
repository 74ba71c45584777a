"""Command access checks: whisper-only, bot-channel-only and userlevel gates."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from twitchcmd.commands.descriptor import CommandDescriptor
    from twitchcmd.messages import ChatMessage, ChatUser

LOGGER = logging.getLogger("CommandGuard")

PRIVMSG_ONLY_MESSAGE = "This command is only available by whispering the bot"
BOT_CHANNEL_ONLY_MESSAGE = "This command can only be used in the bot's channel. Go to https://twitch.tv/{bot}"
REGULAR_MESSAGE = "This command is only available to trusted users"
SUBSCRIBER_MESSAGE = "This command is only available to subscribers"
VIP_MESSAGE = "This command is only available to VIPs"
MODERATOR_MESSAGE = "This command is only available to moderators"
BROADCASTER_MESSAGE = "This command is only available to the broadcaster"


def normalize_channel(name: str) -> str:
    return name.lstrip("#").lower()


@dataclass(frozen=True)
class Verdict:
    allowed: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Verdict(True)


def _deny(message: str) -> Verdict:
    return Verdict(False, message)


class PermissionValidator:
    """Decide whether a message author may run a command.

    ``bot_username`` is a callable so the answer follows the transport's
    current login rather than a value captured at startup.
    """

    def __init__(self, owners: Iterable[str], bot_username: Callable[[], str]) -> None:
        self.owners = [o.lower() for o in owners]
        self._bot_username = bot_username

    def is_owner(self, user: ChatUser | str) -> bool:
        username = user if isinstance(user, str) else user.username
        return username.lower() in self.owners

    def validate(self, descriptor: CommandDescriptor, msg: ChatMessage) -> Verdict:
        if not msg.is_whisper and descriptor.privmsg_only:
            return _deny(PRIVMSG_ONLY_MESSAGE)

        if descriptor.bot_channel_only:
            bot = self._bot_username()
            if normalize_channel(msg.channel.name) != normalize_channel(bot):
                return _deny(BOT_CHANNEL_ONLY_MESSAGE.format(bot=normalize_channel(bot)))

        level = descriptor.userlevel
        if level == "everyone":
            return ALLOW

        author = msg.author
        elevated = author.is_broadcaster or author.is_moderator

        if level == "regular":
            # An empty owner list admits everyone
            if not elevated and self.owners and not self.is_owner(author):
                return _deny(REGULAR_MESSAGE)
        elif level == "subscriber":
            if not elevated and not author.is_subscriber:
                return _deny(SUBSCRIBER_MESSAGE)
        elif level == "vip":
            if not elevated and not author.is_vip:
                return _deny(VIP_MESSAGE)
        elif level == "moderator":
            if not elevated:
                return _deny(MODERATOR_MESSAGE)
        elif level == "broadcaster":
            if not author.is_broadcaster:
                return _deny(BROADCASTER_MESSAGE)
        else:
            LOGGER.debug(f"Unknown userlevel '{level}' on command {descriptor.name}, allowing")

        return ALLOW
