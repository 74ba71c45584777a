from __future__ import annotations

from typing import TYPE_CHECKING, Any

from twitchcmd.commands.descriptor import ChatCommand, CommandDescriptor

if TYPE_CHECKING:
    from twitchcmd.core.bot import CommandClient
    from twitchcmd.messages import ChatMessage
    from twitchcmd.shared.models.text_command import TextCommandRecord


class TextCommand(ChatCommand):
    """A command whose whole behaviour is replying with a fixed text."""

    @classmethod
    def from_record(cls, client: CommandClient, record: TextCommandRecord) -> TextCommand:
        return cls(
            client,
            CommandDescriptor(
                name=record.name,
                group="text",
                text=record.text,
                userlevel=record.userlevel,
                message_type=record.message_type,
            ),
        )

    async def run(self, msg: ChatMessage, parameters: dict[str, Any]) -> str | None:
        if not self.options.text:
            return None
        return await msg.respond(self.options.text, self.options.message_type)
