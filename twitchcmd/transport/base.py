"""Chat transport boundary: what the dispatcher needs from a chat connection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from twitchcmd.messages import ChatUser


class TransportListener(Protocol):
    """Callbacks a transport invokes. Implemented by ``CommandClient``."""

    async def on_connected(self) -> None: ...

    async def on_disconnected(self, reason: str = "") -> None: ...

    async def on_reconnect(self) -> None: ...

    async def on_join(self, channel: str, who: str) -> None: ...

    async def on_timeout(self, channel: str, who: str, reason: str, duration: int) -> None: ...

    async def on_mod(self, channel: str, who: str) -> None: ...

    async def on_unmod(self, channel: str, who: str) -> None: ...

    async def on_message(
        self,
        channel: str,
        caller: ChatUser,
        text: str,
        is_self: bool,
        *,
        message_type: str = "chat",
        message_id: str = "",
    ) -> None: ...


class Transport(Protocol):
    """A chat connection. Send methods return the platform's message id, if any."""

    async def connect(self, listener: TransportListener, channels: Sequence[str]) -> None: ...

    async def close(self) -> None: ...

    async def say(self, channel: str, text: str) -> str | None: ...

    async def action(self, channel: str, text: str) -> str | None: ...

    async def whisper(self, user: str, text: str) -> str | None: ...

    async def join(self, channel: str) -> None: ...

    async def part(self, channel: str) -> None: ...

    def get_username(self) -> str: ...

    def get_channels(self) -> list[str]: ...
