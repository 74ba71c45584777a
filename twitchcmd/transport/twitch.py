"""twitchio 3 (EventSub + Helix) implementation of the chat transport."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import twitchio
from twitchio import eventsub

from twitchcmd.messages import ChatUser
from twitchcmd.transport.base import TransportListener

LOGGER: logging.Logger = logging.getLogger("TwitchTransport")


def _login(channel: str) -> str:
    return channel.lstrip("#").lower()


def chat_user_from_payload(payload: twitchio.ChatMessage) -> ChatUser:
    chatter = payload.chatter
    return ChatUser(
        username=chatter.name or "",
        display_name=chatter.display_name or "",
        id=chatter.id,
        badges={badge.set_id: badge.id for badge in payload.badges},
        is_broadcaster=chatter.broadcaster,
        is_moderator=chatter.moderator,
        is_vip=chatter.vip,
        is_subscriber=chatter.subscriber,
    )


class _ChatClient(twitchio.Client):
    """twitchio client forwarding chat events to the transport."""

    def __init__(self, transport: TwitchTransport, **kwargs) -> None:
        self._transport = transport
        super().__init__(**kwargs)

    async def event_ready(self) -> None:
        LOGGER.info(f"Successfully logged in as: {self._transport.get_username()}")

    async def event_message(self, payload: twitchio.ChatMessage) -> None:
        await self._transport.handle_message(payload)

    async def event_message_whisper(self, payload: twitchio.Whisper) -> None:
        await self._transport.handle_whisper(payload)

    async def event_eventsub_error(self, error: Exception) -> None:
        LOGGER.error(f"EventSub error: {error}")


class TwitchTransport:
    """Chat over EventSub websockets, sends over Helix.

    Twitch has no ``/me`` over Helix, so actions go out as plain messages.
    Moderator and timeout notifications are not subscribed.
    """

    def __init__(
        self,
        *,
        username: str,
        oauth: str,
        client_id: str,
        client_secret: str,
        bot_id: str = "",
        refresh_token: str = "",
    ) -> None:
        self._username = username.lower()
        self._token = oauth.removeprefix("oauth:")
        self._refresh_token = refresh_token
        self._client_id = client_id
        self._client_secret = client_secret
        self._bot_id = bot_id
        self._client: _ChatClient | None = None
        self._listener: TransportListener | None = None
        # login -> broadcaster user id
        self._channels: dict[str, str] = {}

    @property
    def client(self) -> _ChatClient:
        if self._client is None:
            raise RuntimeError("Transport not connected. Call connect() first.")
        return self._client

    @property
    def listener(self) -> TransportListener:
        if self._listener is None:
            raise RuntimeError("Transport has no listener. Call connect() first.")
        return self._listener

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, listener: TransportListener, channels: Sequence[str]) -> None:
        self._listener = listener
        self._client = _ChatClient(
            self,
            client_id=self._client_id,
            client_secret=self._client_secret,
            bot_id=self._bot_id or None,
        )
        await self._client.login(load_tokens=False, save_tokens=False)
        resp = await self._client.add_token(self._token, self._refresh_token)
        if resp.login:
            self._username = resp.login.lower()
        if resp.user_id:
            self._bot_id = resp.user_id
        LOGGER.info(f"Authorized chat account: {self._username} ({self._bot_id})")

        await self._client.subscribe_websocket(
            eventsub.WhisperReceivedSubscription(user_id=self._bot_id),
            token_for=self._bot_id,
        )
        await listener.on_connected()

        for channel in channels:
            try:
                await self.join(channel)
            except Exception as e:
                LOGGER.exception(f"Failed to join channel {channel}: {e}")

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.close()
        finally:
            self._client = None
            self._channels.clear()
            if self._listener is not None:
                await self._listener.on_disconnected("closed")

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    async def join(self, channel: str) -> None:
        login = _login(channel)
        if login in self._channels:
            LOGGER.debug(f"Already joined: {login}")
            return

        users = await self.client.fetch_users(logins=[login])
        if not users:
            raise ValueError(f"Unknown Twitch channel '{login}'")
        broadcaster_id = users[0].id

        await self.client.subscribe_websocket(
            eventsub.ChatMessageSubscription(broadcaster_user_id=broadcaster_id, user_id=self._bot_id),
            token_for=self._bot_id,
        )
        self._channels[login] = broadcaster_id
        LOGGER.info(f"Joined channel: {login} ({broadcaster_id})")
        await self.listener.on_join("#" + login, self._username)

    async def part(self, channel: str) -> None:
        # Messages from parted channels are dropped in handle_message
        removed = self._channels.pop(_login(channel), None)
        if removed is not None:
            LOGGER.info(f"Left channel: {_login(channel)}")

    def get_username(self) -> str:
        return self._username

    def get_channels(self) -> list[str]:
        return ["#" + login for login in self._channels]

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def _broadcaster(self, channel: str) -> twitchio.PartialUser:
        login = _login(channel)
        broadcaster_id = self._channels.get(login)
        if broadcaster_id is None:
            raise ValueError(f"Not joined to channel '{login}'")
        return self.client.create_partialuser(user_id=broadcaster_id, user_login=login)

    async def say(self, channel: str, text: str) -> str | None:
        sent = await self._broadcaster(channel).send_message(
            message=text,
            sender=self._bot_id,
            token_for=self._bot_id,
        )
        return sent.id

    async def action(self, channel: str, text: str) -> str | None:
        return await self.say(channel, text)

    async def whisper(self, user: str, text: str) -> str | None:
        users = await self.client.fetch_users(logins=[_login(user)])
        if not users:
            raise ValueError(f"Unknown Twitch user '{user}'")
        bot_user = self.client.create_partialuser(user_id=self._bot_id)
        await bot_user.send_whisper(to_user=users[0], message=text)
        return None

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def handle_message(self, payload: twitchio.ChatMessage) -> None:
        login = _login(payload.broadcaster.name or "")
        if login not in self._channels:
            LOGGER.debug(f"[BLOCK] Ignoring message from unjoined channel: {login}")
            return

        caller = chat_user_from_payload(payload)
        await self.listener.on_message(
            "#" + login,
            caller,
            payload.text,
            caller.id == self._bot_id,
            message_id=payload.id,
        )

    async def handle_whisper(self, payload: twitchio.Whisper) -> None:
        sender = payload.sender
        caller = ChatUser(username=sender.name or "", display_name=sender.display_name or "", id=sender.id)
        await self.listener.on_message(
            "#" + self._username,
            caller,
            payload.text,
            caller.id == self._bot_id,
            message_type="whisper",
            message_id=payload.id,
        )
