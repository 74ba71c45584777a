"""Command client: dispatch pipeline, rate-gated sends and transport event handling."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping
from typing import Any

from twitchcmd.commands.descriptor import ChatCommand
from twitchcmd.commands.parser import Invocation, parse
from twitchcmd.commands.registry import CommandRegistry
from twitchcmd.components import CHANNEL_COMMANDS, DEFAULT_COMMANDS
from twitchcmd.core import events
from twitchcmd.core.config import ClientSettings
from twitchcmd.core.constants import MESSAGE_LIMITS, RESERVED_PREFIXES, SELF_MESSAGE_DELAY
from twitchcmd.core.errors import StartupConfigError
from twitchcmd.core.events import EventHub
from twitchcmd.core.guards import PermissionValidator, normalize_channel
from twitchcmd.core.rate_limiter import RateLimiter
from twitchcmd.messages import ChatChannel, ChatMessage, ChatUser
from twitchcmd.services.command_config_service import CommandConfigService
from twitchcmd.services.text_command_store import TextCommandStore
from twitchcmd.shared.database import DocumentStore
from twitchcmd.shared.repositories.command_config import CommandConfigRepository
from twitchcmd.shared.repositories.text_command import TextCommandRepository
from twitchcmd.transport.base import Transport

LOGGER: logging.Logger = logging.getLogger("Bot")

CommandFactory = Callable[..., ChatCommand]


class CommandClient:
    """Owns the registry, rate limiter, event hub and stores for one chat account."""

    def __init__(
        self,
        settings: ClientSettings,
        transport: Transport,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.registry = CommandRegistry()
        self.events = EventHub()
        self.validator = PermissionValidator(settings.bot_owners, self.get_username)
        self.limiter = RateLimiter(
            settings.bot_type,
            enabled=settings.enable_rate_limiting_control,
            verbose=settings.verbose_logging,
        )
        self.verbose_logging = settings.verbose_logging
        self.channels_with_mod: list[str] = []
        self.connected = False

        self.store: DocumentStore | None = None
        self.text_commands: TextCommandStore | None = None
        self.command_configs: CommandConfigService | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

        if store is not None:
            self.use_store(store)

    @property
    def prefix(self) -> str:
        return self.settings.prefix

    def on(self, event: str, listener: Callable[..., Any] | None = None) -> Any:
        return self.events.on(event, listener)

    def enable_verbose_logging(self) -> None:
        self.verbose_logging = True
        self.limiter.verbose = True

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def use_store(self, store: DocumentStore) -> None:
        """Attach the document store backing text commands and built-in overrides."""
        self.store = store
        self.text_commands = TextCommandStore(self, TextCommandRepository(store))
        self.command_configs = CommandConfigService(self, CommandConfigRepository(store))

    def register_command(self, command: ChatCommand) -> ChatCommand:
        return self.registry.register(command)

    def register_commands(
        self,
        manifest: Mapping[str, CommandFactory],
        options: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> list[ChatCommand]:
        """Instantiate and register every factory in ``manifest``.

        When ``options`` is given, factories without an entry are skipped.
        """
        if options is not None:
            LOGGER.info(f"External command options: {len(options)}")

        registered: list[ChatCommand] = []
        for name, factory in manifest.items():
            if options is None:
                command = factory(self)
            elif name in options:
                command = factory(self, options[name])
            else:
                LOGGER.warning(f"{name} config is not found")
                continue
            registered.append(self.register_command(command))
        return registered

    def register_default_commands(self) -> list[ChatCommand]:
        manifest = {
            name: factory
            for name, factory in DEFAULT_COMMANDS.items()
            if self.settings.enable_join_command or name not in CHANNEL_COMMANDS
        }
        return self.register_commands(manifest)

    def load_stored_commands(self) -> None:
        """Apply stored built-in overrides, then register stored text commands."""
        if self.command_configs is not None:
            self.command_configs.bootstrap()
        if self.text_commands is not None:
            self.text_commands.load()

    def check_options(self) -> None:
        settings = self.settings
        if not settings.username:
            raise StartupConfigError("Username not specified")
        if not settings.oauth:
            raise StartupConfigError("Oauth password not specified")
        if not settings.prefix or settings.prefix in RESERVED_PREFIXES:
            raise StartupConfigError(f"Invalid prefix. Cannot be '{settings.prefix}'")
        if settings.bot_type not in MESSAGE_LIMITS:
            raise StartupConfigError(f"Unknown bot_type '{settings.bot_type}'")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        self.check_options()
        LOGGER.info(f"Current default prefix is {self.prefix}")
        LOGGER.info("Connecting to Twitch Chat")

        channels = list(self.settings.channels)
        if self.settings.auto_join_bot_channel:
            channels.append("#" + self.settings.username.lower())
        LOGGER.info(f"Autojoining {len(channels)} channels")

        await self.transport.connect(self, channels)

    async def close(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self.transport.close()
        self.limiter.stop()
        self.connected = False

    async def wait_until_idle(self) -> None:
        """Wait for in-flight command handlers and event listeners."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self.events.drain()

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ------------------------------------------------------------------
    # Transport events
    # ------------------------------------------------------------------

    async def on_connected(self) -> None:
        self.connected = True
        self.limiter.start()
        self.events.emit(events.CONNECTED)

    async def on_disconnected(self, reason: str = "") -> None:
        self.connected = False
        self.limiter.stop()
        LOGGER.info(f"Disconnected from Twitch Chat{': ' + reason if reason else ''}")
        self.events.emit(events.DISCONNECTED)

    async def on_reconnect(self) -> None:
        self.events.emit(events.RECONNECT)

    async def on_join(self, channel: str, who: str) -> None:
        if (
            self.settings.greet_on_join
            and who.lower() == self.get_username().lower()
            and self.settings.on_join_message
        ):
            try:
                await self.action(channel, self.settings.on_join_message)
            except Exception as e:
                LOGGER.error(f"Failed to greet {channel}: {type(e).__name__}: {e}")

        self.events.emit(events.JOIN, ChatChannel(channel), who)

    async def on_timeout(self, channel: str, who: str, reason: str, duration: int) -> None:
        self.events.emit(events.TIMEOUT, channel, who, reason, duration)

    async def on_mod(self, channel: str, who: str) -> None:
        if who.lower() == self.get_username().lower() and channel not in self.channels_with_mod:
            LOGGER.debug("Bot has received mod role")
            self.channels_with_mod.append(channel)
        self.events.emit(events.MOD, channel, who)

    async def on_unmod(self, channel: str, who: str) -> None:
        if who.lower() == self.get_username().lower():
            LOGGER.debug("Bot has received unmod")
            self.channels_with_mod = [c for c in self.channels_with_mod if c != channel]
        self.events.emit(events.UNMOD, channel, who)

    async def on_message(
        self,
        channel: str,
        caller: ChatUser,
        text: str,
        is_self: bool,
        *,
        message_type: str = "chat",
        message_id: str = "",
    ) -> None:
        if is_self:
            return

        msg = ChatMessage(self, channel, caller, text, message_type=message_type, message_id=message_id)

        if caller.username == self.get_username().lower():
            if not (caller.is_broadcaster or caller.is_moderator or caller.is_vip):
                await asyncio.sleep(SELF_MESSAGE_DELAY)

        if self.verbose_logging:
            LOGGER.info(repr(msg))
        self.events.emit(events.MESSAGE, msg)

        invocation = parse(text, self.prefix)
        if invocation is None:
            return
        if self.verbose_logging:
            LOGGER.info(repr(invocation))

        command = self.registry.find_by_name_or_alias(invocation.command)
        if command is None:
            return

        verdict = command.pre_validate(msg)
        if not verdict.allowed:
            try:
                await msg.reply(verdict.message)
            except Exception as e:
                LOGGER.error(f"Failed to send denial for {command.name}: {type(e).__name__}: {e}")
            return

        self._spawn(self._run_command(command, msg, invocation))

    async def _run_command(self, command: ChatCommand, msg: ChatMessage, invocation: Invocation) -> None:
        try:
            result = await command.prepare_run(msg, invocation.args)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            LOGGER.warning(f"Command {command.name} failed: {type(e).__name__}: {e}")
            try:
                await msg.reply(f"Unexpected error: {e}")
            except Exception as send_error:
                LOGGER.error(f"Failed to report error for {command.name}: {send_error}")
            self.events.emit(events.COMMAND_ERROR, e)
            return

        self.events.emit(events.COMMAND_EXECUTED, result)

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def _send(
        self,
        send: Callable[[str, str], Coroutine[Any, Any, str | None]],
        target: str,
        text: str,
    ) -> str | None:
        if not self.limiter.acquire():
            return None
        try:
            return await send(target, text)
        except BaseException:
            self.limiter.refund()
            raise

    async def say(self, channel: str, text: str) -> str | None:
        return await self._send(self.transport.say, channel, text)

    async def action(self, channel: str, text: str) -> str | None:
        return await self._send(self.transport.action, channel, text)

    async def whisper(self, username: str, text: str) -> str | None:
        return await self._send(self.transport.whisper, username, text)

    # ------------------------------------------------------------------
    # Channels and identity
    # ------------------------------------------------------------------

    async def join(self, channel: str) -> None:
        await self.transport.join(channel)

    async def part(self, channel: str) -> None:
        await self.transport.part(channel)

    def get_username(self) -> str:
        return self.transport.get_username() or self.settings.username

    def get_channels(self) -> list[str]:
        return self.transport.get_channels()

    def is_bot_channel(self, channel: str) -> bool:
        return normalize_channel(channel) == normalize_channel(self.get_username())

    def is_owner(self, user: ChatUser | str) -> bool:
        return self.validator.is_owner(user)

    async def execute_command_method(self, name: str, msg: ChatMessage) -> Any:
        """Run the ``execute`` hook of the command resolving to ``name``."""
        command = self.registry.find_by_name_or_alias(name)
        if command is None:
            return None
        return await command.execute(msg)
