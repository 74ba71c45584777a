"""Named event subscriptions for client consumers."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

LOGGER = logging.getLogger("EventHub")

Listener = Callable[..., Any]

# Events emitted by CommandClient
CONNECTED = "connected"
DISCONNECTED = "disconnected"
RECONNECT = "reconnect"
JOIN = "join"
TIMEOUT = "timeout"
MOD = "mod"
UNMOD = "unmod"
MESSAGE = "message"
COMMAND_EXECUTED = "command_executed"
COMMAND_ERROR = "command_error"


class EventHub:
    """Synchronous or coroutine listeners keyed by event name.

    Coroutine listeners are scheduled on the running loop; a failing listener
    is logged and never stops the others.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._tasks: set[asyncio.Task[Any]] = set()

    def on(self, event: str, listener: Listener | None = None) -> Any:
        """Subscribe ``listener``; usable as a decorator when called with only ``event``."""
        if listener is None:

            def decorator(func: Listener) -> Listener:
                self._listeners[event].append(func)
                return func

            return decorator
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            pass

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> None:
        for listener in self.listeners(event):
            try:
                result = listener(*args)
            except Exception as e:
                LOGGER.error(f"Listener for '{event}' failed: {type(e).__name__}: {e}")
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._on_task_done(event))

    def _on_task_done(self, event: str) -> Callable[[asyncio.Task[Any]], None]:
        def callback(task: asyncio.Task[Any]) -> None:
            self._tasks.discard(task)
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None:
                LOGGER.error(f"Listener for '{event}' failed: {type(exc).__name__}: {exc}")

        return callback

    async def drain(self) -> None:
        """Wait for scheduled coroutine listeners."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
