"""
Outbound chat send budget.

Fixed window per bot tier: once the first message of a window goes out, a
recurring timer zeroes the counter every ``timespan`` seconds. Over budget
messages are dropped, never queued.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Any

from .constants import BOT_TYPE_NORMAL, MESSAGE_LIMITS, MessageLimit

logger = logging.getLogger("RateLimiter")


@dataclass
class RateLimitStats:
    """Lifetime counters, kept across windows."""

    sent: int = 0
    dropped: int = 0
    resets: int = 0
    last_reset: float = field(default_factory=time.time)


class RateLimiter:
    def __init__(
        self,
        bot_type: str = BOT_TYPE_NORMAL,
        *,
        enabled: bool = True,
        verbose: bool = False,
        limit: MessageLimit | None = None,
    ) -> None:
        self.bot_type = bot_type
        self.limit = limit or MESSAGE_LIMITS[bot_type]
        self.enabled = enabled
        self.verbose = verbose
        self.count = 0
        self._stats = RateLimitStats()
        self._lock = threading.Lock()
        self._running = False
        self._reset_task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Called when the transport connects."""
        if self._running:
            return
        self._running = True
        logger.debug(
            f"Rate limiter started ({self.bot_type}: "
            f"{self.limit.messages} messages / {self.limit.timespan}s)"
        )

    def stop(self) -> None:
        """Called when the transport disconnects. Cancels the timer and clears the counter."""
        self._running = False
        if self._reset_task is not None and not self._reset_task.done():
            self._reset_task.cancel()
        self._reset_task = None
        with self._lock:
            self.count = 0
        logger.debug("Rate limiter stopped")

    def try_consume(self) -> bool:
        """True when a message may be sent now. Does not count the message."""
        if not self.enabled:
            return True

        with self._lock:
            count = self.count
            allowed = count < self.limit.messages
            if not allowed:
                self._stats.dropped += 1

        if self.verbose:
            logger.warning(f"Messages count: {count}")
        if not allowed:
            logger.warning("Rate limit exceeded. Wait for timer reset.")
        return allowed

    def on_sent(self) -> None:
        """Record a successful send, arming the reset timer on the first one."""
        with self._lock:
            first = self.count == 0
            self.count += 1
            self._stats.sent += 1

        if first and self._running and (self._reset_task is None or self._reset_task.done()):
            self._reset_task = asyncio.get_running_loop().create_task(self._reset_loop())

    def acquire(self) -> bool:
        """Check and count one message in a single step, before it is sent.

        Concurrent senders cannot all pass the check ahead of the first
        increment. Call ``refund`` when the send then fails.
        """
        if not self.try_consume():
            return False
        self.on_sent()
        return True

    def refund(self) -> None:
        """Give back a message counted by ``acquire`` that never went out."""
        with self._lock:
            if self.count > 0:
                self.count -= 1
            self._stats.sent -= 1

    async def _reset_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.limit.timespan)
            if self.verbose:
                logger.debug("Resetting messages count")
            with self._lock:
                self.count = 0
                self._stats.resets += 1
                self._stats.last_reset = time.time()

    def stats(self) -> dict[str, Any]:
        with self._lock:
            summary = asdict(self._stats)
            summary.update(
                count=self.count,
                limit=self.limit.messages,
                window=self.limit.timespan,
                enabled=self.enabled,
            )
        return summary
