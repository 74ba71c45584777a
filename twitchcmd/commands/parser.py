"""Prefix grammar: ``<prefix><command> [args...]``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class Invocation:
    prefix: str
    command: str
    args: list[str] = field(default_factory=list)


@lru_cache(maxsize=16)
def _compile(prefix: str) -> re.Pattern[str]:
    # Metacharacter prefixes such as "?", "*" or "\" must match literally
    return re.compile(
        r"^(" + re.escape(prefix) + r")(\S+) ?(.*)",
        re.IGNORECASE | re.DOTALL | re.MULTILINE,
    )


def parse(message: str, prefix: str) -> Invocation | None:
    """Split a chat message into prefix, command and whitespace separated args.

    Returns None when the message does not start with the prefix.
    """
    match = _compile(prefix).match(message)
    if not match:
        return None

    args = match.group(3).strip().split()
    return Invocation(prefix=match.group(1), command=match.group(2), args=args)
