"""Positional chat arguments to named, typed parameters."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from twitchcmd.core.errors import BadArgument

if TYPE_CHECKING:
    from twitchcmd.commands.descriptor import CommandArgument

_TRUTHY = {"on", "true", "yes", "1"}
_FALSY = {"off", "false", "no", "0"}


def _parse_bool(value: str) -> bool | None:
    """Parse a boolean-ish string. Returns None if unrecognised."""
    if value.lower() in _TRUTHY:
        return True
    if value.lower() in _FALSY:
        return False
    return None


def _parse_number(value: str) -> int | float | None:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def coerce(argument: CommandArgument, value: str) -> str | int | float | bool:
    if argument.type == "number":
        number = _parse_number(value)
        if number is None:
            raise BadArgument(argument.name, "number", value)
        return number
    if argument.type == "boolean":
        flag = _parse_bool(value)
        if flag is None:
            raise BadArgument(argument.name, "boolean", value)
        return flag
    return value


def bind(schema: Sequence[CommandArgument], args: Sequence[str]) -> dict[str, Any]:
    """Map ``args`` onto ``schema`` by position.

    Missing or empty tokens fall back to the argument default, then to None.
    Tokens beyond the schema are ignored.
    """
    parameters: dict[str, Any] = {}
    for i, argument in enumerate(schema):
        value = args[i] if i < len(args) else None
        if value:
            parameters[argument.name] = coerce(argument, value)
        elif argument.default is not None:
            parameters[argument.name] = argument.default
        else:
            parameters[argument.name] = None
    return parameters
