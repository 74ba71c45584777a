"""Exception types raised across the command pipeline."""

from __future__ import annotations


class TwitchCmdError(Exception):
    """Base class for all twitchcmd errors."""


class StartupConfigError(TwitchCmdError):
    """Configuration problem detected before connecting. Always fatal."""


class CommandNotFound(TwitchCmdError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Command '{name}' is not found")


class CommandExists(TwitchCmdError):
    """A command with this name exists and is not a text command."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Command '{name}' already exists and is not a text command")


class InvalidOption(TwitchCmdError):
    """An option value outside its allowed set."""

    def __init__(self, option: str, value: object, choices: tuple[str, ...]) -> None:
        self.option = option
        self.value = value
        self.choices = choices
        super().__init__(f"Invalid {option} '{value}', expected one of: {', '.join(choices)}")


class UnsupportedFields(TwitchCmdError):
    """A partial update touched fields the target command does not carry."""

    def __init__(self, name: str, fields: list[str]) -> None:
        self.name = name
        self.fields = fields
        super().__init__(f"Command '{name}' does not support: {', '.join(fields)}")


class TextCommandStoreMissing(TwitchCmdError):
    """The text command store is not wired into the client."""

    def __init__(self) -> None:
        super().__init__("Text command provider text-commands is not registered!")


class BadArgument(TwitchCmdError):
    """A positional argument could not be coerced to its declared type."""

    def __init__(self, name: str, kind: str, value: str) -> None:
        self.name = name
        self.kind = kind
        self.value = value
        super().__init__(f"Argument '{name}' expects a {kind}, got '{value}'")


class MissingText(TwitchCmdError):
    """A text command was given an empty reply text."""

    def __init__(self) -> None:
        super().__init__("Text argument required")


class AliasConflict(TwitchCmdError):
    """An alias already resolves to a different command."""

    def __init__(self, alias: str, owner: str) -> None:
        self.alias = alias
        self.owner = owner
        super().__init__(f"Alias '{alias}' is already used by command '{owner}'")
