"""Command model: grammar, descriptors, argument binding and the registry."""

from .arguments import bind
from .descriptor import ChatCommand, CommandArgument, CommandDescriptor
from .parser import Invocation, parse
from .registry import CommandRegistry
from .text_command import TextCommand

__all__ = [
    "ChatCommand",
    "CommandArgument",
    "CommandDescriptor",
    "CommandRegistry",
    "Invocation",
    "TextCommand",
    "bind",
    "parse",
]
