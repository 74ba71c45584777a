"""Persisted records for built-in and text commands."""

from .command_config import CommandConfig
from .text_command import TextCommandRecord

__all__ = ["CommandConfig", "TextCommandRecord"]
