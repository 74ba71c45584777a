from .command_config import CommandConfigRepository
from .text_command import TextCommandRepository

__all__ = ["CommandConfigRepository", "TextCommandRepository"]
