from .command_config_service import CommandConfigService
from .text_command_store import TextCommandStore

__all__ = ["CommandConfigService", "TextCommandStore"]
