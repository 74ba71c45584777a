"""Command client configuration"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .constants import BOT_TYPE_NORMAL, MESSAGE_LIMITS, RESERVED_PREFIXES
from .errors import StartupConfigError

logger = logging.getLogger(__name__)

# === Path Configuration ===
PACKAGE_DIR = Path(__file__).parent.parent
PROJECT_DIR = PACKAGE_DIR.parent
DATA_DIR = PROJECT_DIR / "data"


def _split_csv(value: object) -> object:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class ClientSettings(BaseSettings):
    """Command client settings"""

    model_config = SettingsConfigDict(
        env_prefix="BOT_",
        env_file=PROJECT_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Chat identity
    username: str = Field(..., description="Bot login name")
    oauth: str = Field(..., description="Bot OAuth token (without 'oauth:')")

    # Twitch application credentials (used by the twitchio transport)
    client_id: str = Field(default="", description="Twitch OAuth Client ID")
    client_secret: str = Field(default="", description="Twitch OAuth Client Secret")
    bot_id: str = Field(default="", description="Bot User ID")
    refresh_token: str = Field(default="", description="Bot OAuth refresh token")

    # Commands
    prefix: str = Field(default="!", description="Command prefix")
    bot_owners: Annotated[list[str], NoDecode] = Field(
        default_factory=list, description="Usernames allowed through the 'regular' gate"
    )
    enable_join_command: bool = Field(default=True, description="Enable !join / !part")

    # Channels
    channels: Annotated[list[str], NoDecode] = Field(
        default_factory=list, description="Channels joined on connect"
    )
    auto_join_bot_channel: bool = Field(default=False, description="Join the bot's own channel")
    greet_on_join: bool = Field(default=False, description="Send on_join_message on join")
    on_join_message: str = Field(default="", description="Greeting sent as an action")

    # Rate limiting
    bot_type: str = Field(default=BOT_TYPE_NORMAL, description="Message limit tier")
    enable_rate_limiting_control: bool = Field(default=True, description="Gate outbound sends")

    # Storage
    data_dir: Path = Field(default=DATA_DIR, description="Directory for JSON documents")

    # REST API
    api_enabled: bool = Field(default=True, description="Serve the /commands API")
    api_host: str = Field(default="127.0.0.1", description="API bind host")
    api_port: int = Field(default=8080, description="API bind port")

    # Environment
    verbose_logging: bool = Field(default=False, description="Log every dispatch step")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("bot_owners", "channels", mode="before")
    @classmethod
    def split_lists(cls, v: object) -> object:
        """Accept comma separated strings for list fields"""
        return _split_csv(v)

    @field_validator("username", "oauth")
    @classmethod
    def validate_required(cls, v: str, info) -> str:
        """Reject blank credentials"""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} not specified")
        return v.strip()

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Prefix must be non-empty and not a chat-reserved character"""
        if not v:
            raise ValueError("Invalid prefix. Cannot be empty")
        if v in RESERVED_PREFIXES:
            raise ValueError(f"Invalid prefix. Cannot be {v}")
        return v

    @field_validator("bot_type")
    @classmethod
    def validate_bot_type(cls, v: str) -> str:
        """Bot type must name a known message limit tier"""
        if v not in MESSAGE_LIMITS:
            raise ValueError(f"Unknown bot_type '{v}', expected one of: {', '.join(MESSAGE_LIMITS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper


@lru_cache
def get_settings() -> ClientSettings:
    """Get cached settings instance"""
    return ClientSettings()  # type: ignore[call-arg]


def validate_settings() -> ClientSettings:
    """Load settings, turning validation failures into a fatal startup error."""
    try:
        settings = get_settings()
    except ValidationError as e:
        problems = "\n".join(
            f"  - {'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise StartupConfigError(f"Invalid configuration:\n{problems}") from e

    logger.info("Configuration validated successfully")
    return settings
