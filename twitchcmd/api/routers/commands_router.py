"""Command configuration API routes"""

import logging
from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from twitchcmd.api.dependencies import get_command_service
from twitchcmd.core.constants import MESSAGE_TYPES, USER_LEVELS
from twitchcmd.core.errors import (
    AliasConflict,
    CommandNotFound,
    InvalidOption,
    MissingText,
    TextCommandStoreMissing,
    UnsupportedFields,
)
from twitchcmd.services.command_config_service import CommandConfigService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/commands", tags=["commands"])


# ============================================
# Request Models
# ============================================


class CommandArgumentBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str
    type: Literal["string", "number", "boolean"] = "string"
    default: str | int | float | bool | None = Field(default=None, alias="defaultValue")


class CommandUpdate(BaseModel):
    """Partial command update. Keys are accepted in camelCase or snake_case."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str | None = None
    group: str | None = None
    description: str | None = None
    userlevel: str | None = None
    aliases: list[str] | None = None
    examples: list[str] | None = None
    args: list[CommandArgumentBody] | None = None
    bot_channel_only: bool | None = Field(default=None, alias="botChannelOnly")
    privmsg_only: bool | None = Field(default=None, alias="privmsgOnly")
    hide_from_help: bool | None = Field(default=None, alias="hideFromHelp")
    message_type: str | None = Field(default=None, alias="messageType")
    text: str | None = None


def _format_errors(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in error.errors()
    )


# ============================================
# Command Endpoints
# ============================================


@router.get("")
def list_commands(
    service: CommandConfigService = Depends(get_command_service),
) -> dict[str, Any]:
    """List every live command."""
    return {"ok": True, "commands": service.list_commands()}


@router.get("/{name}")
def get_command(
    name: str,
    service: CommandConfigService = Depends(get_command_service),
) -> dict[str, Any]:
    """Get one command by exact name."""
    try:
        return {"ok": True, "command": service.get_command(name)}
    except CommandNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None


@router.put("/{name}")
def update_command(
    name: str,
    body: dict[str, Any] | None = Body(default=None),
    service: CommandConfigService = Depends(get_command_service),
) -> dict[str, Any]:
    """Merge a partial body into a command, persisted and live."""
    if not body or not name:
        raise HTTPException(status_code=400, detail="Missing request body!")

    try:
        update = CommandUpdate.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_format_errors(e)) from None

    if update.userlevel is not None and update.userlevel not in USER_LEVELS:
        raise HTTPException(status_code=400, detail=f"Invalid userlevel: {update.userlevel}")
    if update.message_type is not None and update.message_type not in MESSAGE_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid messageType: {update.message_type}")
    if update.name is not None and update.name != name:
        raise HTTPException(status_code=400, detail="Commands cannot be renamed")

    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    try:
        command = service.update_command(name, changes)
    except CommandNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except (InvalidOption, UnsupportedFields, MissingText, AliasConflict) as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except TextCommandStoreMissing as e:
        raise HTTPException(status_code=503, detail=str(e)) from None

    logger.info(f"Command '{name}' updated: {', '.join(sorted(changes)) or 'no changes'}")
    return {"ok": True, "command": command}
