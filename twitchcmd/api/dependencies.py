"""Dependency injection utilities for FastAPI"""

from fastapi import HTTPException, Request

from twitchcmd.core.bot import CommandClient
from twitchcmd.services.command_config_service import CommandConfigService


def get_client(request: Request) -> CommandClient:
    """The CommandClient the app was created for."""
    return request.app.state.client


def get_command_service(request: Request) -> CommandConfigService:
    service = get_client(request).command_configs
    if service is None:
        raise HTTPException(status_code=503, detail="Command store is not configured")
    return service
