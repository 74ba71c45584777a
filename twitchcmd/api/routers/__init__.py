"""API Routers package"""

from . import commands_router

__all__ = ["commands_router"]
