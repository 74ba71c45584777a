"""REST surface for reading and editing live commands."""

from .app import create_app

__all__ = ["create_app"]
