"""Chat command dispatch engine for Twitch with editable text commands."""

__version__ = "0.1.0"
