from .base import Transport, TransportListener

__all__ = ["Transport", "TransportListener"]
