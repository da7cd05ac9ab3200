"""Session layer: connection lifecycle, shared state and outbound commands."""

from .channel import CommandChannel
from .session import DEFAULT_BAUDRATE, SerialSession
from .state import ConnectionState

__all__ = ["CommandChannel", "ConnectionState", "SerialSession", "DEFAULT_BAUDRATE"]
