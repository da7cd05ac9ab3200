"""Protocol layer for serial communication with the joystick board."""

from .base import Protocol
from .framer import LineFramer
from .line_protocol import JoystickLineProtocol
from .parser import FrameParser
from .serializer import CommandSerializer

__all__ = [
    "Protocol",
    "LineFramer",
    "JoystickLineProtocol",
    "FrameParser",
    "CommandSerializer",
]
