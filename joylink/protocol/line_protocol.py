"""Comma-separated text protocol spoken by the joystick board.

Wraps FrameParser and CommandSerializer.
"""
from __future__ import annotations

from ..models import InboundFrame, OutboundCommand
from .base import Protocol
from .framer import LINE_DELIMITER
from .parser import FrameParser
from .serializer import CommandSerializer


class JoystickLineProtocol(Protocol):
    """Newline-delimited UTF-8 protocol for the joystick board.

    Uses:
    - J,<x>,<y>,B,<mode> inbound reports
    - L,<brightness> and BLINK outbound commands
    """

    def __init__(self):
        self._parser = FrameParser()
        self._serializer = CommandSerializer()

    def decode(self, line: str) -> InboundFrame:
        """Decode a single line from the serial stream."""
        return self._parser.parse_line(line)

    def encode(self, command: OutboundCommand) -> bytes:
        """Encode command to UTF-8 bytes with newline."""
        cmd_str = self._serializer.serialize_command(command)
        return (cmd_str + LINE_DELIMITER).encode('utf-8')

    @property
    def name(self) -> str:
        return "joystick-csv"
