"""Protocol serializer for joystick board commands.

Converts command objects to protocol strings.
Pure functions with no side effects.
"""
from __future__ import annotations

from ..models import Blink, OutboundCommand, SetBrightness


class CommandSerializer:
    """Serializer for the joystick board command protocol."""

    @staticmethod
    def serialize_command(command: OutboundCommand) -> str:
        """Convert a command object to a protocol string (without newline).

        Examples:
            >>> CommandSerializer.serialize_command(SetBrightness(level=255))
            'L,255'
            >>> CommandSerializer.serialize_command(Blink())
            'BLINK'
        """
        if isinstance(command, SetBrightness):
            return f"L,{command.level}"
        elif isinstance(command, Blink):
            return "BLINK"
        else:
            raise ValueError(f"Unknown command type: {type(command)}")
