"""Protocol parser for joystick board telemetry.

Parses incoming lines into typed inbound frames.
Pure functions with no side effects.
"""
from __future__ import annotations

import re
from typing import List, Optional

from ..models import InboundFrame, JoystickReport, Unrecognized

FIELD_SEPARATOR = ","
JOYSTICK_TAG = "J"
BUTTON_TAG = "B"
MIN_REPORT_FIELDS = 5

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class FrameParser:
    """Parser for the joystick board line protocol.

    Handles one frame type:
    - J,<x>,<y>,B,<mode> - Joystick axes and button mode

    Anything else decodes to Unrecognized. Malformed telemetry is expected on
    a noisy link, so parsing never raises.
    """

    @staticmethod
    def parse_line(line: str) -> InboundFrame:
        """Parse a single line from the serial stream.

        Args:
            line: Line with its delimiter already removed

        Returns:
            JoystickReport if the line has the report shape, Unrecognized otherwise

        Examples:
            >>> FrameParser.parse_line("J,100,200,B,1")
            JoystickReport(x=100, y=200, mode=1)
            >>> FrameParser.parse_line("J,1,2,X,1")
            Unrecognized(line='J,1,2,X,1')
        """
        fields = line.split(FIELD_SEPARATOR)

        # Extra trailing fields are tolerated
        if len(fields) < MIN_REPORT_FIELDS:
            return Unrecognized(line)
        if fields[0] != JOYSTICK_TAG or fields[3] != BUTTON_TAG:
            return Unrecognized(line)

        values = FrameParser._parse_ints([fields[1], fields[2], fields[4]])
        if values is None:
            return Unrecognized(line)

        x, y, mode = values
        return JoystickReport(x=x, y=y, mode=mode)

    @staticmethod
    def _parse_ints(tokens: List[str]) -> Optional[List[int]]:
        """Parse decimal integer tokens.

        Args:
            tokens: Strings like "512" or " -3 "

        Returns:
            List of ints, or None if any token is not a plain decimal integer
        """
        result = []
        for token in tokens:
            token = token.strip()
            if not _INT_PATTERN.fullmatch(token):
                return None
            result.append(int(token))
        return result
