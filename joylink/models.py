"""Immutable data models for joystick board state and commands.

All models are frozen dataclasses so a snapshot handed to an observer can
never change underneath it. These models are the contract between the
protocol, session and application layers.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

# Analog joystick range reported by the board (10-bit ADC)
JOYSTICK_MIN = 0
JOYSTICK_MAX = 1023
JOYSTICK_CENTER = 512

# LED PWM range accepted by the board
BRIGHTNESS_MIN = 0
BRIGHTNESS_MAX = 255


class ConnectionStatus(Enum):
    """Lifecycle status of a serial session."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


@dataclass(frozen=True)
class DeviceState:
    """Latest decoded state of the board.

    Defaults describe a centered joystick in mode 0, which is what observers
    see before the first report arrives.

    Attributes:
        joystick_x: Raw X axis reading, conventionally 0-1023
        joystick_y: Raw Y axis reading, conventionally 0-1023
        mode: Mode toggled by the joystick button, conventionally 0 or 1
    """
    joystick_x: int = JOYSTICK_CENTER
    joystick_y: int = JOYSTICK_CENTER
    mode: int = 0


# Inbound frames

@dataclass(frozen=True)
class JoystickReport:
    """One `J,<x>,<y>,B,<mode>` telemetry line."""
    x: int
    y: int
    mode: int


@dataclass(frozen=True)
class Unrecognized:
    """A line that does not match any known frame shape.

    Attributes:
        line: The offending line, kept for diagnostics only
    """
    line: str = ""


# Outbound commands

@dataclass(frozen=True)
class SetBrightness:
    """Command to set the LED brightness.

    Attributes:
        level: PWM duty, 0-255 inclusive
    """
    level: int

    def __post_init__(self) -> None:
        if isinstance(self.level, bool) or not isinstance(self.level, int):
            raise ValueError(f"Brightness level must be an int, got {self.level!r}")
        if not BRIGHTNESS_MIN <= self.level <= BRIGHTNESS_MAX:
            raise ValueError(
                f"Brightness level {self.level} outside "
                f"[{BRIGHTNESS_MIN}, {BRIGHTNESS_MAX}]"
            )


@dataclass(frozen=True)
class Blink:
    """Command to blink the LED once."""
    pass


# Union types
InboundFrame = Union[JoystickReport, Unrecognized]
OutboundCommand = Union[SetBrightness, Blink]
