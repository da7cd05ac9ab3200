"""joylink - serial link to an Arduino-style joystick and LED board."""

from .models import (
    ConnectionStatus,
    DeviceState,
    JoystickReport,
    Unrecognized,
    InboundFrame,
    SetBrightness,
    Blink,
    OutboundCommand,
)
from .errors import (
    JoylinkError,
    UnsupportedTransportError,
    ConnectAbortedError,
    OpenFailureError,
    ReadFailureError,
    WriteFailureError,
)
from .port import PortProvider, SerialPortProvider
from .protocol import JoystickLineProtocol, LineFramer
from .session import CommandChannel, ConnectionState, SerialSession

__all__ = [
    "ConnectionStatus",
    "DeviceState",
    "JoystickReport",
    "Unrecognized",
    "InboundFrame",
    "SetBrightness",
    "Blink",
    "OutboundCommand",
    "JoylinkError",
    "UnsupportedTransportError",
    "ConnectAbortedError",
    "OpenFailureError",
    "ReadFailureError",
    "WriteFailureError",
    "PortProvider",
    "SerialPortProvider",
    "JoystickLineProtocol",
    "LineFramer",
    "CommandChannel",
    "ConnectionState",
    "SerialSession",
]
