"""Port layer: device selection and raw byte I/O for the joystick board.

This module provides:
- The abstract PortProvider consumed by the session (PortProvider, ChunkReader, ChunkWriter)
- A pyserial-backed provider (SerialPortProvider)
- Board selection among the host's serial ports (select_port)
"""

from .base import ChunkReader, ChunkWriter, PortHandle, PortInfo, PortProvider
from .finder import select_port
from .serial_port import SerialChunkReader, SerialChunkWriter, SerialPortProvider

__all__ = [
    # Abstractions
    'ChunkReader',
    'ChunkWriter',
    'PortHandle',
    'PortInfo',
    'PortProvider',

    # pyserial
    'SerialChunkReader',
    'SerialChunkWriter',
    'SerialPortProvider',

    # Selection
    'select_port',
]
