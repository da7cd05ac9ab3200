"""pyserial implementation of the port provider.

This is a RAW BYTE STREAM layer. It does not interpret messages; the session
feeds whatever it reads through the line framer.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

import serial

from ..errors import (
    ConnectAbortedError,
    OpenFailureError,
    ReadFailureError,
    WriteFailureError,
)
from .base import ChunkReader, ChunkWriter, PortHandle, PortProvider
from .finder import select_port

logger = logging.getLogger(__name__)

READ_TIMEOUT = 0.1  # seconds
WRITE_TIMEOUT = 1.0  # seconds
READ_CHUNK_SIZE = 4096  # bytes

# Platforms pyserial ships a native backend for
_SUPPORTED_OS_NAMES = ("posix", "nt")


class SerialChunkReader(ChunkReader):
    """Reads whatever the port has buffered, waiting at most the read timeout."""

    def __init__(self, ser: serial.Serial, chunk_size: int = READ_CHUNK_SIZE):
        self._serial = ser
        self._chunk_size = chunk_size
        self._released = False

    def read(self) -> Optional[bytes]:
        if self._released or not self._serial.is_open:
            return None
        try:
            # Block for at least one byte, then take what is already waiting
            size = min(max(1, self._serial.in_waiting), self._chunk_size)
            return self._serial.read(size)
        except (serial.SerialException, OSError) as e:
            raise ReadFailureError(f"Serial read error: {e}") from e

    def release(self) -> None:
        if not self._released:
            self._released = True
            logger.debug("Serial reader released")


class SerialChunkWriter(ChunkWriter):
    """Writes and flushes whole buffers to the port."""

    def __init__(self, ser: serial.Serial):
        self._serial = ser
        self._released = False

    def write(self, data: bytes) -> None:
        if self._released or not self._serial.is_open:
            raise WriteFailureError("Cannot send, port is not open")
        try:
            written = self._serial.write(data)
            self._serial.flush()
        except (serial.SerialException, OSError) as e:
            raise WriteFailureError(f"Send error: {e}") from e
        if written is not None and written != len(data):
            raise WriteFailureError(
                f"Short write: {written} of {len(data)} bytes"
            )

    def release(self) -> None:
        if not self._released:
            self._released = True
            logger.debug("Serial writer released")


class SerialPortProvider(PortProvider):
    """Port provider backed by pyserial.

    Device selection uses an explicit port name when given, otherwise the one
    port matching the USB criteria. With no criteria at all, exactly one
    serial port must be present.

    Example:
        >>> provider = SerialPortProvider(port="/dev/ttyACM0")
        >>> session = SerialSession(provider)
        >>> session.connect()
    """

    def __init__(self,
                 port: Optional[str] = None,
                 vid: Optional[int] = None,
                 pid: Optional[int] = None,
                 product_substring: Optional[str] = None,
                 timeout: float = READ_TIMEOUT,
                 write_timeout: float = WRITE_TIMEOUT,
                 chunk_size: int = READ_CHUNK_SIZE):
        """Initialize provider.

        Args:
            port: Serial port path (e.g., '/dev/ttyACM0'), or None to auto-detect
            vid: USB vendor ID to match when auto-detecting
            pid: USB product ID to match when auto-detecting
            product_substring: Product string fragment to match when auto-detecting
            timeout: Read timeout in seconds; bounds how long a disconnect waits
            write_timeout: Write timeout in seconds
            chunk_size: Maximum bytes to read per chunk
        """
        self._port = port
        self._vid = vid
        self._pid = pid
        self._product_substring = product_substring
        self._timeout = timeout
        self._write_timeout = write_timeout
        self._chunk_size = chunk_size

    def is_supported(self) -> bool:
        return os.name in _SUPPORTED_OS_NAMES

    def request_device(self) -> PortHandle:
        try:
            info = select_port(
                self._port,
                vid=self._vid,
                pid=self._pid,
                product_substring=self._product_substring,
            )
        except ConnectAbortedError:
            raise
        except Exception as e:
            raise ConnectAbortedError(f"Error finding serial port: {e}") from e

        if self._port is None:
            logger.info(f"Auto-detected board on {info.port}")
        return PortHandle(info)

    def open(self, handle: PortHandle, baudrate: int) -> None:
        try:
            ser = serial.Serial(
                port=handle.info.port,
                baudrate=baudrate,
                timeout=self._timeout,
                write_timeout=self._write_timeout,
            )
            ser.reset_input_buffer()
            ser.reset_output_buffer()
        except (serial.SerialException, OSError, ValueError) as e:
            raise OpenFailureError(f"Failed to open {handle.info.port}: {e}") from e

        handle.port = ser
        logger.info(f"Opened {handle.info.port} @ {baudrate} baud")

    def acquire_reader(self, handle: PortHandle) -> ChunkReader:
        if handle.port is None:
            raise ReadFailureError(f"{handle.info.port} is not open")
        return SerialChunkReader(handle.port, chunk_size=self._chunk_size)

    def acquire_writer(self, handle: PortHandle) -> ChunkWriter:
        if handle.port is None:
            raise WriteFailureError(f"{handle.info.port} is not open")
        return SerialChunkWriter(handle.port)

    def close(self, handle: PortHandle) -> None:
        ser, handle.port = handle.port, None
        if ser is None:
            return
        try:
            ser.close()
        except (serial.SerialException, OSError) as e:
            logger.error(f"Error closing serial port: {e}")
