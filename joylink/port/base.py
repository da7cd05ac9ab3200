"""Abstract port provider consumed by the session layer.

A PortProvider hides how the host finds, opens and talks to the board. The
session only ever asks it to:
- report whether a serial transport exists at all
- select a device
- open it at a fixed rate
- hand out a chunk reader and a chunk writer
- close it again

Implementations can be pyserial, a socket bridge, or an in-memory fake for
tests.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PortInfo:
    """One serial port the board might be attached to.

    Only port is needed to open it; the USB fields are what device
    selection matches on and are None when the OS does not report them.
    """
    port: str
    vid: Optional[int] = None
    pid: Optional[int] = None
    product: Optional[str] = None
    description: Optional[str] = None


class PortHandle:
    """A selected device, plus whatever the provider opened for it.

    Attributes:
        info: Which device was selected
        port: Provider-owned open port object, None until opened
    """

    def __init__(self, info: PortInfo):
        self.info = info
        self.port: Any = None

    def __repr__(self) -> str:
        state = "open" if self.port is not None else "closed"
        return f"PortHandle({self.info.port!r}, {state})"


class ChunkReader(ABC):
    """Readable half of an open port."""

    @abstractmethod
    def read(self) -> Optional[bytes]:
        """Pull the next chunk.

        Returns:
            Bytes received (possibly b"" if nothing arrived before the read
            timeout), or None once the stream has ended

        Raises:
            ReadFailureError: If the transport fails
        """
        pass

    @abstractmethod
    def release(self) -> None:
        """Give the readable half back. Safe to call multiple times."""
        pass


class ChunkWriter(ABC):
    """Writable half of an open port."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write and flush all of data.

        Raises:
            WriteFailureError: If the bytes could not be fully written
        """
        pass

    @abstractmethod
    def release(self) -> None:
        """Give the writable half back. Safe to call multiple times."""
        pass


class PortProvider(ABC):
    """Abstract source of serial ports."""

    @abstractmethod
    def is_supported(self) -> bool:
        """Check whether this host can use the transport at all."""
        pass

    @abstractmethod
    def request_device(self) -> PortHandle:
        """Select a device.

        Raises:
            ConnectAbortedError: If selection is cancelled or finds nothing
        """
        pass

    @abstractmethod
    def open(self, handle: PortHandle, baudrate: int) -> None:
        """Open the selected device at the given rate.

        Raises:
            OpenFailureError: If the port cannot be opened
        """
        pass

    @abstractmethod
    def acquire_reader(self, handle: PortHandle) -> ChunkReader:
        """Return the readable half of an open port."""
        pass

    @abstractmethod
    def acquire_writer(self, handle: PortHandle) -> ChunkWriter:
        """Return the writable half of an open port."""
        pass

    @abstractmethod
    def close(self, handle: PortHandle) -> None:
        """Close the port. Should be safe to call multiple times."""
        pass
