"""Abstract base class for board communication protocols.

Defines the interface for decoding incoming lines and encoding commands.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import InboundFrame, OutboundCommand


class Protocol(ABC):
    """Abstract line protocol.

    Protocols handle:
    - Decoding incoming lines into frames
    - Encoding commands into wire bytes
    """

    @abstractmethod
    def decode(self, line: str) -> InboundFrame:
        """Decode one trimmed line.

        Args:
            line: Line from the framer, delimiter removed

        Returns:
            A typed frame; unknown input maps to Unrecognized, never an exception
        """
        pass

    @abstractmethod
    def encode(self, command: OutboundCommand) -> bytes:
        """Encode a command into wire format.

        Args:
            command: Command object to encode

        Returns:
            Bytes ready to write to the port, delimiter included
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Protocol identifier (e.g., 'joystick-csv')."""
        pass
