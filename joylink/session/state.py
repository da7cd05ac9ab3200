"""Thread-safe holder for the latest device state and connection status.

The read loop writes, any number of observers read. Every access goes
through one lock, and the device state is swapped as a whole frozen
snapshot, so a reader can never see X from one report and Y from another.
"""
from __future__ import annotations

import threading
from typing import Optional

from ..models import ConnectionStatus, DeviceState, InboundFrame, JoystickReport


class ConnectionState:
    """Single synchronization point for state shared across threads."""

    def __init__(self):
        """Initialize with a centered joystick, mode 0, disconnected."""
        self._lock = threading.Lock()
        self._device = DeviceState()
        self._status = ConnectionStatus.DISCONNECTED
        self._message: Optional[str] = None
        self._reports_applied = 0

    def update_from_frame(self, frame: InboundFrame) -> bool:
        """Apply a decoded frame.

        Args:
            frame: Frame from the protocol layer

        Returns:
            True if the device state was replaced, False for ignored frames
        """
        if not isinstance(frame, JoystickReport):
            return False

        new_state = DeviceState(
            joystick_x=frame.x,
            joystick_y=frame.y,
            mode=frame.mode,
        )
        with self._lock:
            self._device = new_state
            self._reports_applied += 1
        return True

    def snapshot(self) -> DeviceState:
        """Return the current device state (immutable)."""
        with self._lock:
            return self._device

    def set_status(self, status: ConnectionStatus, message: Optional[str] = None) -> None:
        """Set connection status, with an optional human-readable reason."""
        with self._lock:
            self._status = status
            self._message = message

    def get_status(self) -> ConnectionStatus:
        with self._lock:
            return self._status

    @property
    def last_message(self) -> Optional[str]:
        """Reason attached to the latest status change, if any."""
        with self._lock:
            return self._message

    @property
    def reports_applied(self) -> int:
        """Number of joystick reports applied so far."""
        with self._lock:
            return self._reports_applied
