"""Serial session: connection lifecycle and read loop.

Ties the port provider, line framer, protocol and shared state together:

    DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED | FAILED

There is no automatic retry. After DISCONNECTED or FAILED the caller decides
whether to connect() again.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from ..errors import (
    ConnectAbortedError,
    OpenFailureError,
    UnsupportedTransportError,
)
from ..models import ConnectionStatus, DeviceState, OutboundCommand
from ..port.base import PortHandle, PortProvider
from ..protocol import JoystickLineProtocol, LineFramer, Protocol
from ..protocol.framer import DEFAULT_MAX_LINE_LENGTH
from .channel import CommandChannel, THREAD_JOIN_TIMEOUT
from .state import ConnectionState

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 9600


class SerialSession:
    """Owns one connection to the board at a time.

    Responsibilities:
    - Drive the connect sequence through the port provider
    - Run the read loop: chunks -> lines -> frames -> state
    - Route outbound commands through the CommandChannel
    - Tear everything down on disconnect, end of stream or transport failure

    Example:
        >>> session = SerialSession(SerialPortProvider(port="/dev/ttyACM0"))
        >>> session.connect()
        >>> session.snapshot()
        DeviceState(joystick_x=512, joystick_y=512, mode=0)
        >>> session.send(SetBrightness(level=128))
        >>> session.disconnect()
    """

    def __init__(
        self,
        provider: PortProvider,
        protocol: Optional[Protocol] = None,
        state: Optional[ConnectionState] = None,
        baudrate: int = DEFAULT_BAUDRATE,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        min_send_interval: float = 0.0,
    ):
        """Initialize SerialSession.

        Args:
            provider: Source of ports (pyserial, fake, ...)
            protocol: Protocol implementation (default: JoystickLineProtocol)
            state: Shared state holder, or None to create one
            baudrate: Fixed serial rate
            max_line_length: Longest partial line kept by the framer
            min_send_interval: Minimum seconds between outbound writes
        """
        self._provider = provider
        self._protocol = protocol or JoystickLineProtocol()
        self._state = state or ConnectionState()
        self._baudrate = baudrate
        self._max_line_length = max_line_length

        self._channel = CommandChannel(
            self._state,
            self._protocol,
            min_send_interval=min_send_interval,
        )

        # Serializes connect/teardown
        self._lifecycle_lock = threading.RLock()
        self._handle: Optional[PortHandle] = None
        self._stop = threading.Event()
        self._reader_thread: Optional[threading.Thread] = None
        # Set once the current connection is fully torn down
        self._torn_down = threading.Event()

        self._unrecognized_count = 0

    # --- Lifecycle ---

    def connect(self) -> None:
        """Select, open and start reading from the board.

        Raises:
            UnsupportedTransportError: The host has no serial transport
            ConnectAbortedError: Device selection was cancelled or found nothing
            OpenFailureError: The selected port could not be opened
        """
        with self._lifecycle_lock:
            status = self._state.get_status()
            if status in (ConnectionStatus.CONNECTING, ConnectionStatus.CONNECTED):
                logger.warning("Already connected")
                return

            self._state.set_status(ConnectionStatus.CONNECTING)

            if not self._provider.is_supported():
                message = "Serial transport is not supported on this host"
                self._connect_failed(message)
                raise UnsupportedTransportError(message)

            try:
                handle = self._provider.request_device()
            except ConnectAbortedError as e:
                self._connect_failed(f"Device selection aborted: {e}")
                raise
            except Exception as e:
                self._connect_failed(f"Device selection aborted: {e}")
                raise ConnectAbortedError(f"Device selection failed: {e}") from e

            try:
                self._provider.open(handle, self._baudrate)
            except OpenFailureError as e:
                self._connect_failed(str(e))
                raise
            except Exception as e:
                self._connect_failed(f"Failed to open {handle.info.port}: {e}")
                raise OpenFailureError(f"Failed to open {handle.info.port}: {e}") from e

            try:
                writer = self._provider.acquire_writer(handle)
            except Exception as e:
                self._close_quietly(handle)
                self._connect_failed(f"Could not acquire writer: {e}")
                raise OpenFailureError(f"Could not acquire writer: {e}") from e

            stop = threading.Event()
            self._handle = handle
            self._stop = stop
            self._torn_down = threading.Event()
            self._channel.attach(
                writer,
                on_failure=lambda error: self._on_write_failure(handle, error),
            )
            self._state.set_status(ConnectionStatus.CONNECTED)

            self._reader_thread = threading.Thread(
                target=self._reader_loop,
                args=(handle, stop),
                daemon=True,
                name="SessionReader",
            )
            self._reader_thread.start()

        logger.info(f"Connected to {handle.info.port} @ {self._baudrate} baud")

    def disconnect(self) -> None:
        """Stop the read loop, release the port and go to DISCONNECTED.

        Safe to call multiple times. A FAILED status from an earlier failure
        is left in place when there is nothing left to tear down.
        """
        with self._lifecycle_lock:
            handle = self._handle
            stop = self._stop
            reader_thread = self._reader_thread
            torn_down = self._torn_down

        if handle is None:
            return

        stop.set()

        # Let the loop release its reader before the port goes away
        if reader_thread and reader_thread is not threading.current_thread():
            reader_thread.join(timeout=THREAD_JOIN_TIMEOUT)
            if reader_thread.is_alive():
                logger.warning("Reader thread still blocked; closing port anyway")

        self._shutdown(handle, ConnectionStatus.DISCONNECTED)
        # A reader or sender exit may have started the teardown first
        torn_down.wait(timeout=THREAD_JOIN_TIMEOUT)

    def is_connected(self) -> bool:
        return self._state.get_status() is ConnectionStatus.CONNECTED

    def __enter__(self) -> SerialSession:
        """Context manager support - connect on enter."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - disconnect on exit."""
        self.disconnect()

    # --- Data interface ---

    def send(self, command: OutboundCommand) -> None:
        """Send a command; silently ignored unless connected."""
        self._channel.send(command)

    def snapshot(self) -> DeviceState:
        """Latest device state (polling is the only notification mechanism)."""
        return self._state.snapshot()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._state.get_status()

    @property
    def last_error(self) -> Optional[str]:
        """Reason for the latest DISCONNECTED/FAILED transition, if any."""
        return self._state.last_message

    @property
    def unrecognized_count(self) -> int:
        """Number of inbound lines dropped as unrecognized."""
        return self._unrecognized_count

    # --- Internal methods ---

    def _reader_loop(self, handle: PortHandle, stop: threading.Event) -> None:
        """Pull chunks until end of stream, failure or stop."""
        logger.debug("Reader thread started")
        framer = LineFramer(max_line_length=self._max_line_length)
        status = ConnectionStatus.DISCONNECTED
        message: Optional[str] = None

        try:
            reader = self._provider.acquire_reader(handle)
        except Exception as e:
            logger.error(f"Could not acquire reader: {e}")
            self._shutdown(handle, ConnectionStatus.FAILED, f"Read failure: {e}")
            return

        try:
            while not stop.is_set():
                chunk = reader.read()
                if chunk is None:
                    logger.info("Serial stream closed by device")
                    message = "End of stream"
                    break
                for line in framer.feed_bytes(chunk):
                    self._handle_line(line)
        except Exception as e:
            # Errors caused by our own teardown are not failures
            if not stop.is_set():
                logger.error(f"Serial read error: {e}")
                status = ConnectionStatus.FAILED
                message = f"Read failure: {e}"
        finally:
            reader.release()
            framer.reset()

        self._shutdown(handle, status, message)
        logger.debug("Reader thread exiting")

    def _handle_line(self, line: str) -> None:
        frame = self._protocol.decode(line)
        if not self._state.update_from_frame(frame):
            self._unrecognized_count += 1
            logger.debug(f"Ignoring unrecognized line: {line!r}")

    def _on_write_failure(self, handle: PortHandle, error: Exception) -> None:
        """Called from the sender thread when a write fails."""
        self._shutdown(handle, ConnectionStatus.FAILED, f"Write failure: {error}")

    def _shutdown(
        self,
        handle: PortHandle,
        status: ConnectionStatus,
        message: Optional[str] = None,
    ) -> None:
        """Tear down the connection that owns handle.

        Only the first caller for a given handle does any work, so a late
        reader or sender exit cannot close a newer connection. The sender is
        joined outside the lifecycle lock, since its failure callback takes
        that lock too.
        """
        with self._lifecycle_lock:
            if handle is None or self._handle is not handle:
                return
            self._handle = None
            self._stop.set()
            sender = self._channel.detach(wait=False)
            torn_down = self._torn_down

        # An in-flight write finishes before the port closes
        if sender is not None and sender is not threading.current_thread():
            sender.join(timeout=THREAD_JOIN_TIMEOUT)
            if sender.is_alive():
                logger.warning("Sender thread still writing; closing port anyway")

        self._close_quietly(handle)

        with self._lifecycle_lock:
            self._state.set_status(status, message)
        torn_down.set()

        if status is ConnectionStatus.FAILED:
            logger.error(f"Connection to {handle.info.port} failed: {message}")
        else:
            logger.info(f"Disconnected from {handle.info.port}")

    def _close_quietly(self, handle: PortHandle) -> None:
        try:
            self._provider.close(handle)
        except Exception as e:
            logger.error(f"Error closing {handle.info.port}: {e}")

    def _connect_failed(self, message: str) -> None:
        logger.error(f"Connect failed: {message}")
        self._state.set_status(ConnectionStatus.DISCONNECTED, message)
