"""Outbound command channel.

Any number of threads may call send(). A single sender thread owns the
writer and drains a FIFO queue, so encoded commands reach the port whole and
in the order send() was called.
"""
from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Callable, Optional

from ..models import ConnectionStatus, OutboundCommand
from ..port.base import ChunkWriter
from ..protocol.base import Protocol
from .state import ConnectionState

logger = logging.getLogger(__name__)

THREAD_JOIN_TIMEOUT = 1.0  # seconds


class CommandChannel:
    """Serializes outbound writes onto one transport write path.

    Responsibilities:
    - Drop commands while not connected
    - Queue commands from concurrent callers in call order
    - Write each command completely before starting the next
    - Report a failed write once and stop; never retry it
    """

    def __init__(
        self,
        state: ConnectionState,
        protocol: Protocol,
        min_send_interval: float = 0.0,
    ):
        """Initialize CommandChannel.

        Args:
            state: Shared connection state, consulted for the current status
            protocol: Protocol used to encode commands
            min_send_interval: Minimum seconds between consecutive writes
                (0 disables rate limiting)
        """
        self._state = state
        self._protocol = protocol
        self._min_send_interval = min_send_interval

        self._lock = threading.Lock()
        self._queue: Optional[queue.Queue[Optional[bytes]]] = None
        self._closing: Optional[threading.Event] = None
        self._sender_thread: Optional[threading.Thread] = None

        self._last_send_time = 0.0
        self._sent_count = 0

    def attach(
        self,
        writer: ChunkWriter,
        on_failure: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        """Start a sender thread that owns writer.

        Args:
            writer: Writable half of the freshly opened port
            on_failure: Called from the sender thread when a write fails
        """
        with self._lock:
            if self._queue is not None:
                raise RuntimeError("CommandChannel is already attached")
            command_queue: queue.Queue[Optional[bytes]] = queue.Queue()
            closing = threading.Event()
            self._queue = command_queue
            self._closing = closing
            self._sender_thread = threading.Thread(
                target=self._sender_loop,
                args=(command_queue, closing, writer, on_failure),
                daemon=True,
                name="CommandSender",
            )
            self._sender_thread.start()

    def detach(
        self,
        timeout: float = THREAD_JOIN_TIMEOUT,
        wait: bool = True,
    ) -> Optional[threading.Thread]:
        """Stop the sender thread.

        Commands not yet started are dropped; a write already in progress is
        allowed to finish. Safe to call multiple times.

        Args:
            timeout: Seconds to wait for the sender thread to exit
            wait: Join the sender thread before returning. With False the
                caller gets the thread back and joins it itself.

        Returns:
            The stopped sender thread, or None if nothing was attached
        """
        with self._lock:
            command_queue, closing, thread = self._queue, self._closing, self._sender_thread
            self._queue = None
            self._closing = None
            self._sender_thread = None

        if command_queue is None:
            return None

        closing.set()
        command_queue.put(None)  # Sentinel

        if wait and thread is not threading.current_thread() and thread.is_alive():
            thread.join(timeout=timeout)
        return thread

    def send(self, command: OutboundCommand) -> None:
        """Queue a command for the board.

        Does nothing while the session is not connected.

        Raises:
            ValueError: If command is not a known command type
        """
        if self._state.get_status() is not ConnectionStatus.CONNECTED:
            logger.debug(f"Not connected, dropping {command!r}")
            return

        data = self._protocol.encode(command)

        with self._lock:
            if self._queue is None:
                logger.debug(f"No writer attached, dropping {command!r}")
                return
            self._queue.put(data)

    @property
    def sent_count(self) -> int:
        """Number of commands written successfully."""
        return self._sent_count

    def _sender_loop(
        self,
        command_queue: queue.Queue[Optional[bytes]],
        closing: threading.Event,
        writer: ChunkWriter,
        on_failure: Optional[Callable[[Exception], None]],
    ) -> None:
        """Drain the queue in order until the sentinel or a failed write."""
        logger.debug("Sender thread started")
        try:
            while True:
                data = command_queue.get()
                if data is None or closing.is_set():
                    break

                self._throttle()

                try:
                    writer.write(data)
                except Exception as e:
                    logger.error(f"Write failed for {data!r}: {e}")
                    if on_failure is not None:
                        on_failure(e)
                    break

                self._last_send_time = time.monotonic()
                self._sent_count += 1
        finally:
            writer.release()
            logger.debug("Sender thread exiting")

    def _throttle(self) -> None:
        if self._min_send_interval <= 0:
            return
        elapsed = time.monotonic() - self._last_send_time
        if elapsed < self._min_send_interval:
            time.sleep(self._min_send_interval - elapsed)
