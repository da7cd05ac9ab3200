"""Line framer for the serial byte stream.

Recovers complete newline-terminated lines from arbitrarily sized chunks,
keeping the unterminated tail until the rest of the line arrives.
"""
from __future__ import annotations

import codecs
import logging
from typing import List

logger = logging.getLogger(__name__)

LINE_DELIMITER = "\n"
DEFAULT_MAX_LINE_LENGTH = 64 * 1024  # characters


class LineFramer:
    """Turns a sequence of chunks into complete, trimmed lines.

    The framer is not thread-safe. It belongs to a single read loop and is
    replaced on every (re)connect.

    Example:
        >>> framer = LineFramer()
        >>> framer.feed("J,10,20,B,0\\nJ,30")
        ['J,10,20,B,0']
        >>> framer.feed(",40,B,1\\n")
        ['J,30,40,B,1']
    """

    def __init__(self, max_line_length: int = DEFAULT_MAX_LINE_LENGTH):
        """Initialize framer.

        Args:
            max_line_length: Longest line kept. A longer line is dropped as a
                whole, however it was chunked, so a stream without newlines
                cannot grow the buffer without bound.
        """
        self._max_line_length = max_line_length
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="ignore")
        self._overflow_count = 0
        # Set while skipping the rest of an over-long line
        self._discarding = False

    def feed(self, chunk: str) -> List[str]:
        """Append a text chunk and return every line it completes.

        Args:
            chunk: Decoded text, of any length (including empty)

        Returns:
            Completed lines in arrival order, delimiter and surrounding
            whitespace removed. Whitespace-only lines come back as "".
            Lines longer than max_line_length are never returned, not even
            in part.
        """
        if not chunk:
            return []

        self._buffer += chunk
        parts = self._buffer.split(LINE_DELIMITER)
        # Last part is the unterminated tail ("" if chunk ended on a newline)
        tail = parts.pop()

        lines = []
        for part in parts:
            if self._discarding:
                # Remainder of a line already dropped
                self._discarding = False
            elif len(part) > self._max_line_length:
                self._drop(len(part))
            else:
                lines.append(part.strip())

        if self._discarding:
            tail = ""
        elif len(tail) > self._max_line_length:
            self._drop(len(tail))
            self._discarding = True
            tail = ""
        self._buffer = tail

        return lines

    def feed_bytes(self, chunk: bytes) -> List[str]:
        """Decode a raw byte chunk as UTF-8 and feed it.

        Multi-byte characters split across chunks are reassembled;
        undecodable bytes are dropped.
        """
        if not chunk:
            return []
        return self.feed(self._decoder.decode(chunk))

    def reset(self) -> None:
        """Discard the buffered tail and any partial character."""
        self._buffer = ""
        self._discarding = False
        self._decoder.reset()

    @property
    def pending(self) -> str:
        """Unterminated text waiting for its newline."""
        return self._buffer

    @property
    def overflow_count(self) -> int:
        """Number of over-long lines dropped."""
        return self._overflow_count

    def _drop(self, length: int) -> None:
        self._overflow_count += 1
        logger.warning(
            f"Line buffer overflow: dropped a line of at least {length} "
            f"characters."
        )
