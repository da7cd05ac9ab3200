"""Selects the serial port the board is attached to."""
from __future__ import annotations

import logging
from typing import List, Optional

from serial.tools import list_ports

from ..errors import MultiplePortsError, PortNotFoundError
from .base import PortInfo

logger = logging.getLogger(__name__)


def _list_ports() -> List[PortInfo]:
    return [
        PortInfo(
            port=p.device,
            vid=p.vid,
            pid=p.pid,
            product=p.product,
            description=p.description,
        )
        for p in list_ports.comports()
    ]


def _looks_like_board(
    info: PortInfo,
    vid: Optional[int],
    pid: Optional[int],
    product_substring: Optional[str],
) -> bool:
    if vid is not None and info.vid != vid:
        return False
    if pid is not None and info.pid != pid:
        return False
    if product_substring is not None:
        # Windows often reports the board name only in the description
        names = " ".join(filter(None, (info.product, info.description)))
        if product_substring.lower() not in names.lower():
            return False
    return True


def select_port(
    port: Optional[str] = None,
    *,
    vid: Optional[int] = None,
    pid: Optional[int] = None,
    product_substring: Optional[str] = None,
) -> PortInfo:
    """Pick the port to open.

    An explicit port name always wins, even if the OS does not list it
    (virtual ports, udev symlinks). Otherwise exactly one listed port must
    match every criterion that is not None.

    Args:
        port: Explicit port name, e.g. '/dev/ttyACM0' or 'COM3'
        vid: USB vendor ID to match
        pid: USB product ID to match
        product_substring: Case-insensitive part of the product name

    Raises:
        PortNotFoundError: No listed port matches
        MultiplePortsError: More than one listed port matches
    """
    listed = _list_ports()

    if port is not None:
        for info in listed:
            if info.port == port:
                return info
        logger.debug(f"{port} is not listed by the OS; opening it by name")
        return PortInfo(port=port)

    matches = [
        info for info in listed
        if _looks_like_board(info, vid, pid, product_substring)
    ]

    if not matches:
        raise PortNotFoundError(
            f"No board found among {len(listed)} serial port(s)"
        )

    if len(matches) > 1:
        names = ", ".join(info.port for info in matches)
        logger.error(f"Several ports look like the board: {names}")
        raise MultiplePortsError(
            f"{len(matches)} ports look like the board ({names}); pass port= to choose",
            devices=matches,
        )

    return matches[0]
