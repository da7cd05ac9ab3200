"""Exceptions raised by the joylink connection layer."""


class JoylinkError(RuntimeError):
    """Base class for all joylink errors."""
    pass


class UnsupportedTransportError(JoylinkError):
    """Raised when the host has no usable serial transport."""
    pass


class ConnectAbortedError(JoylinkError):
    """Raised when device selection is cancelled or finds no device."""
    pass


class PortNotFoundError(ConnectAbortedError):
    """Raised when no matching serial port could be found."""
    pass


class MultiplePortsError(ConnectAbortedError):
    """Raised when more than one matching serial port is found."""
    def __init__(self, message, devices):
        super().__init__(message)
        self.devices = devices  # list[PortInfo]


class OpenFailureError(JoylinkError):
    """Raised when the selected port cannot be opened."""
    pass


class ReadFailureError(JoylinkError):
    """Raised by a chunk reader when the transport fails mid-read."""
    pass


class WriteFailureError(JoylinkError):
    """Raised by a chunk writer when bytes could not be fully written."""
    pass
