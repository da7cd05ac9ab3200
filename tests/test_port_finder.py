"""Unit tests for board port selection."""

import unittest
from unittest.mock import MagicMock, patch

from joylink.errors import ConnectAbortedError, MultiplePortsError, PortNotFoundError
from joylink.port.base import PortInfo
from joylink.port.finder import select_port

ARDUINO_VID = 0x2341
ARDUINO_UNO_PID = 0x0043


def make_port(device, vid=None, pid=None, product=None, description="n/a"):
    port = MagicMock()
    port.device = device
    port.vid = vid
    port.pid = pid
    port.product = product
    port.description = description
    return port


UNO = make_port("/dev/ttyACM0", ARDUINO_VID, ARDUINO_UNO_PID, "Arduino Uno", "Arduino Uno")
NANO_COM = make_port("COM4", ARDUINO_VID, 0x0058, None, "Arduino Nano Every (COM4)")
FTDI = make_port("/dev/ttyUSB0", 0x0403, 0x6001, "FT232R USB UART", "FT232R USB UART")
BUILTIN = make_port("/dev/ttyS0")


@patch('joylink.port.finder.list_ports.comports')
class TestSelectExplicitPort(unittest.TestCase):

    def test_listed_port_carries_usb_details(self, mock_comports):
        mock_comports.return_value = [UNO, FTDI]
        info = select_port("/dev/ttyUSB0")
        self.assertEqual(info, PortInfo(
            port="/dev/ttyUSB0",
            vid=0x0403,
            pid=0x6001,
            product="FT232R USB UART",
            description="FT232R USB UART",
        ))

    def test_unlisted_port_used_as_is(self, mock_comports):
        mock_comports.return_value = [UNO]
        self.assertEqual(select_port("/dev/rfcomm0"), PortInfo(port="/dev/rfcomm0"))

    def test_explicit_port_ignores_criteria(self, mock_comports):
        mock_comports.return_value = [UNO, FTDI]
        info = select_port("/dev/ttyUSB0", vid=ARDUINO_VID)
        self.assertEqual(info.port, "/dev/ttyUSB0")


@patch('joylink.port.finder.list_ports.comports')
class TestSelectAutoDetect(unittest.TestCase):

    def test_vid_pid(self, mock_comports):
        mock_comports.return_value = [BUILTIN, FTDI, UNO]
        info = select_port(vid=ARDUINO_VID, pid=ARDUINO_UNO_PID)
        self.assertEqual(info.port, "/dev/ttyACM0")
        self.assertEqual(info.product, "Arduino Uno")

    def test_product_substring_case_insensitive(self, mock_comports):
        mock_comports.return_value = [UNO, FTDI]
        self.assertEqual(select_port(product_substring="uno").port, "/dev/ttyACM0")

    def test_product_substring_found_in_description(self, mock_comports):
        mock_comports.return_value = [NANO_COM, FTDI]
        self.assertEqual(select_port(product_substring="nano every").port, "COM4")

    def test_port_without_product_never_matches_substring(self, mock_comports):
        mock_comports.return_value = [make_port("/dev/ttyS1", description=None)]
        with self.assertRaises(PortNotFoundError):
            select_port(product_substring="arduino")

    def test_no_match(self, mock_comports):
        mock_comports.return_value = [FTDI, BUILTIN]
        with self.assertRaises(PortNotFoundError):
            select_port(vid=ARDUINO_VID)

    def test_no_ports_at_all(self, mock_comports):
        mock_comports.return_value = []
        with self.assertRaises(PortNotFoundError):
            select_port()

    def test_several_matches_refused(self, mock_comports):
        mock_comports.return_value = [UNO, NANO_COM, FTDI]
        with self.assertLogs("joylink.port.finder", level="ERROR"):
            with self.assertRaises(MultiplePortsError) as ctx:
                select_port(vid=ARDUINO_VID)
        self.assertEqual([d.port for d in ctx.exception.devices], ["/dev/ttyACM0", "COM4"])
        self.assertIn("/dev/ttyACM0, COM4", str(ctx.exception))

    def test_selection_errors_abort_connect(self, mock_comports):
        self.assertTrue(issubclass(PortNotFoundError, ConnectAbortedError))
        self.assertTrue(issubclass(MultiplePortsError, ConnectAbortedError))


if __name__ == '__main__':
    unittest.main()
