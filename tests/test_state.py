"""Unit tests for ConnectionState."""

import threading
import unittest

from joylink.models import ConnectionStatus, DeviceState, JoystickReport, Unrecognized
from joylink.protocol import FrameParser
from joylink.session.state import ConnectionState


class TestConnectionStateUpdates(unittest.TestCase):

    def setUp(self):
        self.state = ConnectionState()

    def test_initial_state(self):
        self.assertEqual(self.state.snapshot(), DeviceState())
        self.assertEqual(self.state.get_status(), ConnectionStatus.DISCONNECTED)
        self.assertIsNone(self.state.last_message)
        self.assertEqual(self.state.reports_applied, 0)

    def test_report_replaces_state(self):
        self.assertTrue(self.state.update_from_frame(JoystickReport(x=100, y=200, mode=1)))
        self.assertEqual(self.state.snapshot(), DeviceState(100, 200, 1))
        self.assertEqual(self.state.reports_applied, 1)

    def test_unrecognized_is_noop(self):
        self.state.update_from_frame(JoystickReport(x=1, y=2, mode=1))
        before = self.state.snapshot()
        for _ in range(3):
            self.assertFalse(self.state.update_from_frame(Unrecognized("garbage")))
        self.assertEqual(self.state.snapshot(), before)
        self.assertEqual(self.state.reports_applied, 1)

    def test_malformed_lines_leave_state_unchanged(self):
        for line in ["", "garbage", "J,1,2,X,1", "J,abc,2,B,1"]:
            self.state.update_from_frame(FrameParser.parse_line(line))
        self.assertEqual(self.state.snapshot(), DeviceState())

    def test_repeated_snapshots_equal(self):
        self.state.update_from_frame(JoystickReport(x=3, y=4, mode=0))
        self.assertEqual(self.state.snapshot(), self.state.snapshot())

    def test_status_with_message(self):
        self.state.set_status(ConnectionStatus.FAILED, "Read failure: boom")
        self.assertEqual(self.state.get_status(), ConnectionStatus.FAILED)
        self.assertEqual(self.state.last_message, "Read failure: boom")
        self.state.set_status(ConnectionStatus.CONNECTING)
        self.assertIsNone(self.state.last_message)


class TestConnectionStateThreadSafety(unittest.TestCase):

    def test_snapshots_never_torn(self):
        """Concurrent readers only ever see whole reports."""
        state = ConnectionState()
        stop = threading.Event()
        torn = []

        def writer():
            i = 0
            while not stop.is_set():
                i = (i + 1) % 1000
                state.update_from_frame(JoystickReport(x=i, y=i, mode=i % 2))

        def reader():
            for _ in range(5000):
                snap = state.snapshot()
                if snap == DeviceState():
                    continue
                if snap.joystick_x != snap.joystick_y or snap.mode != snap.joystick_x % 2:
                    torn.append(snap)

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in readers:
            t.start()
        for t in readers:
            t.join()
        stop.set()
        writer_thread.join()

        self.assertEqual(torn, [])


if __name__ == '__main__':
    unittest.main()
