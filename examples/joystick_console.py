#!/usr/bin/env python3
"""
Interactive joystick board console.

Connects to the board, prints the joystick state a few times per second and
drives the LED: brightness follows the joystick X axis, and every mode
change triggers a blink.

Usage:
    python examples/joystick_console.py [PORT]
"""

import sys
import time
import logging
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from joylink import (
    Blink,
    JoylinkError,
    SerialPortProvider,
    SerialSession,
    SetBrightness,
)
from joylink.models import BRIGHTNESS_MAX, JOYSTICK_MAX

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)

ARDUINO_VID = 0x2341


def to_brightness(joystick_x: int) -> int:
    """Map a raw axis reading onto the LED range, clamping out-of-range values."""
    ratio = max(0, min(JOYSTICK_MAX, joystick_x)) / JOYSTICK_MAX
    return int(ratio * BRIGHTNESS_MAX)


def main():
    port = sys.argv[1] if len(sys.argv) > 1 else None
    provider = SerialPortProvider(port=port, vid=None if port else ARDUINO_VID)
    session = SerialSession(provider, min_send_interval=0.02)

    print("Connecting to board...")
    try:
        session.connect()
    except JoylinkError as e:
        print(f"Failed to connect: {e}")
        return

    last_mode = None
    last_level = None

    try:
        print("Streaming for 30 seconds (Ctrl+C to stop)...")
        start = time.time()
        while time.time() - start < 30.0 and session.is_connected():
            state = session.snapshot()

            print(f"\rX: {state.joystick_x:4d}  Y: {state.joystick_y:4d}  "
                  f"Mode: {state.mode}", end="")
            sys.stdout.flush()

            level = to_brightness(state.joystick_x)
            if level != last_level:
                session.send(SetBrightness(level))
                last_level = level

            if last_mode is not None and state.mode != last_mode:
                session.send(Blink())
            last_mode = state.mode

            time.sleep(0.05)

        if not session.is_connected():
            print(f"\nConnection lost: {session.last_error}")

    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        print("\nDisconnecting...")
        session.disconnect()
        print(f"Done. Ignored {session.unrecognized_count} unrecognized line(s).")


if __name__ == "__main__":
    main()
