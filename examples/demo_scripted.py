#!/usr/bin/env python3
"""Scripted gesture keypad demo — no hand tracker required.

Usage:
    python examples/demo_scripted.py [--address 192.168.0.1] [--threshold 0.05]
"""

import argparse
import logging
import sys

sys.path.insert(0, "src")
from gesture_keypad import InputSession, KeypadConfig, MotionSource, patterns_for_address
from gesture_keypad.feedback import ConsoleFeedback
from gesture_keypad.motion import script_for_patterns


def main():
    parser = argparse.ArgumentParser(description="Gesture keypad scripted demo")
    parser.add_argument("--address", default="192.168.0.1", help="Address to type")
    parser.add_argument("--threshold", type=float, default=0.05, help="Detection threshold")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = KeypadConfig(threshold=args.threshold)
    source = MotionSource()
    session = InputSession(source, feedback=ConsoleFeedback(), config=config)
    session.on_complete(lambda addr: print(f"\n✅ Connect to {addr}"))

    gestures = patterns_for_address(args.address, config.pattern_map())
    print(f"⌨️  Typing {args.address} with gestures: {' '.join(gestures)}\n")

    with session:
        source.emit_all(script_for_patterns(gestures))

    stats = session.stats
    print(f"\n📊 {stats.gestures} gestures, {stats.rejected} rejected, {stats.completions} completed")


if __name__ == "__main__":
    main()
