"""GestureKeypad - Type IPv4 addresses with mid-air directional hand gestures."""

__version__ = "0.1.0"

from gesture_keypad.detector import (
    CameraAxes,
    Direction,
    GestureDetector,
    GestureEvent,
    GestureEventType,
)
from gesture_keypad.patterns import GesturePatternMap, Symbol, SymbolKind
from gesture_keypad.ip_entry import IpEntryStateMachine, is_valid_input, patterns_for_address
from gesture_keypad.feedback import Cue, FeedbackSink, LoggingFeedback, RecordingFeedback
from gesture_keypad.motion import MotionEvent, MotionEventKind, MotionSource, script_for_pattern
from gesture_keypad.session import InputSession, SessionStats
from gesture_keypad.recorder import MotionRecorder, MotionPlayer
from gesture_keypad.config import KeypadConfig, load_config, save_config
from gesture_keypad.metrics import MetricsCollector
