"""End-to-end tests: motion source → detector → IP entry → feedback."""

import numpy as np
import pytest

from gesture_keypad.config import KeypadConfig
from gesture_keypad.detector import Direction, GestureEventType
from gesture_keypad.feedback import COMPLETION_CUES, Cue, RecordingFeedback
from gesture_keypad.ip_entry import patterns_for_address
from gesture_keypad.metrics import MetricsCollector
from gesture_keypad.motion import (
    MotionEvent,
    MotionEventKind,
    MotionSource,
    script_for_pattern,
    script_for_patterns,
)
from gesture_keypad.session import InputSession


def make_session(**config):
    source = MotionSource()
    feedback = RecordingFeedback()
    cfg = KeypadConfig(prompt="IP: ", **config)
    session = InputSession(source, feedback=feedback, config=cfg)
    gestures = []
    completed = []
    session.on_gesture(gestures.append)
    session.on_complete(completed.append)
    return session, source, feedback, gestures, completed


class TestEndToEnd:
    def test_right_swipe_types_eight(self):
        session, source, feedback, gestures, _ = make_session()
        with session:
            source.emit_all(script_for_pattern("R", distance=0.1))

        assert [(g.type, g.direction, g.pattern) for g in gestures] == [
            (GestureEventType.DETECTING, Direction.RIGHT, "R"),
            (GestureEventType.DETECTED, Direction.RIGHT, "R"),
        ]
        assert session.machine.buffer == "8"
        assert feedback.renders == ["IP: [8]", "IP: 8"]
        assert feedback.cues == [Cue.RIGHT]

    def test_two_stroke_gesture_previews_each_step(self):
        session, source, feedback, _, _ = make_session()
        with session:
            source.emit_all(script_for_pattern("UL"))
        assert feedback.renders == ["IP: [2]", "IP: [1]", "IP: 1"]
        assert feedback.cues == [Cue.UP, Cue.LEFT]

    def test_jitter_produces_nothing(self):
        session, source, feedback, gestures, _ = make_session()
        events = [
            MotionEvent(MotionEventKind.DETECTED, position=np.array([0.0, 0.0, 0.5])),
            MotionEvent(MotionEventKind.PRESSED),
        ]
        pos = np.array([0.0, 0.0, 0.5])
        for i in range(40):
            pos = pos + np.array([0.01 if i % 2 == 0 else -0.01, 0.003, 0.0]) * (1 if i % 4 < 2 else -1)
            events.append(MotionEvent(MotionEventKind.UPDATED, position=pos))
        events.append(MotionEvent(MotionEventKind.RELEASED))

        with session:
            source.emit_all(events)

        assert gestures == []
        assert feedback.renders == []
        assert session.machine.buffer == ""

    def test_types_full_address(self):
        session, source, _, _, completed = make_session()
        with session:
            source.emit_all(script_for_patterns(patterns_for_address("192.168.0.12")))
        assert completed == ["192.168.0.12"]
        assert session.last_address == "192.168.0.12"

    def test_completion_only_after_final_separator(self):
        session, source, feedback, _, completed = make_session()
        session.start()
        source.emit_all(script_for_patterns(["U"] * 11))
        assert session.machine.buffer == "222.222.222.22"
        assert completed == []

        source.emit_all(script_for_pattern("DR"))
        assert completed == ["222.222.222.22"]
        assert completed[0].count(".") == 3
        assert feedback.cues[-4:] == list(COMPLETION_CUES)
        session.stop()

    def test_reset_on_complete(self):
        session, source, feedback, _, completed = make_session()
        with session:
            source.emit_all(script_for_patterns(patterns_for_address("1.2.3.4")))
            assert session.machine.buffer == ""
            assert not session.machine.completed
            assert "IP: 1.2.3.4" in feedback.renders
            assert feedback.last_render == "IP: "

            source.emit_all(script_for_patterns(patterns_for_address("5.6.7.8")))
        assert completed == ["1.2.3.4", "5.6.7.8"]

    def test_keep_address_when_reset_disabled(self):
        session, source, _, _, completed = make_session(reset_on_complete=False)
        with session:
            source.emit_all(script_for_patterns(patterns_for_address("1.2.3.4")))
            source.emit_all(script_for_pattern("R"))
        assert completed == ["1.2.3.4"]
        assert session.machine.buffer == "1.2.3.4"
        assert session.stats.rejected == 1

    def test_delete_gesture(self):
        session, source, _, _, _ = make_session()
        with session:
            source.emit_all(script_for_patterns(["UL", "U", "UR", "DL"]))
        assert session.machine.buffer == "12"

    def test_lost_hand_commits_gesture(self):
        session, source, _, _, _ = make_session()
        events = script_for_pattern("L")
        events[-1] = MotionEvent(MotionEventKind.LOST)
        with session:
            source.emit_all(events)
        assert session.machine.buffer == "5"

    def test_custom_threshold_from_config(self):
        session, source, _, gestures, _ = make_session(threshold=0.5)
        with session:
            source.emit_all(script_for_pattern("R", distance=0.1))
        assert gestures == []


class TestLifecycle:
    def test_start_stop_subscriptions(self):
        session, source, _, _, _ = make_session()
        assert source.listener_count == 0
        session.start()
        session.start()
        assert source.listener_count == 1
        assert session.running
        session.stop()
        session.stop()
        assert source.listener_count == 0
        assert not session.running

    def test_stopped_session_ignores_motion(self):
        session, source, _, gestures, _ = make_session()
        source.emit_all(script_for_pattern("R"))
        with session:
            pass
        source.emit_all(script_for_pattern("R"))
        assert gestures == []
        assert session.machine.buffer == ""

    def test_independent_sessions(self):
        s1, src1, _, _, _ = make_session()
        s2, src2, _, _, _ = make_session()
        with s1, s2:
            src1.emit_all(script_for_pattern("R"))
            src2.emit_all(script_for_pattern("D"))
        assert s1.machine.buffer == "8"
        assert s2.machine.buffer == "0"

    def test_shared_source_feeds_both(self):
        source = MotionSource()
        a = InputSession(source, feedback=RecordingFeedback())
        b = InputSession(source, feedback=RecordingFeedback())
        with a, b:
            source.emit_all(script_for_pattern("RU"))
        assert a.machine.buffer == b.machine.buffer == "7"

    def test_reset_clears_buffer(self):
        session, source, _, _, _ = make_session()
        with session:
            source.emit_all(script_for_patterns(["R", "R"]))
            session.reset()
        assert session.machine.buffer == ""

    def test_failing_callback_is_isolated(self):
        session, source, _, gestures, completed = make_session()

        def boom(_):
            raise RuntimeError("boom")

        session.on_gesture(boom)
        session.on_complete(boom)
        with session:
            source.emit_all(script_for_patterns(patterns_for_address("9.9.9.9")))
        assert completed == ["9.9.9.9"]
        assert len(gestures) > 0


class TestStats:
    def test_stats_and_metrics(self):
        metrics = MetricsCollector()
        source = MotionSource()
        session = InputSession(source, feedback=RecordingFeedback(), metrics=metrics)
        with session:
            source.emit_all(script_for_patterns(["DR", "R", "DL", "DL", "UD"]))

        stats = session.stats
        assert stats.gestures == 5
        # DR at start, second DL on empty buffer, UD unknown
        assert stats.rejected == 3
        assert stats.completions == 0
        assert metrics.gesture_counts == {"DR": 1, "R": 1, "DL": 2, "UD": 1}
        assert metrics.rejected_count == 3
        assert "gesture_keypad_sessions_total 1" in metrics.render()

    def test_stats_is_snapshot(self):
        session, source, _, _, _ = make_session()
        snap = session.stats
        with session:
            source.emit_all(script_for_pattern("R"))
        assert snap.gestures == 0
        assert session.stats.gestures == 1
