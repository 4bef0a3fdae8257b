"""Tests for motion recording and replay."""

import numpy as np
import pytest

from gesture_keypad.detector import CameraAxes
from gesture_keypad.feedback import RecordingFeedback
from gesture_keypad.motion import MotionEventKind, MotionSource, script_for_patterns
from gesture_keypad.recorder import MotionPlayer, MotionRecorder
from gesture_keypad.session import InputSession


def record_script(patterns):
    rec = MotionRecorder()
    rec.start()
    for event in script_for_patterns(patterns):
        rec.add_event(event, timestamp=event.timestamp)
    rec.stop()
    return rec


class TestRecorder:
    def test_record_and_count(self):
        rec = record_script(["R"])
        # detected + pressed + 5 updates + released
        assert rec.event_count == 8
        assert rec.duration > 0

    def test_not_recording_ignores_events(self):
        rec = MotionRecorder()
        for event in script_for_patterns(["R"]):
            rec.add_event(event)
        assert rec.event_count == 0

    def test_records_as_listener(self):
        source = MotionSource()
        rec = MotionRecorder()
        rec.start()
        source.subscribe(rec)
        source.emit_all(script_for_patterns(["U", "D"]))
        assert rec.stop() == 16
        assert not rec.is_recording


class TestPlayer:
    def test_save_and_load_json(self, tmp_path):
        rec = record_script(["UL", "DR"])
        path = tmp_path / "session.json"
        rec.save(path)

        player = MotionPlayer.load(path)
        assert player.event_count == rec.event_count
        assert player.duration == pytest.approx(rec.duration)

    def test_save_and_load_npz(self, tmp_path):
        rec = record_script(["UL"])
        path = rec.save_compact(tmp_path / "session.npz")

        player = MotionPlayer.load(path)
        assert player.event_count == rec.event_count
        events = list(player.play())
        assert events[0].kind == MotionEventKind.DETECTED
        assert events[1].kind == MotionEventKind.PRESSED
        assert events[1].position is None
        assert isinstance(events[2].position, np.ndarray)
        assert isinstance(events[2].axes, CameraAxes)

    def test_play_restores_kinds_and_positions(self, tmp_path):
        original = script_for_patterns(["R"])
        rec = record_script(["R"])
        path = tmp_path / "r.json"
        rec.save(path)

        replayed = list(MotionPlayer.load(path).play())
        assert [e.kind for e in replayed] == [e.kind for e in original]
        np.testing.assert_allclose(replayed[3].position, original[3].position)

    def test_replay_drives_session(self, tmp_path):
        rec = record_script(["RU", "D", "DR", "UL", "DR", "U", "DR", "R", "DR"])
        path = tmp_path / "address.json"
        rec.save(path)

        source = MotionSource()
        session = InputSession(source, feedback=RecordingFeedback())
        completed = []
        session.on_complete(completed.append)
        with session:
            MotionPlayer.load(path).feed(source)
        assert completed == ["70.1.2.8"]

    def test_get_event(self, tmp_path):
        rec = record_script(["R"])
        path = tmp_path / "r.json"
        rec.save(path)
        player = MotionPlayer.load(path)

        assert player.get_event(0) is not None
        assert player.get_event(7).kind == MotionEventKind.RELEASED
        assert player.get_event(8) is None
