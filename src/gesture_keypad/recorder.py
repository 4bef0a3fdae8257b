"""Motion recording and replay — capture motion-source events to disk.

Record real gesture sessions for:
- Reproducible testing without a hand tracker
- CI pipelines on headless machines
- Demo recordings that play back deterministically
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import numpy as np

from gesture_keypad.detector import CameraAxes
from gesture_keypad.motion import MotionEvent, MotionEventKind, MotionSource


@dataclass
class RecordedEvent:
    """A single motion event in a recording."""
    timestamp: float  # seconds from recording start
    kind: str
    position: Optional[list[float]]
    axes: Optional[list[list[float]]]  # [right, up]

    def to_motion_event(self) -> MotionEvent:
        axes = None
        if self.axes is not None:
            axes = CameraAxes(right=np.array(self.axes[0]), up=np.array(self.axes[1]))
        position = np.array(self.position, dtype=np.float64) if self.position is not None else None
        return MotionEvent(
            kind=MotionEventKind(self.kind),
            position=position,
            axes=axes,
            timestamp=self.timestamp,
        )


class MotionRecorder:
    """Records motion-source events to a file.

    Subscribe it to a MotionSource like any other listener, or call
    add_event() directly.

    Usage:
        recorder = MotionRecorder()
        recorder.start()
        source.subscribe(recorder)
        # ... gestures ...
        recorder.save("session.json")
    """

    def __init__(self):
        self._events: list[RecordedEvent] = []
        self._start_time: Optional[float] = None
        self._recording = False

    def start(self):
        """Begin a new recording session."""
        self._events = []
        self._start_time = time.monotonic()
        self._recording = True

    def stop(self) -> int:
        """Stop recording. Returns number of events captured."""
        self._recording = False
        return len(self._events)

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def duration(self) -> float:
        """Duration of recording in seconds."""
        if not self._events:
            return 0.0
        return self._events[-1].timestamp

    def add_event(self, event: MotionEvent, timestamp: Optional[float] = None):
        """Add an event to the recording.

        Args:
            event: The motion event to store.
            timestamp: Seconds from recording start. Defaults to wall-clock
                time since start().
        """
        if not self._recording:
            return

        if timestamp is None:
            timestamp = time.monotonic() - self._start_time

        position = None
        if event.position is not None:
            position = np.asarray(event.position, dtype=np.float64).tolist()
        axes = None
        if event.axes is not None:
            axes = [event.axes.right.tolist(), event.axes.up.tolist()]

        self._events.append(RecordedEvent(
            timestamp=timestamp,
            kind=event.kind.value,
            position=position,
            axes=axes,
        ))

    # MotionListener interface

    def on_source_detected(self, position):
        self.add_event(MotionEvent(MotionEventKind.DETECTED, position=position))

    def on_source_pressed(self):
        self.add_event(MotionEvent(MotionEventKind.PRESSED))

    def on_source_updated(self, position, axes: Optional[CameraAxes] = None):
        self.add_event(MotionEvent(MotionEventKind.UPDATED, position=position, axes=axes))

    def on_source_released(self):
        self.add_event(MotionEvent(MotionEventKind.RELEASED))

    def on_source_lost(self):
        self.add_event(MotionEvent(MotionEventKind.LOST))

    def save(self, path: str | Path):
        """Save recording to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": 1,
            "event_count": len(self._events),
            "duration": self.duration,
            "events": [
                {
                    "timestamp": e.timestamp,
                    "kind": e.kind,
                    "position": e.position,
                    "axes": e.axes,
                }
                for e in self._events
            ],
        }

        with open(path, "w") as f:
            json.dump(data, f)

    def save_compact(self, path: str | Path) -> Path:
        """Save in compact binary format (numpy npz) for smaller files.

        Missing positions/axes are stored as NaN rows.
        """
        path = Path(path).with_suffix(".npz")
        path.parent.mkdir(parents=True, exist_ok=True)

        n = len(self._events)
        timestamps = np.array([e.timestamp for e in self._events], dtype=np.float64)
        kinds = np.array([e.kind for e in self._events], dtype="<U8")
        positions = np.full((n, 3), np.nan, dtype=np.float64)
        axes = np.full((n, 2, 3), np.nan, dtype=np.float64)
        for i, e in enumerate(self._events):
            if e.position is not None:
                positions[i] = e.position
            if e.axes is not None:
                axes[i] = e.axes

        np.savez_compressed(
            path,
            timestamps=timestamps,
            kinds=kinds,
            positions=positions,
            axes=axes,
        )
        return path


class MotionPlayer:
    """Replays a recorded motion session.

    Usage:
        player = MotionPlayer.load("session.json")
        player.feed(source)

        # Or replay at original speed:
        for event in player.play_realtime():
            source.emit(event)
    """

    def __init__(self, events: list[RecordedEvent]):
        self._events = events

    @classmethod
    def load(cls, path: str | Path) -> MotionPlayer:
        """Load recording from a JSON or npz file."""
        path = Path(path)

        if path.suffix == ".npz":
            return cls._load_compact(path)

        with open(path) as f:
            data = json.load(f)

        events = [
            RecordedEvent(
                timestamp=e["timestamp"],
                kind=e["kind"],
                position=e.get("position"),
                axes=e.get("axes"),
            )
            for e in data["events"]
        ]
        return cls(events)

    @classmethod
    def _load_compact(cls, path: Path) -> MotionPlayer:
        """Load from compact npz format."""
        data = np.load(path, allow_pickle=False)
        timestamps = data["timestamps"]
        kinds = data["kinds"]
        positions = data["positions"]
        axes = data["axes"]

        events = []
        for i in range(len(timestamps)):
            pos = positions[i]
            ax = axes[i]
            events.append(RecordedEvent(
                timestamp=float(timestamps[i]),
                kind=str(kinds[i]),
                position=None if np.isnan(pos).any() else pos.tolist(),
                axes=None if np.isnan(ax).any() else ax.tolist(),
            ))
        return cls(events)

    @property
    def event_count(self) -> int:
        return len(self._events)

    @property
    def duration(self) -> float:
        if not self._events:
            return 0.0
        return self._events[-1].timestamp

    def play(self) -> Iterator[MotionEvent]:
        """Iterate through all events instantly (no timing)."""
        for event in self._events:
            yield event.to_motion_event()

    def play_realtime(self, speed: float = 1.0) -> Iterator[MotionEvent]:
        """Replay at original timing (or scaled by speed factor).

        Args:
            speed: Playback speed multiplier (2.0 = double speed).
        """
        if not self._events:
            return

        start = time.monotonic()

        for event in self.play():
            target_time = event.timestamp / speed
            elapsed = time.monotonic() - start
            if target_time > elapsed:
                time.sleep(target_time - elapsed)
            yield event

    def feed(self, source: MotionSource, realtime: bool = False, speed: float = 1.0) -> int:
        """Emit every recorded event into `source`. Returns the event count."""
        events = self.play_realtime(speed=speed) if realtime else self.play()
        return source.emit_all(events)

    def get_event(self, index: int) -> Optional[MotionEvent]:
        """Get a specific event by index."""
        if 0 <= index < len(self._events):
            return self._events[index].to_motion_event()
        return None
