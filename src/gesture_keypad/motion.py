"""Motion source interface and a scripted in-process source.

A motion source reports one tracked hand through five lifecycle calls:
detected, pressed, updated (once per tick, with the hand position and the
camera axes for that tick), released and lost. Real sensors live outside
this package; MotionSource is the in-process stand-in used for replay,
tests and demos.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Protocol

import numpy as np

from gesture_keypad.detector import CameraAxes

logger = logging.getLogger("gesture_keypad.motion")


class MotionListener(Protocol):
    def on_source_detected(self, position) -> None: ...

    def on_source_pressed(self) -> None: ...

    def on_source_updated(self, position, axes: Optional[CameraAxes] = None) -> None: ...

    def on_source_released(self) -> None: ...

    def on_source_lost(self) -> None: ...


class MotionEventKind(Enum):
    DETECTED = "detected"
    PRESSED = "pressed"
    UPDATED = "updated"
    RELEASED = "released"
    LOST = "lost"


@dataclass
class MotionEvent:
    """One lifecycle event from the motion source."""
    kind: MotionEventKind
    position: Optional[np.ndarray] = None
    axes: Optional[CameraAxes] = None
    timestamp: float = field(default_factory=time.monotonic)


class MotionSource:
    """Delivers motion events to subscribed listeners, one at a time, in order."""

    def __init__(self):
        self._listeners: list[MotionListener] = []

    def subscribe(self, listener: MotionListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: MotionListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: MotionEvent):
        for listener in list(self._listeners):
            if event.kind is MotionEventKind.DETECTED:
                listener.on_source_detected(event.position)
            elif event.kind is MotionEventKind.PRESSED:
                listener.on_source_pressed()
            elif event.kind is MotionEventKind.UPDATED:
                listener.on_source_updated(event.position, event.axes)
            elif event.kind is MotionEventKind.RELEASED:
                listener.on_source_released()
            elif event.kind is MotionEventKind.LOST:
                listener.on_source_lost()

    def emit_all(self, events: Iterable[MotionEvent]) -> int:
        """Emit a sequence of events. Returns how many were delivered."""
        count = 0
        for event in events:
            self.emit(event)
            count += 1
        return count


_STEP_VECTORS = {
    "U": (0.0, 1.0),
    "D": (0.0, -1.0),
    "R": (1.0, 0.0),
    "L": (-1.0, 0.0),
}


def script_for_pattern(
    pattern: str,
    distance: float = 0.1,
    steps: int = 5,
    start=(0.0, 0.0, 0.5),
    axes: Optional[CameraAxes] = None,
    t0: float = 0.0,
    dt: float = 1 / 30,
) -> list[MotionEvent]:
    """Synthesize the motion events of one gesture.

    Produces detected → pressed → `steps` updates per stroke → released.
    Each stroke travels `distance` along the camera axis for its letter.
    """
    axes = axes or CameraAxes.identity()
    if steps < 1:
        raise ValueError("steps must be >= 1")

    pos = np.asarray(start, dtype=np.float64).copy()
    t = t0
    events = [
        MotionEvent(MotionEventKind.DETECTED, position=pos.copy(), axes=axes, timestamp=t),
        MotionEvent(MotionEventKind.PRESSED, axes=axes, timestamp=t),
    ]

    for letter in pattern.upper():
        if letter not in _STEP_VECTORS:
            raise ValueError(f"unknown direction letter {letter!r} in pattern {pattern!r}")
        sx, sy = _STEP_VECTORS[letter]
        step = (sx * axes.right + sy * axes.up) * (distance / steps)
        for _ in range(steps):
            t += dt
            pos = pos + step
            events.append(MotionEvent(MotionEventKind.UPDATED, position=pos.copy(), axes=axes, timestamp=t))

    events.append(MotionEvent(MotionEventKind.RELEASED, axes=axes, timestamp=t + dt))
    return events


def script_for_patterns(patterns: Iterable[str], **kwargs) -> list[MotionEvent]:
    """Chain several gestures; timestamps keep increasing across them."""
    events: list[MotionEvent] = []
    t0 = kwargs.pop("t0", 0.0)
    for pattern in patterns:
        chunk = script_for_pattern(pattern, t0=t0, **kwargs)
        events.extend(chunk)
        t0 = chunk[-1].timestamp + 0.25
    return events
