"""Directional gesture detection from a stream of 3D hand positions.

Hand positions are projected onto the camera's right/up axes and the
resulting 2D displacement is accumulated until it crosses a threshold.
Each crossing registers one direction (U/D/R/L) and appends its code to
the pattern of the current session. A session runs from a press to the
next release or loss of the hand.

Usage:
    detector = GestureDetector(threshold=0.05)
    detector.subscribe(lambda evt: print(evt.type, evt.pattern))

    detector.on_source_detected(pos)
    detector.on_source_pressed()
    detector.on_source_updated(pos, CameraAxes(right=r, up=u))
    detector.on_source_released()
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger("gesture_keypad.detector")


class Direction(Enum):
    NEUTRAL = "neutral"
    UP = "up"
    DOWN = "down"
    RIGHT = "right"
    LEFT = "left"

    @property
    def code(self) -> str:
        """One-letter pattern code ("" for NEUTRAL)."""
        return _DIRECTION_CODES.get(self, "")


_DIRECTION_CODES = {
    Direction.UP: "U",
    Direction.DOWN: "D",
    Direction.RIGHT: "R",
    Direction.LEFT: "L",
}


class GestureEventType(Enum):
    DETECTING = "detecting"
    DETECTED = "detected"


@dataclass
class GestureEvent:
    """Emitted on every direction change (DETECTING) and once on session end (DETECTED)."""
    type: GestureEventType
    direction: Direction
    pattern: str


@dataclass
class CameraAxes:
    """Orthonormal right/up axes of the viewer's head frame."""
    right: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0]))
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))

    def __post_init__(self):
        self.right = np.asarray(self.right, dtype=np.float64)
        self.up = np.asarray(self.up, dtype=np.float64)

    @classmethod
    def identity(cls) -> CameraAxes:
        return cls()

    def project(self, diff: np.ndarray) -> tuple[float, float]:
        """Project a 3D displacement onto (right, up)."""
        return float(np.dot(self.right, diff)), float(np.dot(self.up, diff))


def _resolve_position(position) -> Optional[np.ndarray]:
    if position is None:
        return None
    try:
        pos = np.asarray(position, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError):
        return None
    if pos.shape != (3,) or not np.all(np.isfinite(pos)):
        return None
    return pos


def _axes_usable(axes: CameraAxes) -> bool:
    return all(
        _resolve_position(axis) is not None and np.shape(axis) == (3,)
        for axis in (axes.right, axes.up)
    )


class GestureDetector:
    """Turns hand motion into U/D/L/R gesture patterns.

    Motion is tracked even before a press so that a gesture already under
    way when contact starts keeps part of its displacement. While a
    direction is being signaled, further motion in that same direction is
    ignored; only a reversal or a move along the other axis can register
    the next direction.
    """

    def __init__(self, threshold: float = 0.05, axes: Optional[CameraAxes] = None):
        try:
            value = float(threshold)
        except (TypeError, ValueError):
            raise ValueError(f"threshold must be a positive number, got {threshold!r}")
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"threshold must be a positive number, got {threshold!r}")

        self.threshold = value
        self.default_axes = axes or CameraAxes.identity()

        self._subscribers: list[Callable[[GestureEvent], None]] = []

        self.accumulated_dx = 0.0
        self.accumulated_dy = 0.0
        self.current_direction = Direction.NEUTRAL
        self.session_active = False
        self._pattern: list[str] = []
        self.last_position: Optional[np.ndarray] = None

    # -- subscriptions -------------------------------------------------

    def subscribe(self, callback: Callable[[GestureEvent], None]):
        """Register a callback for gesture events."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[GestureEvent], None]):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _emit(self, event: GestureEvent):
        for cb in list(self._subscribers):
            try:
                cb(event)
            except Exception as e:
                logger.error("Gesture subscriber %r failed: %s", cb, e)

    # -- motion source lifecycle ---------------------------------------

    def on_source_detected(self, position=None):
        """A hand came into view. Resets tracking without starting a session."""
        pos = _resolve_position(position)
        if pos is not None:
            self.last_position = pos
        else:
            logger.debug("Source detected without a resolvable position")

        self.session_active = False
        self.current_direction = Direction.NEUTRAL
        self.accumulated_dx = 0.0
        self.accumulated_dy = 0.0

    def on_source_pressed(self):
        """Start a session, keeping a clamped half of any pre-press drift."""
        if self.session_active:
            return

        self.session_active = True
        self._pattern.clear()

        t = self.threshold
        self.accumulated_dx = min(max(self.accumulated_dx, -t), t) / 2
        self.accumulated_dy = min(max(self.accumulated_dy, -t), t) / 2

    def on_source_updated(self, position, axes: Optional[CameraAxes] = None):
        """Feed a new hand position. Runs whether or not a session is active."""
        pos = _resolve_position(position)
        if pos is None:
            logger.warning("Hand position unavailable, skipping update")
            return

        axes = axes or self.default_axes
        if not _axes_usable(axes):
            logger.warning("Camera axes unusable, skipping update")
            return

        if self.last_position is None:
            self.last_position = pos
            return

        diff = pos - self.last_position
        self.last_position = pos

        dx, dy = axes.project(diff)
        self._accumulate(dx, dy)

        direction = self._classify()
        if direction is Direction.NEUTRAL or direction is self.current_direction:
            return

        logger.debug("Gesture detect %s", direction.name)
        self.current_direction = direction
        self.accumulated_dx = 0.0
        self.accumulated_dy = 0.0
        self._pattern.append(direction.code)

        if self.session_active:
            self._emit(GestureEvent(
                type=GestureEventType.DETECTING,
                direction=direction,
                pattern=self.pattern,
            ))

    def on_source_released(self):
        self._finalize()

    def on_source_lost(self):
        self._finalize()

    # -- internals -----------------------------------------------------

    def _accumulate(self, dx: float, dy: float):
        # Only the dominant axis moves, so diagonal noise can't build up on both
        current = self.current_direction
        if abs(dx) > abs(dy):
            if (current is Direction.RIGHT and dx > 0) or (current is Direction.LEFT and dx < 0):
                return
            self.accumulated_dx += dx
        else:
            if (current is Direction.UP and dy > 0) or (current is Direction.DOWN and dy < 0):
                return
            self.accumulated_dy += dy

    def _classify(self) -> Direction:
        t = self.threshold
        if self.accumulated_dx > t:
            return Direction.RIGHT
        if self.accumulated_dx < -t:
            return Direction.LEFT
        if self.accumulated_dy > t:
            return Direction.UP
        if self.accumulated_dy < -t:
            return Direction.DOWN
        return Direction.NEUTRAL

    def _finalize(self):
        if not self.session_active:
            return

        if self.current_direction is not Direction.NEUTRAL:
            self._emit(GestureEvent(
                type=GestureEventType.DETECTED,
                direction=self.current_direction,
                pattern=self.pattern,
            ))

        self.session_active = False
        self.current_direction = Direction.NEUTRAL
        self.accumulated_dx = 0.0
        self.accumulated_dy = 0.0

    @property
    def pattern(self) -> str:
        """Direction codes recorded since the current session started."""
        return "".join(self._pattern)

    def reset(self):
        """Return to the idle state without emitting anything."""
        self.session_active = False
        self.current_direction = Direction.NEUTRAL
        self.accumulated_dx = 0.0
        self.accumulated_dy = 0.0
        self._pattern.clear()
        self.last_position = None
