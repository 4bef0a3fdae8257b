"""Input session: wires motion source → detector → IP entry → feedback.

The session owns every subscription between the components. start()
connects them, stop() disconnects them, so several independent sessions
(or test doubles) can coexist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from gesture_keypad.config import KeypadConfig
from gesture_keypad.detector import GestureDetector, GestureEvent, GestureEventType
from gesture_keypad.feedback import FeedbackSink, LoggingFeedback
from gesture_keypad.ip_entry import IpEntryStateMachine
from gesture_keypad.metrics import MetricsCollector
from gesture_keypad.motion import MotionSource

logger = logging.getLogger("gesture_keypad.session")


@dataclass
class SessionStats:
    """Counters for one input session."""
    gestures: int = 0
    rejected: int = 0
    completions: int = 0
    addresses: list[str] = field(default_factory=list)


class InputSession:
    """End-to-end gesture keypad for one motion source.

    Usage:
        session = InputSession(source, feedback=my_sink)
        session.on_complete(lambda addr: connect(addr))
        with session:
            ...  # source delivers motion events
    """

    def __init__(
        self,
        source: MotionSource,
        detector: Optional[GestureDetector] = None,
        machine: Optional[IpEntryStateMachine] = None,
        feedback: Optional[FeedbackSink] = None,
        config: Optional[KeypadConfig] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.config = config or KeypadConfig()
        self.source = source
        self.detector = detector or GestureDetector(threshold=self.config.threshold)
        self.feedback = feedback or LoggingFeedback()
        self.machine = machine or IpEntryStateMachine(
            self.feedback,
            pattern_map=self.config.pattern_map(),
            prompt=self.config.prompt,
        )
        self.metrics = metrics
        self.reset_on_complete = self.config.reset_on_complete

        self._gesture_callbacks: list[Callable[[GestureEvent], None]] = []
        self._complete_callbacks: list[Callable[[str], None]] = []
        self._running = False
        self._reset_pending = False
        self._stats = SessionStats()

        self.machine.on_complete(self._on_machine_complete)

    def on_gesture(self, callback: Callable[[GestureEvent], None]):
        """Register a callback for raw gesture events."""
        self._gesture_callbacks.append(callback)

    def on_complete(self, callback: Callable[[str], None]):
        """Register a callback for finished addresses."""
        self._complete_callbacks.append(callback)

    def start(self):
        """Begin listening to the motion source."""
        if self._running:
            return
        self.detector.subscribe(self._on_gesture)
        self.source.subscribe(self.detector)
        self._running = True
        if self.metrics:
            self.metrics.record_session()
        logger.info("Input session started (threshold=%.3f)", self.detector.threshold)

    def stop(self):
        """Stop listening. Any gesture in progress is discarded."""
        if not self._running:
            return
        self.source.unsubscribe(self.detector)
        self.detector.unsubscribe(self._on_gesture)
        self.detector.reset()
        self._running = False
        logger.info("Input session stopped")

    @property
    def running(self) -> bool:
        return self._running

    def _on_gesture(self, event: GestureEvent):
        for cb in self._gesture_callbacks:
            try:
                cb(event)
            except Exception as e:
                logger.error("Gesture callback error: %s", e)

        if event.type is GestureEventType.DETECTED:
            self._stats.gestures += 1
            symbol = self.machine.pattern_map.lookup(event.pattern)
            accepted = self.machine.apply(symbol)
            if not accepted:
                self._stats.rejected += 1
            if self.metrics:
                self.metrics.record_gesture(event.pattern)
                self.metrics.record_symbol(symbol.label, accepted)
        else:
            self.machine.handle(event)

        if self._reset_pending:
            self._reset_pending = False
            self.machine.reset()

    def _on_machine_complete(self, address: str):
        self._stats.completions += 1
        self._stats.addresses.append(address)
        if self.metrics:
            self.metrics.record_completion()

        for cb in self._complete_callbacks:
            try:
                cb(address)
            except Exception as e:
                logger.error("Completion callback error: %s", e)

        if self.reset_on_complete:
            self._reset_pending = True

    @property
    def last_address(self) -> Optional[str]:
        return self._stats.addresses[-1] if self._stats.addresses else None

    @property
    def stats(self) -> SessionStats:
        return SessionStats(
            gestures=self._stats.gestures,
            rejected=self._stats.rejected,
            completions=self._stats.completions,
            addresses=list(self._stats.addresses),
        )

    def reset(self):
        """Abandon the current attempt and clear the address."""
        self.detector.reset()
        self.machine.reset()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()
