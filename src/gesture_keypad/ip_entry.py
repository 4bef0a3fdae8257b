"""IPv4 address entry driven by gesture events.

The state machine keeps the address typed so far and validates every
decoded symbol before applying it. While a gesture is in progress
(DETECTING) it previews the pending symbol as "<buffer>[<glyph>]"; when
the gesture finishes (DETECTED) it commits the symbol.

Editing rules:
- A block that reaches three digits is closed automatically with ".".
- Delete right after a "." removes the separator and the digit before it.
- Each block must stay within 0-255 as a plain base-10 integer.
- The address completes when a fourth block is closed, either by its
  third digit or by an explicit separator.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from gesture_keypad.detector import GestureEvent, GestureEventType
from gesture_keypad.feedback import COMPLETION_CUES, FeedbackSink, cue_for_direction
from gesture_keypad.patterns import SEPARATOR, GesturePatternMap, Symbol, SymbolKind

logger = logging.getLogger("gesture_keypad.ip_entry")

DEFAULT_PROMPT = "SharingServer IP:\n"

MAX_BLOCKS = 4
BLOCK_DIGITS = 3
BLOCK_MAX_VALUE = 255


def _editing_block(buffer: str) -> str:
    return buffer.split(".")[-1]


def is_valid_input(buffer: str, symbol: Symbol) -> bool:
    """Whether `symbol` may be applied to `buffer`."""
    if not symbol.is_valid:
        return False

    block = _editing_block(buffer)

    if symbol.kind is SymbolKind.DELETE:
        return len(buffer) > 0

    if symbol.kind is SymbolKind.SEPARATOR:
        return len(block) > 0

    value = int(block + str(symbol.digit))
    return 0 <= value <= BLOCK_MAX_VALUE


class IpEntryStateMachine:
    """Validating IPv4 text editor fed by gesture events.

    Completion subscribers receive the finished address string. After
    completion the machine ignores input until reset().
    """

    def __init__(
        self,
        feedback: FeedbackSink,
        pattern_map: Optional[GesturePatternMap] = None,
        prompt: str = DEFAULT_PROMPT,
    ):
        self.feedback = feedback
        self.pattern_map = pattern_map or GesturePatternMap.with_defaults()
        self.prompt = prompt

        self._buffer = ""
        self._completed = False
        self._address: Optional[str] = None
        self._complete_callbacks: list[Callable[[str], None]] = []

    def on_complete(self, callback: Callable[[str], None]):
        """Register a callback for finished addresses."""
        self._complete_callbacks.append(callback)

    def handle(self, event: GestureEvent):
        """Gesture event entry point (subscribe this to a GestureDetector)."""
        symbol = self.pattern_map.lookup(event.pattern)

        if event.type is GestureEventType.DETECTING:
            self._preview(symbol, event)
        elif event.type is GestureEventType.DETECTED:
            self.apply(symbol)

    __call__ = handle

    def _preview(self, symbol: Symbol, event: GestureEvent):
        if self._completed or not is_valid_input(self._buffer, symbol):
            self._render()
            return

        self._render(f"[{symbol.glyph}]")
        cue = cue_for_direction(event.direction)
        if cue is not None:
            self.feedback.play(cue)

    def apply(self, symbol: Symbol) -> bool:
        """Validate and commit one symbol. Returns True if it was accepted."""
        if self._completed:
            logger.debug("Input already complete, ignoring %s", symbol.label)
            self._render()
            return False

        if not is_valid_input(self._buffer, symbol):
            logger.debug("Rejected %s for %r", symbol.label, self._buffer)
            self._render()
            return False

        if symbol.kind is SymbolKind.DELETE:
            self._delete()
        elif symbol.kind is SymbolKind.SEPARATOR:
            if len(self.blocks) == MAX_BLOCKS:
                self._complete()
            else:
                self._buffer += "."
        else:
            self._buffer += str(symbol.digit)
            blocks = self.blocks
            if len(blocks[-1]) == BLOCK_DIGITS:
                if len(blocks) < MAX_BLOCKS:
                    self._buffer += "."
                else:
                    self._complete()

        self._render()
        return True

    def _delete(self):
        # A trailing "." always follows a digit, so drop both together
        if self._buffer.endswith(".") and len(self._buffer) > 1:
            self._buffer = self._buffer[:-2]
        elif self._buffer:
            self._buffer = self._buffer[:-1]

    def _complete(self):
        self._completed = True
        self._address = self._buffer
        logger.info("Address entry complete: %s", self._address)

        for cb in list(self._complete_callbacks):
            cb(self._address)

        for cue in COMPLETION_CUES:
            self.feedback.play(cue)

    def _render(self, pending: str = ""):
        self.feedback.render(self.prompt + self._buffer + pending)

    def reset(self):
        """Start a fresh address-entry attempt."""
        self._buffer = ""
        self._completed = False
        self._address = None
        self._render()

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def blocks(self) -> list[str]:
        return self._buffer.split(".")

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def address(self) -> Optional[str]:
        """The finished address, once completed."""
        return self._address


def patterns_for_address(address: str, pattern_map: Optional[GesturePatternMap] = None) -> list[str]:
    """Gesture patterns that type `address` from an empty buffer.

    Three-digit blocks close themselves, so an explicit separator gesture
    is only needed after shorter blocks (including the last one).
    """
    pattern_map = pattern_map or GesturePatternMap.with_defaults()
    blocks = address.strip().split(".")
    if len(blocks) != MAX_BLOCKS or not all(
        b.isdigit() and len(b) <= BLOCK_DIGITS and int(b) <= BLOCK_MAX_VALUE for b in blocks
    ):
        raise ValueError(f"not an IPv4 address: {address!r}")

    separator = pattern_map.pattern_for(SEPARATOR)
    if separator is None:
        raise ValueError("pattern map has no separator gesture")

    patterns = []
    for block in blocks:
        for ch in block:
            pattern = pattern_map.pattern_for(Symbol.digit_of(int(ch)))
            if pattern is None:
                raise ValueError(f"pattern map has no gesture for digit {ch}")
            patterns.append(pattern)
        if len(block) < BLOCK_DIGITS:
            patterns.append(separator)
    return patterns
