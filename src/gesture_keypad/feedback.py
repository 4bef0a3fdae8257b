"""Feedback sink interface: prompt text and audio cues.

The keypad never draws or plays sound itself. It hands rendered strings
and logical cue identifiers to a FeedbackSink, which resolves them to
whatever display or audio device the host application has.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

import typer

from gesture_keypad.detector import Direction

logger = logging.getLogger("gesture_keypad.feedback")


class Cue(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


_DIRECTION_CUES: dict[Direction, Cue] = {
    Direction.UP: Cue.UP,
    Direction.DOWN: Cue.DOWN,
    Direction.LEFT: Cue.LEFT,
    Direction.RIGHT: Cue.RIGHT,
}

# Played back-to-back when an address is complete
COMPLETION_CUES: tuple[Cue, ...] = (Cue.UP, Cue.RIGHT, Cue.LEFT, Cue.DOWN)

CUE_SOUNDS: dict[str, str] = {
    "up": "up.wav",
    "down": "down.wav",
    "left": "left.wav",
    "right": "right.wav",
}


def cue_for_direction(direction: Direction) -> Optional[Cue]:
    return _DIRECTION_CUES.get(direction)


def sound_for_cue(
    cue: Cue,
    sounds_dir: Optional[str | Path] = None,
    overrides: Optional[dict[str, str]] = None,
) -> Optional[Path]:
    """Resolve a cue to a sound file path, or None if no file is configured.

    `overrides` maps cue names to file names (or absolute paths) and takes
    precedence over CUE_SOUNDS. Relative names resolve against `sounds_dir`.
    """
    name = (overrides or {}).get(cue.value) or CUE_SOUNDS.get(cue.value)
    if not name:
        return None
    path = Path(name)
    if not path.is_absolute() and sounds_dir is not None:
        path = Path(sounds_dir) / path
    return path


class FeedbackSink(Protocol):
    def render(self, text: str) -> None: ...

    def play(self, cue: Cue) -> None: ...


class LoggingFeedback:
    """Sink that writes everything to the log. Useful as a headless default."""

    def render(self, text: str):
        logger.info("Render: %r", text)

    def play(self, cue: Cue):
        logger.debug("Cue: %s", cue.value)


class RecordingFeedback:
    """Sink that keeps every render and cue in order."""

    def __init__(self):
        self.renders: list[str] = []
        self.cues: list[Cue] = []

    def render(self, text: str):
        self.renders.append(text)

    def play(self, cue: Cue):
        self.cues.append(cue)

    @property
    def last_render(self) -> Optional[str]:
        return self.renders[-1] if self.renders else None

    def clear(self):
        self.renders.clear()
        self.cues.clear()


class ConsoleFeedback:
    """Sink that echoes to the terminal via typer."""

    def __init__(self, show_cues: bool = True, sounds_dir: Optional[str] = None,
                 cue_sounds: Optional[dict[str, str]] = None):
        self.show_cues = show_cues
        self.sounds_dir = sounds_dir
        self.cue_sounds = cue_sounds

    def render(self, text: str):
        typer.echo("   " + text.replace("\r", "").replace("\n", " "))

    def play(self, cue: Cue):
        if not self.show_cues:
            return

        sound = sound_for_cue(cue, self.sounds_dir, self.cue_sounds)
        suffix = f" ({sound})" if sound else ""
        typer.echo(f"   ♪ {cue.value}{suffix}")
