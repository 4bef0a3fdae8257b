"""Keypad configuration: dataclass defaults, optionally loaded from YAML.

Example config.yml:

    threshold: 0.04
    prompt: "Server IP: "
    reset_on_complete: true
    sounds_dir: ./sounds
    cue_sounds:
      up: chime_high.wav
    patterns:
      UL: "1"
      DL: delete
      DR: separator
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from gesture_keypad.ip_entry import DEFAULT_PROMPT
from gesture_keypad.patterns import GesturePatternMap

logger = logging.getLogger("gesture_keypad.config")


@dataclass
class KeypadConfig:
    threshold: float = 0.05
    prompt: str = DEFAULT_PROMPT
    reset_on_complete: bool = True
    sounds_dir: Optional[str] = None
    cue_sounds: dict[str, str] = field(default_factory=dict)
    patterns: Optional[dict[str, str]] = None  # None = default keypad layout
    log_level: str = "info"

    def __post_init__(self):
        if not isinstance(self.threshold, (int, float)) or not math.isfinite(self.threshold) \
                or self.threshold <= 0:
            raise ValueError(f"threshold must be a positive number, got {self.threshold!r}")
        if not isinstance(self.prompt, str):
            raise ValueError(f"prompt must be a string, got {self.prompt!r}")
        if self.patterns is not None and not isinstance(self.patterns, dict):
            raise ValueError(f"patterns must be a mapping of pattern to symbol, got {self.patterns!r}")
        if not isinstance(self.cue_sounds, dict):
            raise ValueError(f"cue_sounds must be a mapping of cue to file, got {self.cue_sounds!r}")

    def pattern_map(self) -> GesturePatternMap:
        if self.patterns is None:
            return GesturePatternMap.with_defaults()
        return GesturePatternMap.from_dict(self.patterns)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> KeypadConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})


def load_config(path: str | Path) -> KeypadConfig:
    """Load configuration from a YAML file. An empty file yields the defaults."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    config = KeypadConfig.from_dict(data)
    # Fail early on a bad pattern table rather than on the first gesture
    config.pattern_map()
    return config


def save_config(config: KeypadConfig, path: str | Path):
    """Save configuration to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
