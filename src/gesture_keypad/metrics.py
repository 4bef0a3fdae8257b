"""Prometheus-compatible metrics for the gesture keypad.

Generates the Prometheus text exposition format directly.

Tracked metrics:
- gesture_keypad_gestures_total (counter, by pattern)
- gesture_keypad_symbols_total (counter, by symbol and result)
- gesture_keypad_completions_total (counter)
- gesture_keypad_sessions_total (counter)
"""

from __future__ import annotations

import threading
import time
from collections import Counter


class MetricsCollector:
    """Collects and exposes Prometheus metrics for keypad input."""

    def __init__(self):
        self._gesture_counts: Counter = Counter()
        self._symbol_counts: Counter = Counter()  # (label, result) → count
        self._completions = 0
        self._sessions = 0
        self._lock = threading.Lock()
        self._start_time = time.time()

    def record_gesture(self, pattern: str):
        with self._lock:
            self._gesture_counts[pattern] += 1

    def record_symbol(self, label: str, accepted: bool):
        with self._lock:
            self._symbol_counts[(label, "accepted" if accepted else "rejected")] += 1

    def record_completion(self):
        with self._lock:
            self._completions += 1

    def record_session(self):
        with self._lock:
            self._sessions += 1

    def render(self) -> str:
        """Render all metrics in Prometheus text exposition format."""
        lines: list[str] = []

        uptime = time.time() - self._start_time
        lines.append("# HELP gesture_keypad_uptime_seconds Time since collector creation")
        lines.append("# TYPE gesture_keypad_uptime_seconds gauge")
        lines.append(f"gesture_keypad_uptime_seconds {uptime:.1f}")
        lines.append("")

        with self._lock:
            lines.append("# HELP gesture_keypad_gestures_total Finished gestures by pattern")
            lines.append("# TYPE gesture_keypad_gestures_total counter")
            for pattern, count in sorted(self._gesture_counts.items()):
                lines.append(f'gesture_keypad_gestures_total{{pattern="{pattern}"}} {count}')
            lines.append("")

            lines.append("# HELP gesture_keypad_symbols_total Decoded symbols by result")
            lines.append("# TYPE gesture_keypad_symbols_total counter")
            for (label, result), count in sorted(self._symbol_counts.items()):
                lines.append(
                    f'gesture_keypad_symbols_total{{symbol="{label}",result="{result}"}} {count}'
                )
            lines.append("")

            lines.append("# HELP gesture_keypad_completions_total Completed addresses")
            lines.append("# TYPE gesture_keypad_completions_total counter")
            lines.append(f"gesture_keypad_completions_total {self._completions}")
            lines.append("")

            lines.append("# HELP gesture_keypad_sessions_total Input sessions started")
            lines.append("# TYPE gesture_keypad_sessions_total counter")
            lines.append(f"gesture_keypad_sessions_total {self._sessions}")
            lines.append("")

        return "\n".join(lines) + "\n"

    @property
    def gesture_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._gesture_counts)

    @property
    def rejected_count(self) -> int:
        with self._lock:
            return sum(c for (_, result), c in self._symbol_counts.items() if result == "rejected")

    @property
    def completions(self) -> int:
        with self._lock:
            return self._completions
