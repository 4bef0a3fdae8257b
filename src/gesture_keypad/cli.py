"""gesture-keypad CLI.

Usage:
    gesture-keypad patterns              — Show the gesture → symbol table
    gesture-keypad type 10.0.0.1         — Type an address with synthesized gestures
    gesture-keypad type U U DR ...       — Type explicit gesture patterns
    gesture-keypad record out.json ...   — Save synthesized gestures as a recording
    gesture-keypad replay out.json       — Replay a recording through the keypad
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

try:
    import typer
except ImportError:
    raise ImportError("typer is required for CLI. Install with: pip install typer")

from gesture_keypad.config import KeypadConfig, load_config

logger = logging.getLogger("gesture_keypad.cli")

app = typer.Typer(
    name="gesture-keypad",
    help="Type IPv4 addresses with mid-air U/D/L/R hand gestures.",
    add_completion=False,
)


@app.callback()
def main_options(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    log_level: Optional[str] = typer.Option(None, help="Log level (overrides config)"),
):
    """Load configuration and set up logging for all commands."""
    cfg = KeypadConfig()
    if config:
        path = Path(config)
        if not path.exists():
            typer.echo(f"❌ Config not found: {config}", err=True)
            raise typer.Exit(1)
        try:
            cfg = load_config(path)
        except ValueError as e:
            typer.echo(f"❌ Invalid config: {e}", err=True)
            raise typer.Exit(1)

    level = (log_level or cfg.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    ctx.obj = cfg


def _resolve_patterns(targets: list[str], cfg: KeypadConfig) -> list[str]:
    from gesture_keypad.ip_entry import patterns_for_address

    if len(targets) == 1 and "." in targets[0]:
        try:
            return patterns_for_address(targets[0], cfg.pattern_map())
        except ValueError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(1)
    return [t.upper() for t in targets]


def _run_session(cfg: KeypadConfig, events, quiet: bool = False):
    from gesture_keypad.feedback import ConsoleFeedback, RecordingFeedback
    from gesture_keypad.motion import MotionSource
    from gesture_keypad.session import InputSession

    source = MotionSource()
    feedback = RecordingFeedback() if quiet else ConsoleFeedback(
        sounds_dir=cfg.sounds_dir, cue_sounds=cfg.cue_sounds,
    )
    session = InputSession(source, feedback=feedback, config=cfg)
    session.on_gesture(lambda evt: logger.debug(
        "%s %s %s", evt.type.value, evt.direction.name, evt.pattern))

    with session:
        source.emit_all(events)

    return session.stats


def _report(stats) -> None:
    typer.echo(f"\n📊 {stats.gestures} gestures, {stats.rejected} rejected")
    if stats.completions:
        for address in stats.addresses:
            typer.echo(f"✅ Address complete: {address}")
    else:
        typer.echo("⚠️  Address not completed", err=True)
        raise typer.Exit(1)


@app.command()
def patterns(ctx: typer.Context):
    """Print the gesture pattern → symbol table."""
    cfg: KeypadConfig = ctx.obj
    pattern_map = cfg.pattern_map()
    typer.echo("🖐  Gesture patterns\n")
    for pattern, label in pattern_map.to_dict().items():
        typer.echo(f"   {pattern:3s} → {label}")


@app.command("type")
def type_address(
    ctx: typer.Context,
    targets: list[str] = typer.Argument(..., help="IPv4 address, or gesture patterns like 'U UL DR'"),
    distance: float = typer.Option(0.1, help="Hand travel per stroke"),
    steps: int = typer.Option(5, help="Update ticks per stroke"),
    quiet: bool = typer.Option(False, help="Only print the result"),
):
    """Type an address through synthesized hand motion."""
    from gesture_keypad.motion import script_for_patterns

    cfg: KeypadConfig = ctx.obj
    pattern_list = _resolve_patterns(targets, cfg)
    typer.echo(f"⌨️  Gestures: {' '.join(pattern_list)}")

    try:
        events = script_for_patterns(pattern_list, distance=distance, steps=steps)
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    _report(_run_session(cfg, events, quiet=quiet))


@app.command()
def record(
    ctx: typer.Context,
    output: str = typer.Argument(..., help="Output recording path"),
    targets: list[str] = typer.Argument(..., help="IPv4 address, or gesture patterns"),
    distance: float = typer.Option(0.1, help="Hand travel per stroke"),
    steps: int = typer.Option(5, help="Update ticks per stroke"),
    compact: bool = typer.Option(False, help="Save in compact .npz format"),
):
    """Synthesize gestures and save them as a motion recording."""
    from gesture_keypad.motion import script_for_patterns
    from gesture_keypad.recorder import MotionRecorder

    cfg: KeypadConfig = ctx.obj
    pattern_list = _resolve_patterns(targets, cfg)
    try:
        events = script_for_patterns(pattern_list, distance=distance, steps=steps)
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    recorder = MotionRecorder()
    recorder.start()
    for event in events:
        recorder.add_event(event, timestamp=event.timestamp)
    recorder.stop()

    if compact:
        path = recorder.save_compact(output)
    else:
        path = Path(output)
        recorder.save(path)

    typer.echo(f"📼 Recorded {recorder.event_count} events ({recorder.duration:.1f}s)")
    typer.echo(f"💾 Saved to: {path}")


@app.command()
def replay(
    ctx: typer.Context,
    recording: str = typer.Argument(..., help="Path to recording file"),
    speed: float = typer.Option(1.0, help="Playback speed multiplier"),
    realtime: bool = typer.Option(False, help="Play at original timing"),
    quiet: bool = typer.Option(False, help="Only print the result"),
):
    """Replay a recorded motion session through the keypad."""
    from gesture_keypad.recorder import MotionPlayer

    cfg: KeypadConfig = ctx.obj
    path = Path(recording)
    if not path.exists():
        typer.echo(f"❌ Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    player = MotionPlayer.load(path)
    typer.echo(f"▶️  Replaying {path.name} ({player.event_count} events, {player.duration:.1f}s)")

    events = player.play_realtime(speed=speed) if realtime else player.play()
    _report(_run_session(cfg, events, quiet=quiet))


def main():
    app()


if __name__ == "__main__":
    main()
