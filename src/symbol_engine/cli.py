"""SymbolEngine CLI.

Usage:
    symbol-engine templates    — List loaded gesture templates
    symbol-engine recognize    — Recognize a point list from a file
    symbol-engine replay       — Replay a pointer-event log through the engine
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
import yaml

from symbol_engine.config import EngineConfig, load_config
from symbol_engine.engine import SymbolEngine
from symbol_engine.errors import SymbolEngineError
from symbol_engine.events import load_events, replay as replay_events
from symbol_engine.recognizer import Recognizer
from symbol_engine.templates import TemplateStore, points_from_raw

app = typer.Typer(
    name="symbol-engine",
    help="✏️ Multi-stroke symbol recognition for pointer input.",
    add_completion=False,
)


@app.callback()
def main_options(
    log_level: str = typer.Option("warning", help="Log level"),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _load_store(templates: Optional[str]) -> tuple[TemplateStore, Optional[float]]:
    if templates is None:
        return TemplateStore.with_defaults(), None
    store = TemplateStore()
    try:
        threshold = store.load_from_file(templates)
    except SymbolEngineError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)
    return store, threshold


def _read_points(path: Path):
    with open(path) as f:
        if path.suffix.lower() in (".yml", ".yaml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if isinstance(data, dict):
        data = data.get("strokes", data.get("points"))
    return data


@app.command()
def templates(
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Template definition file (JSON/YAML)"),
):
    """List gesture templates and how many variants each has."""
    store, threshold = _load_store(file)
    counts = Counter(t.name for t in store)

    typer.echo(f"📚 {len(store)} templates ({len(counts)} symbols)")
    for name in store.names():
        typer.echo(f"   {name:<16} {counts[name]} variant(s)")
    if threshold is not None:
        typer.echo(f"   Recognition threshold: {threshold}")


@app.command()
def recognize(
    points_file: str = typer.Argument(..., help="JSON/YAML point list (flat or per-stroke)"),
    templates: Optional[str] = typer.Option(None, help="Template definition file"),
    threshold: Optional[float] = typer.Option(None, help="Minimum score to accept"),
):
    """Recognize a recorded point list against the templates."""
    path = Path(points_file)
    if not path.exists():
        typer.echo(f"❌ Points file not found: {points_file}", err=True)
        raise typer.Exit(1)

    store, file_threshold = _load_store(templates)
    if threshold is None:
        threshold = file_threshold if file_threshold is not None else EngineConfig().recognition_threshold

    try:
        points = points_from_raw(_read_points(path))
        result = Recognizer(store).recognize(points)
    except (SymbolEngineError, ValueError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    if result.matched(threshold):
        typer.echo(f"✅ {result.name} (score={result.score:.3f})")
    else:
        typer.echo(f"❓ No match: best {result.name} (score={result.score:.3f} < {threshold})")
        raise typer.Exit(1)


@app.command()
def replay(
    events_file: str = typer.Argument(..., help="JSON/YAML pointer-event log"),
    config: Optional[str] = typer.Option(None, help="Engine config YAML"),
):
    """Replay a pointer-event log and print taps and recognition attempts."""
    path = Path(events_file)
    if not path.exists():
        typer.echo(f"❌ Event log not found: {events_file}", err=True)
        raise typer.Exit(1)

    try:
        engine_config = load_config(config) if config else EngineConfig()
        events = load_events(path)
    except (SymbolEngineError, ValueError) as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)

    recognized = []

    def on_tap(x: float, y: float):
        typer.echo(f"👆 Tap at ({x:.1f}, {y:.1f})")

    def on_attempt(name: Optional[str], score: float):
        typer.echo(f"🔍 Attempt: {name} (score={score:.3f})")

    def on_symbol(name: str, score: float):
        recognized.append(name)
        typer.echo(f"✅ Recognized: {name}")

    engine = SymbolEngine(
        config=engine_config,
        on_tap=on_tap,
        on_attempt=on_attempt,
        on_symbol=on_symbol,
    )
    results = replay_events(engine, events)

    typer.echo(f"\n📼 {len(events)} events, {len(results)} attempts, {len(recognized)} recognized")


def main():
    app()


if __name__ == "__main__":
    main()
