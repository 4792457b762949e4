"""Pointer-event logs — replay recorded input through stroke capture.

Recorded sessions make capture behaviour reproducible without a pointer
device (tests, CI, demos). A log is a JSON or YAML list of events::

    - {type: down, x: 10, y: 10, t: 0.0}
    - {type: move, x: 60, y: 60, t: 0.1}
    - {type: up, t: 0.2}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import yaml

from symbol_engine.recognizer import RecognitionResult

EVENT_KINDS = ("down", "move", "up", "cancel")


@dataclass
class PointerEvent:
    """A single recorded pointer event."""
    kind: str  # "down", "move", "up", "cancel"
    x: Optional[float] = None
    y: Optional[float] = None
    timestamp: Optional[float] = None  # seconds

    def __post_init__(self):
        if self.kind not in EVENT_KINDS:
            raise ValueError(f"Unknown pointer event kind: {self.kind!r}")
        if self.kind in ("down", "move") and (self.x is None or self.y is None):
            raise ValueError(f"'{self.kind}' event needs x and y")

    def to_dict(self) -> dict:
        data = {"type": self.kind}
        if self.x is not None:
            data["x"] = self.x
            data["y"] = self.y
        if self.timestamp is not None:
            data["t"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: dict) -> PointerEvent:
        kind = data.get("type", data.get("kind"))
        timestamp = data.get("t", data.get("timestamp"))
        x, y = data.get("x"), data.get("y")
        return cls(
            kind=str(kind),
            x=float(x) if x is not None else None,
            y=float(y) if y is not None else None,
            timestamp=float(timestamp) if timestamp is not None else None,
        )


def load_events(path: str | Path) -> list[PointerEvent]:
    """Load a pointer-event log from a JSON or YAML file."""
    path = Path(path)
    with open(path) as f:
        if path.suffix.lower() in (".yml", ".yaml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of events")
    return [PointerEvent.from_dict(entry) for entry in data]


def replay(target, events: Iterable[PointerEvent]) -> list[RecognitionResult]:
    """Feed events to a StrokeCapture or SymbolEngine.

    Returns the recognition results produced by pointer-up events, in order.
    """
    results = []
    for event in events:
        if event.kind == "down":
            target.pointer_down(event.x, event.y, event.timestamp)
        elif event.kind == "move":
            target.pointer_move(event.x, event.y, event.timestamp)
        elif event.kind == "up":
            result = target.pointer_up(event.x, event.y, event.timestamp)
            if result is not None:
                results.append(result)
        elif event.kind == "cancel":
            target.cancel()
    return results
