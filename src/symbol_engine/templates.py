"""Gesture template store — named, pre-normalized point clouds."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from numbers import Real
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Union

import numpy as np
import yaml

from symbol_engine.errors import TemplateError
from symbol_engine.geometry import Point, normalize

logger = logging.getLogger("symbol_engine.templates")


@dataclass(frozen=True)
class Template:
    """A named gesture pattern, stored normalized."""
    name: str
    points: np.ndarray  # shape (N, 2), resampled + centered + scaled
    stroke_count: int = 1


def _to_point(raw: Any, stroke_id: int) -> Point:
    if isinstance(raw, Point):
        return raw.with_stroke_id(stroke_id)
    if isinstance(raw, dict):
        x = raw.get("x", raw.get("X"))
        y = raw.get("y", raw.get("Y"))
        if x is None or y is None:
            raise TemplateError(f"Point is missing coordinates: {raw!r}")
    else:
        try:
            x, y = raw[0], raw[1]
        except (TypeError, IndexError) as e:
            raise TemplateError(f"Invalid point {raw!r}: {e}") from e
    try:
        return Point(float(x), float(y), stroke_id)
    except (TypeError, ValueError) as e:
        raise TemplateError(f"Invalid point {raw!r}: {e}") from e


def _is_point(raw: Any) -> bool:
    if isinstance(raw, (Point, dict)):
        return True
    if isinstance(raw, np.ndarray):
        return raw.ndim == 1
    return isinstance(raw, (list, tuple)) and len(raw) > 0 and isinstance(raw[0], Real)


def points_from_raw(raw: Union[Sequence[Any], np.ndarray]) -> list[Point]:
    """Build a flat point list from a flat or per-stroke definition.

    A flat list of points (``Point``, ``[x, y]`` or ``{"x", "y"}``) keeps
    existing ``Point`` stroke ids and assigns id 1 otherwise. A list of
    per-stroke lists gets sequential stroke ids 1, 2, ...
    """
    if raw is None:
        raise TemplateError("No points given")
    items = list(raw)
    if not items:
        raise TemplateError("No points given")

    if all(_is_point(item) for item in items):
        return [p if isinstance(p, Point) else _to_point(p, 1) for p in items]

    points: list[Point] = []
    for stroke_id, stroke in enumerate(items, start=1):
        if _is_point(stroke):
            raise TemplateError("Cannot mix points and strokes in one definition")
        stroke = list(stroke)
        if not stroke:
            raise TemplateError(f"Stroke {stroke_id} has no points")
        points.extend(_to_point(p, stroke_id) for p in stroke)
    return points


class TemplateStore:
    """Ordered collection of normalized gesture templates.

    Several templates may share a name (e.g. two drawing directions of the
    same symbol); the recognizer scores them all and reports the name.
    """

    def __init__(self, resample_points: int = 64, square_size: float = 1.0):
        if resample_points < 2:
            raise ValueError("resample_points must be at least 2")
        if square_size <= 0:
            raise ValueError("square_size must be positive")
        self.resample_points = resample_points
        self.square_size = square_size
        self._templates: list[Template] = []

    def normalize(self, points) -> np.ndarray:
        """Apply the store's normalization pipeline to raw points."""
        return normalize(points, self.resample_points, self.square_size)

    @property
    def half_diagonal(self) -> float:
        """Half the diagonal of the reference square."""
        return 0.5 * math.hypot(self.square_size, self.square_size)

    def _build(self, name: str, raw_points) -> Template:
        points = points_from_raw(raw_points)
        return Template(
            name=name,
            points=self.normalize(points),
            stroke_count=len({p.stroke_id for p in points}),
        )

    def add(self, name: str, raw_points) -> Template:
        """Normalize ``raw_points`` and store them under ``name``."""
        template = self._build(name, raw_points)
        self._templates.append(template)
        logger.debug("Added template %s (%d strokes)", name, template.stroke_count)
        return template

    def remove(self, name: str) -> int:
        """Remove every template called ``name``. Returns how many were removed."""
        before = len(self._templates)
        self._templates = [t for t in self._templates if t.name != name]
        removed = before - len(self._templates)
        if removed:
            logger.debug("Removed %d template(s) named %s", removed, name)
        return removed

    def all(self) -> list[Template]:
        return list(self._templates)

    def names(self) -> list[str]:
        """Distinct template names in first-insertion order."""
        return list(dict.fromkeys(t.name for t in self._templates))

    def clear(self):
        self._templates.clear()

    def load_from_file(self, path: str | Path) -> Optional[float]:
        """Load template definitions from a JSON or YAML file.

        Expected layout::

            recognitionThreshold: 0.25      # optional
            templates:
              - name: X
                strokes: [[[70, 70], [130, 130]], [[130, 70], [70, 130]]]
              - name: line
                points: [[0, 0], [100, 0]]

        Returns the recognition threshold declared in the file, if any.
        Nothing is added unless the whole file is valid.
        """
        path = Path(path)
        try:
            with open(path) as f:
                if path.suffix.lower() in (".yml", ".yaml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise TemplateError(f"Could not read templates from {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("templates"), list):
            raise TemplateError(f"{path}: expected a mapping with a 'templates' list")

        threshold = data.get("recognitionThreshold", data.get("recognition_threshold"))
        if threshold is not None:
            try:
                threshold = float(threshold)
            except (TypeError, ValueError) as e:
                raise TemplateError(f"{path}: invalid recognition threshold {threshold!r}") from e
            if not 0.0 <= threshold <= 1.0:
                raise TemplateError(f"{path}: recognition threshold must be in [0, 1], got {threshold}")

        loaded: list[Template] = []
        for entry in data["templates"]:
            if not isinstance(entry, dict) or "name" not in entry:
                raise TemplateError(f"{path}: template entry without a name: {entry!r}")
            raw = entry.get("strokes", entry.get("points"))
            loaded.append(self._build(str(entry["name"]), raw))

        self._templates.extend(loaded)
        logger.info("Loaded %d templates from %s", len(loaded), path)
        return threshold

    def add_defaults(self):
        """Register the built-in circle, triangle and two-stroke X."""
        self.add("circle", [
            (100, 50), (120, 60), (135, 80), (140, 100), (135, 120),
            (120, 140), (100, 150), (80, 140), (65, 120), (60, 100),
            (65, 80), (80, 60), (100, 50),
        ])
        self.add("triangle", [(100, 50), (70, 120), (130, 120), (100, 50)])
        self.add("X", [
            [(70, 70), (130, 130)],
            [(130, 70), (70, 130)],
        ])

    @classmethod
    def with_defaults(cls, **kwargs) -> TemplateStore:
        """Create a store holding the built-in templates."""
        store = cls(**kwargs)
        store.add_defaults()
        return store

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(list(self._templates))

    def __contains__(self, name: object) -> bool:
        return any(t.name == name for t in self._templates)
