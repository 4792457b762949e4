"""Rotation-invariant point-cloud recognizer.

Candidates are normalized with the same pipeline as the stored templates
(resample, centroid translation, bounding-box scaling) and compared by
mean point distance, searching a bounded range of rotations for each
template. The closest template wins.

Usage:
    store = TemplateStore.with_defaults()
    recognizer = Recognizer(store)
    result = recognizer.recognize(points)
    if result.matched(0.25):
        print(f"Symbol: {result.name} (score={result.score:.2f})")
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from symbol_engine.errors import EmptyCandidateError, InvalidCandidateError
from symbol_engine.geometry import Point, as_array, distance_at_best_angle
from symbol_engine.templates import TemplateStore

logger = logging.getLogger("symbol_engine.recognizer")


@dataclass
class RecognitionResult:
    """Best template match for one candidate."""
    name: Optional[str]  # None when the store is empty
    score: float  # 0–1, higher = better match
    distance: float = math.inf  # winning mean point distance

    def matched(self, threshold: float) -> bool:
        return self.name is not None and self.score >= threshold


class Recognizer:
    """Matches candidate point sequences against a template store.

    Args:
        store: Templates to match against. Changes to the store are seen by
            the next call.
        angle_range: Rotation search half-range in degrees.
        angle_precision: Search stops once the angle bracket is this narrow
            (degrees).
    """

    def __init__(
        self,
        store: TemplateStore,
        angle_range: float = 45.0,
        angle_precision: float = 2.0,
    ):
        if angle_range < 0:
            raise ValueError("angle_range must be non-negative")
        if angle_precision <= 0:
            raise ValueError("angle_precision must be positive")
        self.store = store
        self.angle_range = angle_range
        self.angle_precision = angle_precision

    def recognize(self, candidate_points) -> RecognitionResult:
        """Classify a candidate (one or more strokes as one flat point list)."""
        points = list(candidate_points)
        if not points:
            raise EmptyCandidateError("Cannot recognize an empty candidate")
        bad = [p.stroke_id for p in points if isinstance(p, Point) and p.stroke_id < 1]
        if bad:
            raise InvalidCandidateError(f"Stroke ids must be >= 1, got {bad[0]}")

        templates = self.store.all()
        if not templates:
            logger.warning("Recognition attempted with no templates registered")
            return RecognitionResult(name=None, score=0.0)

        candidate = self.store.normalize(as_array(points))
        angle_range = math.radians(self.angle_range)
        angle_precision = math.radians(self.angle_precision)

        best_name: Optional[str] = None
        best_distance = math.inf
        for template in templates:
            d = distance_at_best_angle(candidate, template.points, angle_range, angle_precision)
            if d < best_distance:
                best_distance = d
                best_name = template.name

        score = 1.0 - best_distance / self.store.half_diagonal
        score = min(1.0, max(0.0, score))

        logger.debug("Best match %s (score=%.3f, distance=%.4f) over %d templates",
                     best_name, score, best_distance, len(templates))
        return RecognitionResult(name=best_name, score=score, distance=best_distance)
