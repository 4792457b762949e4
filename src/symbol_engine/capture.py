"""Stroke capture — turns raw pointer events into taps and recognition attempts.

A pointer-down starts a stroke, moves extend it, and pointer-up decides:

- short or stationary press → tap callback, no recognition
- otherwise the stroke is recognized on its own right away, and kept for
  a grace period. If another stroke ends within that window, both are
  submitted together as one two-stroke gesture (stroke ids 1 and 2).

The grace period is a timestamp comparison made when the next stroke
ends; there are no timers.

Usage:
    capture = StrokeCapture(recognizer, on_tap=pop, on_recognition=handle)
    capture.pointer_down(x, y)
    capture.pointer_move(x, y)
    capture.pointer_up(x, y)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from symbol_engine.geometry import Point
from symbol_engine.recognizer import RecognitionResult

logger = logging.getLogger("symbol_engine.capture")


class CaptureState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    AWAITING_SECOND_STROKE = "awaiting_second_stroke"


@dataclass
class Stroke:
    """One pointer-down to pointer-up drag."""
    points: list[Point]
    start_time: float
    end_time: Optional[float] = None

    @property
    def straight_distance(self) -> float:
        """Distance from the first to the last point."""
        return self.points[0].distance_to(self.points[-1])

    def with_stroke_id(self, stroke_id: int) -> Stroke:
        return Stroke(
            points=[p.with_stroke_id(stroke_id) for p in self.points],
            start_time=self.start_time,
            end_time=self.end_time,
        )


@dataclass
class VisualStroke:
    """A finished stroke or tap kept around for fading feedback."""
    points: list[Point]
    start_time: float
    is_tap: bool = False

    def alpha(self, now: float, fade_time: float) -> float:
        """Opacity fading linearly from 1 to 0 over ``fade_time``."""
        if fade_time <= 0:
            return 0.0
        return max(0.0, 1.0 - (now - self.start_time) / fade_time)


class StrokeCapture:
    """Single-pointer stroke capture state machine.

    All state lives on the instance, so each drawing surface gets its own
    machine. Handlers take an optional ``timestamp`` in seconds and use
    ``time.monotonic()`` otherwise.

    Args:
        recognizer: Object with ``recognize(points) -> RecognitionResult``.
        on_tap: Called with ``(x, y)`` for taps.
        on_recognition: Called with ``(name, score)`` after every
            recognition attempt, including low-score ones.
        grace_period: Max seconds between the end of stroke 1 and the end
            of stroke 2 for them to form one gesture (inclusive).
        min_drag_distance: Moves at or below this distance from the last
            point are dropped; strokes spanning no more than this are taps.
        fade_time: Seconds a finished stroke stays in ``visible_strokes``.
        max_visual_strokes: Max finished strokes kept for display; tap
            markers are not counted.
        on_press: Optional interceptor called on pointer-down; returning
            True consumes the press (e.g. a UI button was hit).
    """

    def __init__(
        self,
        recognizer,
        on_tap: Optional[Callable[[float, float], None]] = None,
        on_recognition: Optional[Callable[[Optional[str], float], None]] = None,
        grace_period: float = 2.0,
        min_drag_distance: float = 5.0,
        fade_time: float = 2.0,
        max_visual_strokes: int = 2,
        on_press: Optional[Callable[[float, float], bool]] = None,
    ):
        self.recognizer = recognizer
        self.on_tap = on_tap
        self.on_recognition = on_recognition
        self.on_press = on_press
        self.grace_period = grace_period
        self.min_drag_distance = min_drag_distance
        self.fade_time = fade_time
        self.max_visual_strokes = max_visual_strokes

        self._current: Optional[Stroke] = None
        self._pending: Optional[Stroke] = None
        self._visual: list[VisualStroke] = []

    @staticmethod
    def _now(timestamp: Optional[float]) -> float:
        return timestamp if timestamp is not None else time.monotonic()

    @property
    def state(self) -> CaptureState:
        if self._current is not None:
            return CaptureState.DRAWING
        if self._pending is not None:
            return CaptureState.AWAITING_SECOND_STROKE
        return CaptureState.IDLE

    @property
    def current_stroke(self) -> Optional[Stroke]:
        """The stroke being drawn, if any."""
        return self._current

    @property
    def pending_stroke(self) -> Optional[Stroke]:
        """The last single stroke, still eligible to become stroke 1 of a pair."""
        return self._pending

    def pointer_down(self, x: float, y: float, timestamp: Optional[float] = None):
        if self.on_press is not None and self.on_press(x, y):
            return

        now = self._now(timestamp)
        if self._current is not None:
            logger.debug("Pointer down while drawing, restarting stroke")
        self._current = Stroke(points=[Point(x, y, 1)], start_time=now)

    def pointer_move(self, x: float, y: float, timestamp: Optional[float] = None):
        if self._current is None:
            return

        point = Point(x, y, 1)
        # Only extend if moved enough (keeps jitter out of the buffer)
        if point.distance_to(self._current.points[-1]) > self.min_drag_distance:
            self._current.points.append(point)

    def pointer_up(
        self,
        x: Optional[float] = None,
        y: Optional[float] = None,
        timestamp: Optional[float] = None,
    ) -> Optional[RecognitionResult]:
        """Finish the current stroke.

        Returns the recognition result if the stroke was submitted, or None
        for a tap (or when nothing was being drawn).
        """
        if self._current is None:
            return None

        now = self._now(timestamp)
        stroke = self._current
        self._current = None
        stroke.end_time = now

        if len(stroke.points) <= 1 or stroke.straight_distance <= self.min_drag_distance:
            last = stroke.points[-1]
            tap_x = x if x is not None else last.x
            tap_y = y if y is not None else last.y
            # A tap ends any pending two-stroke wait
            self._pending = None
            self._add_visual(VisualStroke(
                points=[Point(tap_x, tap_y, 0)], start_time=now, is_tap=True,
            ), now)
            logger.debug("Tap at (%.1f, %.1f)", tap_x, tap_y)
            if self.on_tap is not None:
                self.on_tap(tap_x, tap_y)
            return None

        self._add_visual(VisualStroke(points=list(stroke.points), start_time=now), now)

        previous = self._pending
        if previous is not None and now - previous.end_time <= self.grace_period:
            self._pending = None
            second = stroke.with_stroke_id(2)
            logger.debug("Second stroke %.2fs after the first, submitting both",
                         now - previous.end_time)
            return self._submit(previous.points + second.points)

        self._pending = stroke
        return self._submit(list(stroke.points))

    def cancel(self):
        """Drop the in-progress and pending strokes without recognizing."""
        if self._current is not None or self._pending is not None:
            logger.debug("Capture cancelled")
        self._current = None
        self._pending = None
        self._visual.clear()

    def visible_strokes(self, now: Optional[float] = None) -> list[tuple[VisualStroke, float]]:
        """Finished strokes and taps still fading out, with their opacity."""
        now = self._now(now)
        return [
            (v, v.alpha(now, self.fade_time))
            for v in self._visual
            if now - v.start_time < self.fade_time
        ]

    def _add_visual(self, visual: VisualStroke, now: float):
        self._visual = [v for v in self._visual if now - v.start_time < self.fade_time]
        self._visual.append(visual)
        # Tap markers fade on their own and don't count toward the cap
        strokes = [v for v in self._visual if not v.is_tap]
        excess = len(strokes) - max(self.max_visual_strokes, 0)
        if excess > 0:
            dropped = {id(v) for v in strokes[:excess]}
            self._visual = [v for v in self._visual if id(v) not in dropped]

    def _submit(self, points: list[Point]) -> RecognitionResult:
        logger.debug("Attempting recognition with %d points", len(points))
        result = self.recognizer.recognize(points)
        if self.on_recognition is not None:
            self.on_recognition(result.name, result.score)
        return result
