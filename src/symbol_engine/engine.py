"""High-level engine wiring templates, recognizer and stroke capture together."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from symbol_engine.capture import StrokeCapture
from symbol_engine.config import EngineConfig
from symbol_engine.errors import TemplateError
from symbol_engine.recognizer import RecognitionResult, Recognizer
from symbol_engine.templates import TemplateStore

logger = logging.getLogger("symbol_engine.engine")


class SymbolEngine:
    """Pointer events in, recognized symbols out.

    Every recognition attempt is reported through ``on_attempt``; attempts
    scoring at or above the threshold also fire ``on_symbol``.

    Usage:
        engine = SymbolEngine(on_symbol=lambda name, score: print(name))
        engine.pointer_down(10, 10)
        engine.pointer_move(60, 60)
        engine.pointer_up()
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        store: Optional[TemplateStore] = None,
        on_tap: Optional[Callable[[float, float], None]] = None,
        on_symbol: Optional[Callable[[str, float], None]] = None,
        on_attempt: Optional[Callable[[Optional[str], float], None]] = None,
        on_press: Optional[Callable[[float, float], bool]] = None,
    ):
        self.config = (config or EngineConfig()).validate()
        self.threshold = self.config.recognition_threshold
        self.on_symbol = on_symbol
        self.on_attempt = on_attempt

        if store is None:
            store = TemplateStore(
                resample_points=self.config.resample_points,
                square_size=self.config.square_size,
            )
            self._load_templates(store)
        self.store = store

        self.recognizer = Recognizer(
            store,
            angle_range=self.config.angle_range_degrees,
            angle_precision=self.config.angle_precision_degrees,
        )
        self.capture = StrokeCapture(
            self.recognizer,
            on_tap=on_tap,
            on_recognition=self._on_recognition,
            grace_period=self.config.grace_period,
            min_drag_distance=self.config.min_drag_distance,
            fade_time=self.config.fade_time,
            max_visual_strokes=self.config.max_visual_strokes,
            on_press=on_press,
        )

    def _load_templates(self, store: TemplateStore):
        path = self.config.templates_file
        if not path:
            store.add_defaults()
            return
        try:
            file_threshold = store.load_from_file(path)
        except TemplateError as e:
            logger.error("Failed to load templates: %s. Using built-in templates.", e)
            store.clear()
            store.add_defaults()
            return
        if file_threshold is not None:
            self.threshold = file_threshold

    def _on_recognition(self, name: Optional[str], score: float):
        if self.on_attempt is not None:
            self.on_attempt(name, score)

        if name is not None and score >= self.threshold:
            logger.info("Recognized symbol %s (score=%.2f)", name, score)
            if self.on_symbol is not None:
                self.on_symbol(name, score)
        else:
            logger.debug("Recognition score too low: %s (%.2f < %.2f)", name, score, self.threshold)

    def recognize(self, points) -> RecognitionResult:
        """Recognize points directly, bypassing stroke capture and callbacks."""
        return self.recognizer.recognize(points)

    def pointer_down(self, x: float, y: float, timestamp: Optional[float] = None):
        self.capture.pointer_down(x, y, timestamp)

    def pointer_move(self, x: float, y: float, timestamp: Optional[float] = None):
        self.capture.pointer_move(x, y, timestamp)

    def pointer_up(
        self,
        x: Optional[float] = None,
        y: Optional[float] = None,
        timestamp: Optional[float] = None,
    ) -> Optional[RecognitionResult]:
        return self.capture.pointer_up(x, y, timestamp)

    def cancel(self):
        self.capture.cancel()
