"""SymbolEngine - Real-time multi-stroke symbol recognition for pointer input."""

__version__ = "0.1.0"

from symbol_engine.geometry import Point
from symbol_engine.templates import Template, TemplateStore
from symbol_engine.recognizer import Recognizer, RecognitionResult
from symbol_engine.capture import StrokeCapture, CaptureState, Stroke, VisualStroke
from symbol_engine.config import EngineConfig, load_config, save_config
from symbol_engine.engine import SymbolEngine
from symbol_engine.events import PointerEvent, load_events, replay
from symbol_engine.errors import (
    SymbolEngineError,
    EmptyCandidateError,
    InvalidCandidateError,
    TemplateError,
    ConfigError,
)
