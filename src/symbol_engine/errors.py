"""Exception types raised by SymbolEngine."""

from __future__ import annotations


class SymbolEngineError(Exception):
    """Base class for all SymbolEngine errors."""


class EmptyCandidateError(SymbolEngineError, ValueError):
    """Recognition was asked to classify a candidate with no points."""


class InvalidCandidateError(SymbolEngineError, ValueError):
    """Candidate points are malformed (e.g. stroke ids below 1)."""


class TemplateError(SymbolEngineError):
    """A template definition could not be parsed or loaded."""


class ConfigError(SymbolEngineError):
    """Engine configuration is missing, unreadable or out of range."""
