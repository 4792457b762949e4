"""SymbolEngine configuration management.

Settings live in a YAML file; unknown keys are ignored with a warning.

Example ``symbol_engine.yml``::

    recognition_threshold: 0.3
    grace_period: 1.5
    templates_file: templates.json
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

import yaml

from symbol_engine.errors import ConfigError

logger = logging.getLogger("symbol_engine.config")

# Range of the "gesture timing" setting, in seconds
MIN_GESTURE_TIMING = 1.0
MAX_GESTURE_TIMING = 5.0


@dataclass
class EngineConfig:
    resample_points: int = 64
    square_size: float = 1.0
    angle_range_degrees: float = 45.0
    angle_precision_degrees: float = 2.0
    grace_period: float = 2.0  # seconds
    min_drag_distance: float = 5.0  # pointer units (pixels)
    fade_time: float = 2.0  # seconds
    max_visual_strokes: int = 2
    recognition_threshold: float = 0.25
    templates_file: Optional[str] = None

    def validate(self) -> EngineConfig:
        """Raise ConfigError if any value is out of range. Returns self."""
        if self.resample_points < 2:
            raise ConfigError(f"resample_points must be >= 2, got {self.resample_points}")
        if self.square_size <= 0:
            raise ConfigError(f"square_size must be positive, got {self.square_size}")
        if not 0 <= self.angle_range_degrees <= 180:
            raise ConfigError(f"angle_range_degrees must be in [0, 180], got {self.angle_range_degrees}")
        if self.angle_precision_degrees <= 0:
            raise ConfigError(f"angle_precision_degrees must be positive, got {self.angle_precision_degrees}")
        if self.grace_period < 0:
            raise ConfigError(f"grace_period must be non-negative, got {self.grace_period}")
        if self.min_drag_distance < 0:
            raise ConfigError(f"min_drag_distance must be non-negative, got {self.min_drag_distance}")
        if self.fade_time < 0:
            raise ConfigError(f"fade_time must be non-negative, got {self.fade_time}")
        if self.max_visual_strokes < 0:
            raise ConfigError(f"max_visual_strokes must be non-negative, got {self.max_visual_strokes}")
        if not 0.0 <= self.recognition_threshold <= 1.0:
            raise ConfigError(f"recognition_threshold must be in [0, 1], got {self.recognition_threshold}")
        return self

    def with_gesture_timing(self, seconds: float) -> EngineConfig:
        """Copy with grace period and fade time both set to ``seconds``.

        The value is clamped to the supported 1–5 second range.
        """
        seconds = min(MAX_GESTURE_TIMING, max(MIN_GESTURE_TIMING, float(seconds)))
        return dataclasses.replace(self, grace_period=seconds, fade_time=seconds)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: str | Path) -> EngineConfig:
    """Load and validate an EngineConfig from a YAML file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    known = {f.name for f in dataclasses.fields(EngineConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))

    try:
        config = EngineConfig(**{k: v for k, v in data.items() if k in known})
    except TypeError as e:
        raise ConfigError(f"{path}: {e}") from e

    if config.templates_file and not Path(config.templates_file).is_absolute():
        # Relative template paths are resolved next to the config file
        config.templates_file = str(path.parent / config.templates_file)

    try:
        return config.validate()
    except TypeError as e:
        raise ConfigError(f"{path}: invalid value type: {e}") from e


def save_config(config: EngineConfig, path: str | Path):
    """Write config to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
