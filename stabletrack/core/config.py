"""
Configuration for the tracking engine.

Defaults live on the TrackerConfig dataclass. A YAML file can override
them under a ``tracker:`` section, e.g.

    tracker:
      high_confidence_threshold: 0.6
      max_missed_frames: 15
      matcher: bytetrack
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "settings.yaml"

# Annotations are strings under postponed evaluation
_FIELD_TYPES = {
    "float": (int, float),
    "int": int,
    "bool": bool,
    "str": str,
}


@dataclass(frozen=True)
class TrackerConfig:
    """Tracker parameters.

    Attributes:
        high_confidence_threshold: Minimum confidence to spawn a new track
        low_confidence_threshold: Floor for low-confidence matching (cascade matcher only)
        match_threshold: Maximum accepted 1 - IoU cost (gated matchers only)
        max_missed_frames: Consecutive unmatched frames before a track is dropped
        min_hits_to_confirm: Age at which a tentative track is confirmed
        frame_interval: Default prediction step in seconds
        estimate_velocity: Estimate velocity from successive corrections
        matcher: Registry name of the matching strategy
    """
    high_confidence_threshold: float = 0.5
    low_confidence_threshold: float = 0.1
    match_threshold: float = 0.8
    max_missed_frames: int = 30
    min_hits_to_confirm: int = 3
    frame_interval: float = 1.0 / 30.0
    estimate_velocity: bool = False
    matcher: str = "hungarian"

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            expected = _FIELD_TYPES[f.type]
            # bool is an int subclass; keep it out of numeric fields
            if isinstance(value, bool) and expected is not bool:
                raise ValueError(f"{f.name} must be {f.type}, got bool {value!r}")
            if not isinstance(value, expected):
                raise ValueError(f"{f.name} must be {f.type}, got {type(value).__name__} {value!r}")

        for name in ("high_confidence_threshold", "low_confidence_threshold", "match_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.low_confidence_threshold > self.high_confidence_threshold:
            raise ValueError(
                f"low_confidence_threshold ({self.low_confidence_threshold}) must not exceed "
                f"high_confidence_threshold ({self.high_confidence_threshold})"
            )
        if self.max_missed_frames < 1:
            raise ValueError(f"max_missed_frames must be positive, got {self.max_missed_frames}")
        if self.min_hits_to_confirm < 1:
            raise ValueError(f"min_hits_to_confirm must be positive, got {self.min_hits_to_confirm}")
        if self.frame_interval <= 0:
            raise ValueError(f"frame_interval must be positive, got {self.frame_interval}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> TrackerConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown tracker settings: {', '.join(unknown)}")
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> TrackerConfig:
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def load_config(config_path: Optional[Union[str, Path]] = None) -> TrackerConfig:
    """
    Load tracker configuration from a YAML file.

    Falls back to the settings.yaml shipped with the package, then to the
    dataclass defaults.

    Args:
        config_path: Optional path to a YAML file

    Returns:
        TrackerConfig
    """
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ValueError(f"Config file not found: {path}")
    elif DEFAULT_CONFIG_PATH.exists():
        path = DEFAULT_CONFIG_PATH
    else:
        return TrackerConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    section = data.get("tracker", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'tracker' section must be a mapping: {path}")

    logger.debug(f"Loaded tracker config from {path}")
    return TrackerConfig.from_dict(section)
