"""Tunable engine parameters and JSON override loading.

Config rules:
- Only existing UPPERCASE attributes of EngineConfig can be overridden.
- Values come from JSON or from KEY=VALUE strings (see coerce_scalar).
- Layers apply in order: PENTOS_CONFIG_JSON env var, inline JSON, config file.
  A config file may name a BASE_CONFIG file that it is layered on top of.

Default play is unchanged when no override is given.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pentos_bot.errors import ConfigError


ENV_VAR = "PENTOS_CONFIG_JSON"


class EngineConfig:
    # Scoring, residences and factories
    BASE_BUILDING_SCORE = 10  # per building cell
    PACKING_FACTOR_MULTIPLE = 10  # per open cell around the building
    POND_BONUS_SCORE = 20
    FIELD_BONUS_SCORE = 20
    BUILD_ROAD_PENALTY = 5  # per new road cell
    BUILD_PARK_PENALTY = 5  # per new water/park cell
    ROAD_ADJ_PENALTY = 2  # per road cell next to the building
    PERIMETER_PENALTY = 5  # per constructed cell on the outer ring
    ROAD_ADJ_POND_PENALTY = 5  # per water/park cell next to new road
    MAX_CUTOFF_EXPONENT = 20

    # Factories only
    POND_PENALTY = 5
    FIELD_PENALTY = 5
    FACTORY_BONUS = 5

    # Park/pond planning
    PARKPOND_PACKING_BONUS = 10  # per empty cell around a new park/pond
    AMENITY_SEARCH_DEPTH = 3
    AMENITY_SEGMENT_LENGTH = 4

    # Sweep
    MIN_POTENTIAL_MOVES = 20

    def __init__(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        merged: Dict[str, Any] = dict(overrides or {})
        merged.update(kwargs)
        for key, value in merged.items():
            self._set(key, value)

    @classmethod
    def keys(cls) -> list:
        return sorted(k for k in vars(cls) if k.isupper())

    def _set(self, key: str, value: Any) -> None:
        if not isinstance(key, str) or not key.isupper() or not hasattr(type(self), key):
            raise ConfigError(f"Unknown config key: {key!r}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key} must be an integer, got {value!r}")
        if key in ("AMENITY_SEARCH_DEPTH", "AMENITY_SEGMENT_LENGTH", "MIN_POTENTIAL_MOVES", "MAX_CUTOFF_EXPONENT") and value < 0:
            raise ConfigError(f"{key} must not be negative")
        setattr(self, key, value)

    def as_dict(self) -> Dict[str, int]:
        return {k: getattr(self, k) for k in self.keys()}

    def __repr__(self) -> str:
        changed = {k: v for k, v in self.as_dict().items() if v != getattr(type(self), k)}
        return f"EngineConfig({changed})"


DEFAULT_CONFIG = EngineConfig()


def coerce_scalar(raw: str) -> int:
    """Parse a --set value. Engine parameters are plain integers."""
    s = raw.strip()
    try:
        return int(s)
    except ValueError:
        raise ConfigError(f"Expected an integer, got {raw!r}") from None


def _read_json_object(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from None
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return data


def load_config(path: Optional[str] = None, inline_json: Optional[str] = None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}

    env_json = os.environ.get(ENV_VAR)
    if env_json:
        try:
            cfg.update(json.loads(env_json))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid {ENV_VAR}: {e}") from None

    if inline_json:
        try:
            inline = json.loads(inline_json)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid inline JSON: {e}") from None
        if not isinstance(inline, dict):
            raise ConfigError("Inline config must be a JSON object")
        cfg.update(inline)

    if path:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Config file not found: {p}")
        file_cfg = _read_json_object(p)

        base_path = file_cfg.pop("BASE_CONFIG", None)
        if isinstance(base_path, str) and base_path.strip():
            bp = Path(base_path)
            if not bp.is_absolute():
                # Relative to the config file first, then the working directory.
                bp1 = (p.parent / bp).resolve()
                bp2 = (Path.cwd() / bp).resolve()
                bp = bp1 if bp1.exists() else bp2
            if not bp.exists():
                raise ConfigError(f"Base config file not found: {bp}")
            merged = _read_json_object(bp)
            merged.pop("BASE_CONFIG", None)
            merged.update(file_cfg)
            file_cfg = merged

        cfg.update(file_cfg)

    return cfg
