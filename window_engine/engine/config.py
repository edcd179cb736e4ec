"""Engine configuration.

Settings resolve in this order: explicit overrides, WINDOW_ENGINE_* environment
variables, an optional YAML file named by WINDOW_ENGINE_CONFIG, then defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml


DEFAULT_STATE_EVENT_LOG_PATH = Path("logs") / "state" / "events.ndjson"

FIELD_TYPES = {
    "viewport_width": (int, float),
    "viewport_height": (int, float),
    "stack_base": int,
    "default_title": str,
    "state_event_log_path": str,
}

ENV_VARS = {
    "viewport_width": "WINDOW_ENGINE_VIEWPORT_WIDTH",
    "viewport_height": "WINDOW_ENGINE_VIEWPORT_HEIGHT",
    "stack_base": "WINDOW_ENGINE_STACK_BASE",
    "state_event_log_path": "WINDOW_ENGINE_STATE_EVENT_LOG_PATH",
}


@dataclass(frozen=True)
class EngineConfig:
    """Resolved engine settings."""

    viewport_width: float = 1280
    viewport_height: float = 720
    stack_base: int = 1000
    default_title: str = "Window"
    state_event_log_path: Path = DEFAULT_STATE_EVENT_LOG_PATH


def validate_mapping(data: Mapping[str, Any]) -> List[str]:
    """Validate a raw settings mapping. Returns list of error strings."""
    errors = []
    for key, value in data.items():
        if key not in FIELD_TYPES:
            errors.append(f"Unknown setting: {key}")
            continue
        expected = FIELD_TYPES[key]
        # bool is an int subclass but never a valid size or counter
        if isinstance(value, bool) or not isinstance(value, expected):
            errors.append(f"Setting '{key}' has wrong type: {type(value).__name__}")
            continue
        if key in ("viewport_width", "viewport_height") and value <= 0:
            errors.append(f"Setting '{key}' must be positive")
    return errors


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read and validate a YAML settings file."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Config file must be a YAML mapping")
    errors = validate_mapping(data)
    if errors:
        raise ValueError(f"Invalid config {path}: " + "; ".join(errors))
    return data


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, var in ENV_VARS.items():
        raw = environ.get(var)
        if not raw:
            continue
        if key == "state_event_log_path":
            values[key] = raw
            continue
        try:
            values[key] = int(raw) if key == "stack_base" else float(raw)
        except ValueError as exc:
            raise ValueError(f"{var} must be numeric, got {raw!r}") from exc
    errors = validate_mapping(values)
    if errors:
        raise ValueError("Invalid environment settings: " + "; ".join(errors))
    return values


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> EngineConfig:
    """Build an EngineConfig from file, environment and explicit overrides."""
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    config_path = env.get("WINDOW_ENGINE_CONFIG")
    if config_path:
        values.update(load_config_file(Path(config_path)))
    values.update(_env_overrides(env))

    explicit = {k: v for k, v in overrides.items() if v is not None}
    errors = validate_mapping({k: str(v) if isinstance(v, Path) else v for k, v in explicit.items()})
    if errors:
        raise ValueError("Invalid overrides: " + "; ".join(errors))
    values.update(explicit)

    if "state_event_log_path" in values:
        values["state_event_log_path"] = Path(values["state_event_log_path"])
    known = {f.name for f in fields(EngineConfig)}
    return replace(EngineConfig(), **{k: v for k, v in values.items() if k in known})
