"""
YAML → scheduler settings loader.

Loads tunables from model.yaml (bundled with the package) and optionally
merges user overrides from ~/.burn-scheduler/model.yaml.

Usage:
    from burn_scheduler.core.engine.config_loader import load_settings
    settings = load_settings()
    settings.horizon_threshold  # 3 unless overridden

If a YAML file cannot be parsed it is ignored with a warning and the
defaults from config.py apply.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import SchedulerSettings

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; warn and return {} on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"burn-scheduler: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled model.yaml, or None if not found."""
    ref = importlib.resources.files("burn_scheduler").joinpath("model.yaml")
    if ref.is_file():
        return Path(str(ref))
    candidate = Path(__file__).parent.parent.parent / "model.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.burn-scheduler/model.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".burn-scheduler" / "model.yaml"
    return p if p.exists() else None


def load_model_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge model configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/burn_scheduler/model.yaml
    2. ``user_path``, or ~/.burn-scheduler/model.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = user_path or get_user_yaml_path()
    if user is not None and user.exists():
        config = _deep_merge(config, _load_yaml_file(user))

    return config


def load_settings(user_path: Path | None = None) -> SchedulerSettings:
    """
    Build SchedulerSettings from the merged YAML configuration.

    Invalid values are reported with a warning and replaced by defaults.
    """
    config = load_model_config(user_path)
    try:
        return SchedulerSettings.from_config(config)
    except (TypeError, ValueError) as exc:
        warnings.warn(f"burn-scheduler: invalid model settings ({exc}); using defaults", stacklevel=2)
        return SchedulerSettings()
