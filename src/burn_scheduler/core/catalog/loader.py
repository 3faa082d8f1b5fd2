"""
YAML → ExerciseDefinition catalog loader.

Loads the two raw catalogs bundled in ``src/burn_scheduler/catalogs/``
(facility.yaml, home.yaml).  Each file is a YAML list of raw records in
its own column layout; see normalize.py.

User overrides: place a file with the same name in
``~/.burn-scheduler/catalogs/``.  Its records are merged by exercise
name: a matching name replaces the bundled record, a new name is added.

Records that cannot be normalized are skipped with a warning.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import yaml

from ..models import ExerciseDefinition
from .normalize import CatalogError, normalize_facility_record, normalize_home_record

CATALOG_NAMES: tuple[str, ...] = ("facility", "home")

_NAME_COLUMNS: dict[str, str] = {
    "facility": "Exercise",
    "home": "Exercise Name",
}


@dataclass(frozen=True)
class Catalogs:
    """The two independently filterable exercise pools."""

    facility: list[ExerciseDefinition]
    home: list[ExerciseDefinition]

    def pool(self, kind: str) -> list[ExerciseDefinition]:
        """Return the facility or home pool."""
        if kind == "facility":
            return self.facility
        if kind == "home":
            return self.home
        raise ValueError(f"Invalid catalog kind: {kind!r}. Must be 'facility' or 'home'")

    def find(self, kind: str, name: str) -> ExerciseDefinition | None:
        """Case-insensitive lookup by exercise name."""
        wanted = name.strip().lower()
        for ex in self.pool(kind):
            if ex.name.lower() == wanted:
                return ex
        return None


def _load_yaml_list(path: Path) -> list[dict[str, Any]]:
    """Load a YAML list of records; warn and return [] on parse errors."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"burn-scheduler: cannot read catalog {path} ({exc})", stacklevel=2)
        return []
    if not isinstance(data, list):
        warnings.warn(f"burn-scheduler: catalog {path} is not a list of records", stacklevel=2)
        return []
    return [r for r in data if isinstance(r, dict)]


def _merge_by_name(
    base: list[dict[str, Any]],
    override: list[dict[str, Any]],
    name_column: str,
) -> list[dict[str, Any]]:
    """Replace records with matching names and append new ones (non-destructive)."""
    result = list(base)
    index = {str(r.get(name_column, "")).strip().lower(): i for i, r in enumerate(result)}
    for record in override:
        key = str(record.get(name_column, "")).strip().lower()
        if key in index:
            result[index[key]] = record
        else:
            index[key] = len(result)
            result.append(record)
    return result


def get_bundled_catalogs_dir() -> Path:
    """Return the bundled catalogs/ data directory."""
    # loader.py lives at src/burn_scheduler/core/catalog/loader.py
    return Path(__file__).parent.parent.parent / "catalogs"


def get_user_catalogs_dir() -> Path | None:
    """Return ~/.burn-scheduler/catalogs/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".burn-scheduler" / "catalogs"
    return p if p.is_dir() else None


def normalize_records(
    records: list[dict[str, Any]],
    normalizer: Callable[[dict[str, Any]], ExerciseDefinition],
    source: str,
) -> list[ExerciseDefinition]:
    """Normalize raw records, skipping (with a warning) the ones that fail."""
    result: list[ExerciseDefinition] = []
    for record in records:
        try:
            result.append(normalizer(record))
        except (CatalogError, ValueError) as exc:
            warnings.warn(f"burn-scheduler: skipping {source} record ({exc})", stacklevel=2)
    return result


def load_catalog(
    name: str,
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> list[ExerciseDefinition]:
    """
    Load and normalize one catalog.

    Args:
        name: "facility" or "home"
        bundled_dir: Directory holding ``<name>.yaml`` (default: bundled)
        user_dir: Override directory (default: ~/.burn-scheduler/catalogs)

    Returns:
        Normalized exercises in file order
    """
    if name not in CATALOG_NAMES:
        raise ValueError(f"Unknown catalog {name!r}. Valid: {', '.join(CATALOG_NAMES)}")

    bundled_dir = bundled_dir or get_bundled_catalogs_dir()
    if user_dir is None:
        user_dir = get_user_catalogs_dir()

    records: list[dict[str, Any]] = []
    bundled_path = bundled_dir / f"{name}.yaml"
    if bundled_path.exists():
        records = _load_yaml_list(bundled_path)

    if user_dir is not None:
        user_path = user_dir / f"{name}.yaml"
        if user_path.exists():
            records = _merge_by_name(records, _load_yaml_list(user_path), _NAME_COLUMNS[name])

    normalizer = normalize_facility_record if name == "facility" else normalize_home_record
    return normalize_records(records, normalizer, name)


def load_catalogs(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> Catalogs:
    """
    Load both catalogs.

    Raises:
        RuntimeError: If the facility catalog ends up empty
    """
    facility = load_catalog("facility", bundled_dir, user_dir)
    home = load_catalog("home", bundled_dir, user_dir)
    if not facility:
        raise RuntimeError(
            "burn-scheduler: no facility exercises could be loaded. "
            "Check that src/burn_scheduler/catalogs/facility.yaml is present and valid."
        )
    return Catalogs(facility=facility, home=home)
