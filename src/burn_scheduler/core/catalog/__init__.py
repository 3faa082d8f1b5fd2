"""
Exercise catalogs for burn-scheduler.

Two raw catalogs (facility equipment, home bodyweight) are normalized
into one ExerciseDefinition shape and exposed as independent pools.
"""

from .loader import Catalogs, load_catalog, load_catalogs
from .normalize import CatalogError, normalize_facility_record, normalize_home_record

__all__ = [
    "Catalogs",
    "CatalogError",
    "load_catalog",
    "load_catalogs",
    "normalize_facility_record",
    "normalize_home_record",
]
