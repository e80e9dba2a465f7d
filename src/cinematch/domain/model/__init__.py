"""Domain value types."""

from __future__ import annotations

from .catalog import CatalogMovie, EntityKind, ExportEntry, extract_year
from .metrics import LookupMetric

__all__ = [
    "CatalogMovie",
    "EntityKind",
    "ExportEntry",
    "LookupMetric",
    "extract_year",
]
