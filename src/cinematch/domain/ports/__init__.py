"""Interfaces the domain expects adapters to provide."""

from __future__ import annotations

from .export import ExportRepository
from .lookup import LookupTracker, MovieLookupClient
from .persistence import ImportStateRepository, LocalIdRepository, LookupMetricRepository
from .unit_of_work import CatalogRepositories, CatalogUnitOfWork

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "ExportRepository",
    "ImportStateRepository",
    "LocalIdRepository",
    "LookupMetricRepository",
    "LookupTracker",
    "MovieLookupClient",
]
