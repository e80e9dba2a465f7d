"""TMDb catalog adapter: API lookups and daily ID exports."""

from __future__ import annotations

from .client import TmdbAPIError, TmdbClient
from .export import ExportUnavailableError, TmdbDailyExport, export_filename
from .lookup import TmdbMovieLookup

__all__ = [
    "ExportUnavailableError",
    "TmdbAPIError",
    "TmdbClient",
    "TmdbDailyExport",
    "TmdbMovieLookup",
    "export_filename",
]
