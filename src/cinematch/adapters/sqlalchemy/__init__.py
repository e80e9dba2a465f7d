"""SQLAlchemy adapter package for cinematch."""

from __future__ import annotations

from .repositories import (
    SqlAlchemyImportStateRepository,
    SqlAlchemyLocalIdRepository,
    SqlAlchemyLookupMetricRepository,
)
from .tables import (
    api_lookup_metric_table,
    create_all_tables,
    import_state_table,
    metadata,
    movie_table,
    person_table,
)
from .tracking import SqlAlchemyLookupTracker
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyImportStateRepository",
    "SqlAlchemyLocalIdRepository",
    "SqlAlchemyLookupMetricRepository",
    "SqlAlchemyLookupTracker",
    "StartupError",
    "api_lookup_metric_table",
    "create_all_tables",
    "import_state_table",
    "is_started",
    "metadata",
    "movie_table",
    "person_table",
    "shutdown",
    "startup",
]
