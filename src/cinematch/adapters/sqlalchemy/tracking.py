"""Lookup tracker that persists one metric row per tracked call."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from cinematch.adapters.tracking import measure_call

from .unit_of_work import StartupError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from cinematch.domain.model import LookupMetric
    from cinematch.domain.ports.unit_of_work import CatalogUnitOfWork

log = getLogger(__name__)


class SqlAlchemyLookupTracker:
    """Stores ``LookupMetric`` rows; storage failures never reach the caller."""

    def __init__(self, unit_of_work_factory: Callable[[], CatalogUnitOfWork]) -> None:
        self._uow_factory = unit_of_work_factory

    def track[T](
        self,
        source: str,
        operation: str,
        target: str,
        func: Callable[[], T],
        *,
        fallback_level: int | None = None,
        confidence: float | None = None,
        metadata: Mapping[str, Any] | None = None,
        is_success: Callable[[T], bool] | None = None,
    ) -> T:
        return measure_call(
            source,
            operation,
            target,
            func,
            self._persist,
            fallback_level=fallback_level,
            confidence=confidence,
            metadata=metadata,
            is_success=is_success,
        )

    def _persist(self, metric: LookupMetric) -> None:
        try:
            with self._uow_factory() as uow:
                uow.repositories.lookup_metrics.add(metric)
                uow.commit()
        except (SQLAlchemyError, StartupError) as exc:
            log.warning(
                "Failed to persist lookup metric %s/%s: %s",
                metric.source,
                metric.operation,
                exc,
            )
