"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, insert, select, update

from .tables import api_lookup_metric_table, import_state_table

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from cinematch.domain.model import LookupMetric


class SqlAlchemyLocalIdRepository:
    """Provider IDs stored in the ``tmdb_id`` column of one catalog table."""

    def __init__(self, session: Session, table: Table) -> None:
        self.session = session
        self._table = table

    def load_ids(self) -> set[int]:
        column = self._table.c.tmdb_id
        stmt = select(column).where(column.is_not(None))
        return set(self.session.execute(stmt).scalars())

    def count_without_external_id(self) -> int:
        stmt = (
            select(func.count())
            .select_from(self._table)
            .where(self._table.c.tmdb_id.is_(None))
        )
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyImportStateRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> str | None:
        stmt = select(import_state_table.c.value).where(import_state_table.c.key == key)
        return self.session.execute(stmt).scalar_one_or_none()

    def set(self, key: str, value: str) -> None:
        now = datetime.now(UTC)
        result = self.session.execute(
            update(import_state_table)
            .where(import_state_table.c.key == key)
            .values(value=value, updated_at=now)
        )
        if result.rowcount == 0:
            self.session.execute(
                insert(import_state_table).values(key=key, value=value, updated_at=now)
            )


class SqlAlchemyLookupMetricRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, metric: LookupMetric) -> None:
        self.session.execute(
            insert(api_lookup_metric_table).values(
                source=metric.source,
                operation=metric.operation,
                target=metric.target,
                success=metric.success,
                response_time_ms=metric.response_time_ms,
                fallback_level=metric.fallback_level,
                confidence=metric.confidence,
                error_type=metric.error_type,
                error_message=metric.error_message,
                metadata=dict(metric.metadata),
                recorded_at=metric.recorded_at,
            )
        )
